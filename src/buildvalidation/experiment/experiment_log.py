"""Logging for an experiment run: commands, build results, captured scans."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

LOGGER_NAME = "buildvalidation.experiment"


def get_logger() -> logging.Logger:
    """Return the experiment logger."""
    return logging.getLogger(LOGGER_NAME)


@contextmanager
def experiment_log_context(
    log_file: Path,
    debug: bool = False,
) -> Generator[logging.Logger, None, None]:
    """
    Attach a file handler to the experiment logger for the duration of the context.
    Log file is UTF-8; format: timestamp [LEVEL] message.
    """
    logger = get_logger()
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        handler.close()
