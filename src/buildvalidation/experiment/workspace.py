"""Experiment directory layout: experiment dir, local build cache dir, run id."""

from __future__ import annotations

import shutil
import time
from pathlib import Path

from buildvalidation.experiment.experiment_log import get_logger

EXPERIMENT_NO = "02"
EXPERIMENT_NAME = "Validate Build Caching - Local - In Place"
EXPERIMENT_SLUG = "02-validate-build-caching-local-in-place"

BUILD_CACHE_DIR_NAME = "build-cache"
LOG_FILE_NAME = "experiment.log"


def generate_run_id(now: float | None = None) -> str:
    """Unique id of one experiment run: lowercase hex of the Unix time in seconds."""
    return format(int(time.time() if now is None else now), "x")


def experiment_dir(data_dir: Path, tool_name: str) -> Path:
    """Directory holding everything one experiment run writes for the given tool."""
    return Path(data_dir) / tool_name / EXPERIMENT_SLUG


def build_log_file(exp_dir: Path, run_num: int) -> Path:
    return Path(exp_dir) / f"build-{run_num}.log"


def make_experiment_dir(exp_dir: Path, scan_file: Path) -> Path:
    """Create the experiment dir and remove scan data and build logs left by earlier runs."""
    log = get_logger()
    exp_dir = Path(exp_dir)
    exp_dir.mkdir(parents=True, exist_ok=True)
    stale = [scan_file, *exp_dir.glob("build-*.log")]
    for path in stale:
        if path.is_file():
            log.debug("Removing stale file %s", path)
            path.unlink()
    return exp_dir


def make_local_cache_dir(cache_dir: Path) -> Path:
    """Create an empty local build cache dir, deleting one left by an earlier run."""
    log = get_logger()
    cache_dir = Path(cache_dir)
    if cache_dir.exists():
        log.info("Deleting existing local build cache: %s", cache_dir)
        shutil.rmtree(cache_dir)
    cache_dir.mkdir(parents=True)
    return cache_dir
