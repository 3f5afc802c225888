"""Run a build tool subprocess, streaming its output and keeping a copy in a log file."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable

from buildvalidation.core.exceptions import BuildError
from buildvalidation.experiment.experiment_log import get_logger


def run_build(
    command: list[str],
    cwd: Path,
    log_file: Path,
    on_output: Callable[[str], None] | None = None,
) -> tuple[int, str]:
    """Run command in cwd; return (exit code, combined stdout/stderr).

    Every output line is passed to on_output as it arrives and written to log_file.
    Raises BuildError if the executable cannot be started.
    """
    log = get_logger()
    if not Path(cwd).is_dir():
        raise BuildError(f"Build directory does not exist: {cwd}")
    log.info("Running in %s: %s", cwd, " ".join(command))
    try:
        proc = subprocess.Popen(
            command,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )
    except FileNotFoundError as e:
        log.error("Build tool not found: %s", command[0])
        raise BuildError(f"Build tool not found: {command[0]}") from e
    except OSError as e:
        log.error("Unable to start %s: %s", command[0], e)
        raise BuildError(f"Unable to start {command[0]}: {e}") from e

    combined: list[str] = []
    finished = False
    try:
        with open(log_file, "w", encoding="utf-8") as out:
            if proc.stdout:
                for line in proc.stdout:
                    line = line.rstrip("\n")
                    combined.append(line)
                    out.write(line + "\n")
                    if on_output is not None:
                        on_output(line)
        finished = True
    finally:
        # An interrupted or failed read must not leave the build running
        if not finished and proc.poll() is None:
            log.warning("Stopping build process %s", proc.pid)
            proc.kill()
            proc.wait()
        if proc.stdout:
            proc.stdout.close()
    exit_code = proc.wait()
    log.info("Build exited with %s (output: %s)", exit_code, log_file)
    return exit_code, "\n".join(combined)
