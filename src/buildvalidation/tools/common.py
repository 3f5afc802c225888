"""Helpers shared by the Gradle and Maven tools."""

from __future__ import annotations

import os
import shutil
from pathlib import Path


def find_executable(build_dir: Path, wrapper: str, tool: str, use_wrapper: bool = True) -> str:
    """Return the wrapper script in build_dir if present, else the tool found on PATH (or its bare name)."""
    if use_wrapper:
        names = [f"{wrapper}.cmd", f"{wrapper}.bat"] if os.name == "nt" else [wrapper]
        for name in names:
            candidate = Path(build_dir) / name
            if candidate.is_file():
                return str(candidate)
    return shutil.which(tool) or tool


def quick_link(base_url: str, path: str) -> str:
    """Join the server base URL and a dashboard path."""
    return base_url.rstrip("/") + path
