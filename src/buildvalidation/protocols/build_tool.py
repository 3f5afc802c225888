"""Protocol for build tools (Gradle, Maven)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class BuildTool(Protocol):
    """Protocol for a build tool the experiment can drive.

    Attributes:
        name: Registry key (``gradle``, ``maven``).
        display_name: Human-readable tool name.
        work_unit: What the tool executes (``task`` or ``goal``).
        scan_tag: Experiment id attached to build scans as a tag.
    """

    name: str
    display_name: str
    work_unit: str
    scan_tag: str

    def executable(self, build_dir: Path, use_wrapper: bool = True) -> str:
        """Return the wrapper script in build_dir if present, else the tool on PATH."""
        ...

    def build_args(
        self,
        run_num: int,
        cache_dir: Path,
        tasks: list[str],
        system_properties: list[str],
        extra_args: list[str],
        server: str | None = None,
    ) -> list[str]:
        """Return arguments for one build run (without the executable)."""
        ...

    def quick_links(self, base_url: str, first_scan_id: str, second_scan_id: str) -> list[tuple[str, str]]:
        """Return (label, url) investigation links for the two scans."""
        ...
