"""Capture published build scans from build output and persist them in scans.csv."""

from __future__ import annotations

import csv
import re
from pathlib import Path
from urllib.parse import urlsplit

from buildvalidation.core.exceptions import ScanDataError
from buildvalidation.core.schema import BuildScanInfo

SCAN_FILE_NAME = "scans.csv"

#: Column order of scans.csv.
FIELDS = ("run_num", "project_name", "base_url", "scan_url", "scan_id")

# Gradle prints the URL on its own line after "Publishing build scan...";
# Maven prefixes it with "[INFO] ".
_RE_SCAN_URL = re.compile(r"https?://\S+?/s/[A-Za-z0-9]+")


def find_scan_url(output: str) -> str | None:
    """Return the last build scan URL printed in the build output, if any."""
    matches = _RE_SCAN_URL.findall(output)
    return matches[-1] if matches else None


def parse_scan_url(scan_url: str, run_num: int, project_name: str = "") -> BuildScanInfo:
    """Split a scan URL into base URL and scan id.

    The base URL keeps any context path before ``/s/`` so that dashboard
    links work for servers not hosted at the root.
    """
    parts = urlsplit(scan_url)
    prefix, sep, rest = parts.path.rpartition("/s/")
    scan_id = rest.strip("/").split("/", 1)[0]
    if not parts.scheme or not parts.netloc or not sep or not scan_id:
        raise ScanDataError(f"Not a build scan URL: {scan_url}")
    return BuildScanInfo(
        run_num=run_num,
        project_name=project_name,
        base_url=f"{parts.scheme}://{parts.netloc}{prefix}",
        scan_url=scan_url,
        scan_id=scan_id,
    )


def append_scan(scan_file: Path, scan: BuildScanInfo) -> None:
    """Append one scan record to scan_file."""
    scan_file.parent.mkdir(parents=True, exist_ok=True)
    with open(scan_file, "a", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow([scan.run_num, scan.project_name, scan.base_url, scan.scan_url, scan.scan_id])


def read_scans(scan_file: Path) -> list[BuildScanInfo]:
    """Read all scan records, ordered by run number. A missing file means no scans."""
    if not scan_file.exists():
        return []
    scans: list[BuildScanInfo] = []
    with open(scan_file, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.reader(f), start=1):
            if not row:
                continue
            if len(row) != len(FIELDS):
                raise ScanDataError(
                    f"{scan_file}:{line_no}: expected {len(FIELDS)} fields, got {len(row)}"
                )
            try:
                run_num = int(row[0])
            except ValueError as e:
                raise ScanDataError(f"{scan_file}:{line_no}: invalid run number {row[0]!r}") from e
            scans.append(
                BuildScanInfo(
                    run_num=run_num,
                    project_name=row[1],
                    base_url=row[2],
                    scan_url=row[3],
                    scan_id=row[4],
                )
            )
    return sorted(scans, key=lambda s: s.run_num)
