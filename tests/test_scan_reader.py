"""Tests for build scan capture and scans.csv."""

from __future__ import annotations

from pathlib import Path

import pytest

from buildvalidation.core.exceptions import ScanDataError
from buildvalidation.experiment.scan_reader import (
    append_scan,
    find_scan_url,
    parse_scan_url,
    read_scans,
)

from _helpers import build_output, make_scans


def test_find_scan_url_in_gradle_output() -> None:
    assert find_scan_url(build_output("aaaa1111")) == "https://ge.example.com/s/aaaa1111"


def test_find_scan_url_in_maven_output() -> None:
    output = "[INFO] BUILD SUCCESS\n[INFO] Publishing build scan...\n[INFO] https://ge.example.com/s/m4v3n1d\n"
    assert find_scan_url(output) == "https://ge.example.com/s/m4v3n1d"


def test_find_scan_url_takes_last_url() -> None:
    output = "see https://ge.example.com/s/old1\nPublishing build scan...\nhttps://ge.example.com/s/new2."
    assert find_scan_url(output) == "https://ge.example.com/s/new2"


def test_find_scan_url_none_when_not_published() -> None:
    assert find_scan_url("BUILD SUCCESSFUL in 3s\n") is None


def test_parse_scan_url() -> None:
    scan = parse_scan_url("https://ge.example.com/s/abc123", run_num=2, project_name="app")
    assert scan.base_url == "https://ge.example.com"
    assert scan.scan_id == "abc123"
    assert scan.run_num == 2
    assert scan.project_name == "app"


def test_parse_scan_url_keeps_context_path() -> None:
    scan = parse_scan_url("https://example.com/ge/s/abc123", run_num=1)
    assert scan.base_url == "https://example.com/ge"
    assert scan.scan_id == "abc123"


@pytest.mark.parametrize("url", ["not a url", "https://ge.example.com/scans", "https://ge.example.com/s/"])
def test_parse_scan_url_rejects_other_urls(url: str) -> None:
    with pytest.raises(ScanDataError):
        parse_scan_url(url, run_num=1)


def test_read_scans_missing_file_is_empty(tmp_path: Path) -> None:
    assert read_scans(tmp_path / "scans.csv") == []


def test_append_then_read_orders_by_run(tmp_path: Path) -> None:
    scan_file = tmp_path / "exp" / "scans.csv"
    first, second = make_scans()
    append_scan(scan_file, second)
    append_scan(scan_file, first)
    assert read_scans(scan_file) == [first, second]
    assert scan_file.read_text(encoding="utf-8").splitlines()[1] == (
        "1,app,https://ge.example.com,https://ge.example.com/s/aaaa1111,aaaa1111"
    )


def test_read_scans_rejects_wrong_field_count(tmp_path: Path) -> None:
    scan_file = tmp_path / "scans.csv"
    scan_file.write_text("1,app,https://ge.example.com\n")
    with pytest.raises(ScanDataError, match="expected 5 fields"):
        read_scans(scan_file)


def test_read_scans_rejects_bad_run_number(tmp_path: Path) -> None:
    scan_file = tmp_path / "scans.csv"
    scan_file.write_text("first,app,https://ge.example.com,https://ge.example.com/s/x,x\n")
    with pytest.raises(ScanDataError, match="invalid run number"):
        read_scans(scan_file)
