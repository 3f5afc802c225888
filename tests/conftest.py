"""Shared pytest fixtures for build-validation tests.

Factory functions live in ``_helpers.py``; this module re-exports them as
pytest fixtures so tests can receive them via dependency injection.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from buildvalidation.core.config import ConfigManager
from buildvalidation.core.registry import ComponentRegistry
from buildvalidation.core.schema import BuildScanInfo

from _helpers import make_config_manager, make_registry, make_scans


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI and server variables of the machine running the tests out of the results."""
    for var in (
        "GRADLE_ENTERPRISE_SERVER",
        "BUILD_VALIDATION_DATA_DIR",
        "BUILD_URL",
        "BUILD_NUMBER",
        "JOB_NAME",
        "STAGE_NAME",
        "CI_BUILD_URL",
        "CIRCLE_BUILD_URL",
        "bamboo_resultsUrl",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture()
def config_manager(tmp_path: Path) -> ConfigManager:
    """A real ConfigManager backed by default config (no YAML/env file)."""
    return make_config_manager(tmp_path)


@pytest.fixture()
def registry() -> ComponentRegistry:
    """A registry with the built-in tools and stages."""
    return make_registry()


@pytest.fixture()
def scans() -> list[BuildScanInfo]:
    """Scan records of both builds."""
    return make_scans()
