"""Shared utilities for experiment stages."""

from __future__ import annotations

from typing import Any, Callable

from buildvalidation.core.schema import ExperimentContext, StageResult


def get_registry_and_config(
    context: ExperimentContext,
    stage_name: str,
) -> tuple[Any, Any, StageResult | None]:
    """Extract registry and config_manager from the experiment context.

    Returns:
        (registry, config_manager, None) on success.
        (None, None, StageResult) on failure; the caller should return the StageResult.
    """
    registry = context.settings.get("registry")
    config_manager = context.settings.get("config_manager")
    if not registry or not config_manager:
        return None, None, StageResult(
            stage_name=stage_name,
            success=False,
            message="registry or config_manager not set in context.settings",
        )
    return registry, config_manager, None


def get_output_callback(context: ExperimentContext) -> Callable[[str], None]:
    """Console sink for build output and progress lines (no-op when not set)."""
    return context.settings.get("on_output") or (lambda line: None)
