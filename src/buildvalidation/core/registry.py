"""Central registry for build tools and experiment stages."""

from __future__ import annotations

import logging
from typing import Any

from buildvalidation.core.exceptions import RegistryError
from buildvalidation.protocols import BuildTool, ExperimentStage

log = logging.getLogger(__name__)


class ComponentRegistry:
    """Central registry for build tools and experiment stages."""

    def __init__(self) -> None:
        self._tools: dict[str, type[BuildTool]] = {}
        self._stages: dict[str, type[ExperimentStage]] = {}
        self._stage_options: dict[str, dict[str, Any]] = {}

    def register_tool(self, name: str, cls: type[BuildTool]) -> None:
        """Register a build tool class."""
        if name in self._tools:
            log.warning("Overwriting build tool registration: %s", name)
        self._tools[name] = cls

    def register_stage(self, name: str, cls: type[ExperimentStage], **options: Any) -> None:
        """Register an experiment stage class; options are passed to its constructor."""
        if name in self._stages:
            log.warning("Overwriting stage registration: %s", name)
        self._stages[name] = cls
        if options:
            self._stage_options[name] = options

    def get_tool(self, name: str) -> BuildTool:
        """Get a build tool instance by name."""
        if name not in self._tools:
            raise RegistryError(f"Unknown build tool: {name}")
        return self._tools[name]()

    def get_stage(self, name: str) -> ExperimentStage:
        """Get an experiment stage instance by name."""
        if name not in self._stages:
            raise RegistryError(f"Unknown experiment stage: {name}")
        cls = self._stages[name]
        return cls(**self._stage_options.get(name, {}))  # type: ignore[call-arg]

    def list_available(self) -> dict[str, list[str]]:
        """Return all registered component names by category."""
        return {
            "tools": list(self._tools),
            "stages": list(self._stages),
        }
