"""Pipeline engine that runs the experiment stages in order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from buildvalidation.core.exceptions import PipelineError
from buildvalidation.core.registry import ComponentRegistry
from buildvalidation.core.schema import ExperimentContext, ExperimentResult

#: Stage order of the local build caching experiment.
DEFAULT_STAGES = ["prepare", "clone", "cache", "first_build", "second_build", "summary"]

StageHook = Callable[[str, ExperimentContext], None]


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution."""

    stages: list[str] = field(default_factory=lambda: list(DEFAULT_STAGES))


class PipelineEngine:
    """Executes experiment stages sequentially; the first failure ends the run."""

    def __init__(
        self,
        registry: ComponentRegistry,
        config: PipelineConfig | None = None,
    ) -> None:
        self._registry = registry
        self._config = config or PipelineConfig()

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def registry(self) -> ComponentRegistry:
        return self._registry

    def run(self, context: ExperimentContext, before_stage: StageHook | None = None) -> ExperimentResult:
        """Run all stages and return the final result.

        ``before_stage`` is called with the stage name and context before each
        stage executes (the interactive wizard uses it to explain each step).
        """
        for stage_name in self._config.stages:
            stage = self._registry.get_stage(stage_name)
            if before_stage is not None:
                before_stage(stage_name, context)
            try:
                result = stage.execute(context)
            except PipelineError:
                raise
            except Exception as e:
                raise PipelineError(f"Stage {stage_name} failed: {e}") from e

            context.update(result)
            if not result.success:
                break

        return context.finalize()
