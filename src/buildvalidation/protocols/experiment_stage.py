"""Protocol for experiment stages."""

from __future__ import annotations

from typing import Protocol

from buildvalidation.core.schema import ExperimentContext, StageResult


class ExperimentStage(Protocol):
    """Protocol for experiment stages.

    Attributes:
        name: Unique identifier for this stage (also its key in the pipeline order).
    """

    name: str

    def execute(self, context: ExperimentContext) -> StageResult:
        """Run the stage and return a result."""
        ...
