"""Cache stage: empty local build cache directory for this experiment."""

from __future__ import annotations

from buildvalidation.core.schema import ExperimentContext, StageResult
from buildvalidation.experiment import workspace


class CacheStage:
    """Creates (or recreates) the experiment's local build cache directory."""

    name = "cache"

    def execute(self, context: ExperimentContext) -> StageResult:
        if context.experiment_dir is None:
            return StageResult(stage_name=self.name, success=False, message="experiment_dir not set in context")
        cache_dir = context.build_cache_dir or context.experiment_dir / workspace.BUILD_CACHE_DIR_NAME
        try:
            workspace.make_local_cache_dir(cache_dir)
        except OSError as e:
            return StageResult(
                stage_name=self.name,
                success=False,
                message=f"Unable to create local build cache dir {cache_dir}: {e}",
            )
        return StageResult(stage_name=self.name, data={"build_cache_dir": cache_dir})
