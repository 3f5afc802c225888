"""Built-in experiment stages."""

from buildvalidation.stages.build_stage import BuildStage
from buildvalidation.stages.cache_stage import CacheStage
from buildvalidation.stages.clone_stage import CloneStage
from buildvalidation.stages.prepare_stage import PrepareStage
from buildvalidation.stages.summary_stage import SummaryStage


def register_builtin_stages(registry) -> None:
    """Register built-in experiment stages on the given registry."""
    registry.register_stage("prepare", PrepareStage)
    registry.register_stage("clone", CloneStage)
    registry.register_stage("cache", CacheStage)
    registry.register_stage("first_build", BuildStage, run_num=1)
    registry.register_stage("second_build", BuildStage, run_num=2)
    registry.register_stage("summary", SummaryStage)


__all__ = [
    "BuildStage",
    "CacheStage",
    "CloneStage",
    "PrepareStage",
    "SummaryStage",
    "register_builtin_stages",
]
