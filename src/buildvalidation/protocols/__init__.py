"""Protocols for build tools and experiment stages."""

from buildvalidation.protocols.build_tool import BuildTool
from buildvalidation.protocols.experiment_stage import ExperimentStage

__all__ = [
    "BuildTool",
    "ExperimentStage",
]
