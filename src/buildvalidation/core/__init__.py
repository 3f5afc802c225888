"""Framework core: registry, pipeline, schema, config, health."""

from buildvalidation.core.config import AppConfig, ConfigManager
from buildvalidation.core.health import HealthChecker, HealthCheckResult
from buildvalidation.core.pipeline import PipelineConfig, PipelineEngine
from buildvalidation.core.registry import ComponentRegistry
from buildvalidation.core.schema import (
    BuildScanInfo,
    CustomData,
    ExperimentConfig,
    ExperimentContext,
    ExperimentResult,
    StageResult,
)

__all__ = [
    "AppConfig",
    "BuildScanInfo",
    "ComponentRegistry",
    "ConfigManager",
    "CustomData",
    "ExperimentConfig",
    "ExperimentContext",
    "ExperimentResult",
    "HealthCheckResult",
    "HealthChecker",
    "PipelineConfig",
    "PipelineEngine",
    "StageResult",
]
