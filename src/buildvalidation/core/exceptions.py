"""Custom exception hierarchy for build-validation."""

from __future__ import annotations


class BuildValidationError(Exception):
    """Base exception for build-validation."""

    pass


class ConfigError(BuildValidationError):
    """Raised when the experiment configuration is incomplete or invalid."""

    pass


class RegistryError(BuildValidationError):
    """Raised when a build tool or stage is not found."""

    pass


class PipelineError(BuildValidationError):
    """Raised when an experiment stage fails unexpectedly."""

    pass


class GitError(BuildValidationError):
    """Raised when a git operation fails."""

    pass


class BuildError(BuildValidationError):
    """Raised when the build tool cannot be invoked."""

    pass


class ScanDataError(BuildValidationError):
    """Raised when the captured build scan data cannot be read."""

    pass
