"""build-validation: check whether Gradle and Maven builds use the local build cache effectively."""

__version__ = "0.1.0"
