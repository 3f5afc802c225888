"""Configuration loading from .env and YAML."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError

from buildvalidation.core.exceptions import ConfigError

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = "build-validation.yaml"


class GitConfigModel(BaseModel):
    """Git section of config."""

    clone_depth: int = 1
    timeout: int = 600


class BuildConfigModel(BaseModel):
    """Build section of config."""

    use_wrapper: bool = True


class AppConfig(BaseModel):
    """Full application configuration."""

    gradle_enterprise_server: str | None = None
    data_dir: str = "data"
    git: GitConfigModel = Field(default_factory=GitConfigModel)
    build: BuildConfigModel = Field(default_factory=BuildConfigModel)


class ConfigManager:
    """Load and merge configuration from .env and YAML."""

    def __init__(
        self,
        project_root: Path | None = None,
        env_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._root = Path(project_root or Path.cwd()).resolve()
        self._env_path = Path(env_path) if env_path else self._root / ".env"
        self._config_path = Path(config_path) if config_path else self._root / CONFIG_FILE_NAME
        self._config: AppConfig | None = None
        self._env: dict[str, str] = {}

    def load_env(self) -> dict[str, str]:
        """Load .env file into a dict (without modifying os.environ)."""
        try:
            self._env = {k: v for k, v in dotenv_values(self._env_path).items() if v is not None}
        except OSError as e:
            log.warning("Failed to read .env file %s: %s", self._env_path, e)
            self._env = {}
        return self._env

    def load_yaml(self) -> dict[str, Any]:
        """Load YAML config file if it exists."""
        if not self._config_path.exists():
            return {}
        try:
            with open(self._config_path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            log.warning("Failed to read config file %s: %s", self._config_path, e)
            return {}
        except yaml.YAMLError as e:
            log.warning("Malformed YAML in %s: %s", self._config_path, e)
            return {}
        if not isinstance(data, dict):
            log.warning("Ignoring %s: expected a mapping at the top level", self._config_path)
            return {}
        return data

    def load(self) -> AppConfig:
        """Load .env and YAML, merge with defaults, return AppConfig."""
        env = self.load_env()
        yaml_data = self.load_yaml()

        # YAML first, then env overrides
        config_dict: dict[str, Any] = {
            "gradle_enterprise_server": yaml_data.get("gradle_enterprise_server"),
            "data_dir": yaml_data.get("data_dir", "data"),
        }
        env_mapping = {
            "GRADLE_ENTERPRISE_SERVER": "gradle_enterprise_server",
            "BUILD_VALIDATION_DATA_DIR": "data_dir",
        }
        # Process environment wins over the .env file
        for env_key, config_key in env_mapping.items():
            value = os.environ.get(env_key) or env.get(env_key)
            if value:
                config_dict[config_key] = value

        if yaml_data.get("git"):
            config_dict["git"] = yaml_data["git"]
        if yaml_data.get("build"):
            config_dict["build"] = yaml_data["build"]

        try:
            self._config = AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {self._config_path}: {e}") from e
        return self._config

    @property
    def config(self) -> AppConfig:
        """Return loaded config; load if not yet loaded."""
        if self._config is None:
            return self.load()
        return self._config

    @property
    def project_root(self) -> Path:
        return self._root

    def data_dir(self) -> Path:
        """Resolve the experiment data directory (relative paths are under the project root)."""
        path = Path(self.config.data_dir)
        if not path.is_absolute():
            path = self._root / path
        return path
