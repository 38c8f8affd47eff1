"""
Configuration management for sortcheck.

Configuration is loaded from:
1. Environment variables (highest priority), e.g. SORTCHECK_RULES__RULES_PATH
2. A YAML file: $SORTCHECK_CONFIG, sortcheck.yaml, config/sortcheck.yaml
   or ~/.config/sortcheck/config.yaml
3. Default values (lowest priority)
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .exceptions import ConfigurationError

CONFIG_ENV_VAR = "SORTCHECK_CONFIG"


class RulesSettings(BaseModel):
    """
    Locations of the published rule data.

    Leave unset to use the tables bundled with the package. Point them at
    a newer valacdos.txt / scsubtab.txt release to pick up VocaLink updates.
    """

    rules_path: Path | None = None
    substitutions_path: Path | None = None


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    json_format: bool = False
    file: Path | None = None


class Settings(BaseSettings):
    """Main settings class that combines all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="SORTCHECK_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # YAML values arrive as init kwargs; environment variables override them
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def config_candidates() -> list[Path]:
    """YAML locations searched when no explicit path is given, in order."""
    candidates = []
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit))
    candidates.extend([
        Path("sortcheck.yaml"),
        Path("config/sortcheck.yaml"),
        Path.home() / ".config" / "sortcheck" / "config.yaml",
    ])
    return candidates


def load_yaml_config(path: Path | None = None) -> dict:
    """
    Load configuration from a YAML file.

    Returns an empty dict when no file exists.

    Raises:
        ConfigurationError: The file cannot be read or is not a mapping
    """
    if path is None:
        for candidate in config_candidates():
            if candidate.exists():
                path = candidate
                break

    if path is None or not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping, got {type(data).__name__}"
        )
    return data


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings(**load_yaml_config())


def reload_settings() -> Settings:
    """Force reload of settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
