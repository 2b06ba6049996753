"""Configuration management for sitesearch.

Settings come from YAML files merged in precedence order, then
environment variables, and are validated into typed msgspec structs.
"""

import logging
import os
from pathlib import Path
from typing import Annotated, Any, Literal

import msgspec
import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)


class IndexSettings(msgspec.Struct, kw_only=True):
    """Settings for building the full-text index."""

    fields: list[str] = msgspec.field(
        default_factory=lambda: ["title", "description", "category", "tags"]
    )
    field_weights: dict[str, float] = msgspec.field(
        default_factory=lambda: {
            "title": 2.0,
            "tags": 1.5,
            "description": 1.0,
            "category": 0.5,
        }
    )
    stemmer: Literal["none", "porter"] = "none"
    stop_words: str | list[str] = "default"
    k1: Annotated[float, msgspec.Meta(ge=0)] = 1.2
    b: Annotated[float, msgspec.Meta(ge=0, le=1)] = 0.75


class FuzzySettings(msgspec.Struct, kw_only=True):
    """Settings for fuzzy command matching."""

    threshold: Annotated[float, msgspec.Meta(ge=0, le=1)] = 0.0
    case_sensitive: bool = False
    highlight_markers: tuple[str, str] = ("<mark>", "</mark>")

    def match_options(self) -> dict[str, Any]:
        """Keyword options for fuzzy_match and friends."""
        return {
            "threshold": self.threshold,
            "case_sensitive": self.case_sensitive,
            "highlight_markers": self.highlight_markers,
        }


class Settings(msgspec.Struct, kw_only=True):
    """Root configuration for sitesearch."""

    manifest: str | None = None
    limit: Annotated[int, msgspec.Meta(ge=1)] = 10
    threshold: Annotated[float, msgspec.Meta(ge=0)] = 0.0
    snippet_length: Annotated[int, msgspec.Meta(ge=10)] = 160
    index: IndexSettings = msgspec.field(default_factory=IndexSettings)
    fuzzy: FuzzySettings = msgspec.field(default_factory=FuzzySettings)


class Config:
    """Loading and merging of YAML configuration files."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ConfigError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "sitesearch" / "config.yaml")

        # Project config
        paths.append(Path(".sitesearch.yaml"))
        paths.append(Path("sitesearch.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def get_config_paths() -> list[Path]:
    """Get configuration paths in precedence order."""
    return Config.get_config_paths()


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if manifest := os.environ.get("SITESEARCH_MANIFEST"):
        overrides["manifest"] = manifest
    if limit := os.environ.get("SITESEARCH_LIMIT"):
        overrides["limit"] = limit
    if stemmer := os.environ.get("SITESEARCH_STEMMER"):
        overrides["index"] = {"stemmer": stemmer.lower()}
    return overrides


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load raw configuration from files and environment variables.

    Args:
        config_path: Explicit config file, applied after the default paths

    Returns:
        Merged configuration dictionary
    """
    config: dict[str, Any] = {}

    for path in get_config_paths():
        if path.exists():
            try:
                config = Config.merge_configs(config, Config.from_file(path))
            except ConfigError as e:
                logger.warning("Skipping config file %s: %s", path, e)

    if config_path is not None:
        config = Config.merge_configs(config, Config.from_file(config_path))

    return Config.merge_configs(config, _env_overrides())


def parse_settings(data: dict[str, Any]) -> Settings:
    """Validate a configuration dictionary into Settings.

    Raises:
        ConfigError: If any value has the wrong type or is out of range
    """
    try:
        return msgspec.convert(data, Settings, strict=False)
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_settings(config_path: Path | None = None) -> Settings:
    """Load and validate settings."""
    return parse_settings(load_config(config_path))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
