"""
Configuration loader — reads compose-manager.yml into DiscoveryConfig.

This is the primary entry point for loading discovery configuration.
It reads YAML, applies ``DCM_*`` environment overrides, validates
against the Pydantic schema, and returns a typed config object.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "compose-manager.yml"

# env var → config field
_ENV_OVERRIDES = {
    "DCM_ROOT_PATH": "root_path",
    "DCM_SCAN_DEPTH_LIMIT": "scan_depth_limit",
    "DCM_CACHE_TTL_SECONDS": "cache_ttl_seconds",
    "DCM_HOST_PATH_MAPPING": "host_path_mapping",
    "DCM_MAX_FILE_SIZE_KB": "max_file_size_kb",
    "DCM_SELF_PROJECT_NAME": "self_project_name",
}


class ConfigError(Exception):
    """Raised when discovery configuration is invalid or unreadable."""


class DiscoveryConfig(BaseModel):
    """Settings for compose file discovery and host path translation."""

    root_path: str = "/app/compose-files"
    scan_depth_limit: int = Field(default=5, ge=0)
    cache_ttl_seconds: int = Field(default=10, ge=0)

    # Host directory mounted at root_path, e.g. "C:\\Users\\me\\compose"
    # or "/home/me/compose". Used to translate paths reported by Docker.
    host_path_mapping: str | None = None

    max_file_size_kb: int = Field(default=1024, ge=1)
    self_project_name: str | None = None
    docker_timeout_seconds: int = Field(default=30, ge=1)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for compose-manager.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to compose-manager.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> DiscoveryConfig:
    """Load and validate discovery configuration.

    Args:
        path: Explicit path to compose-manager.yml. If None, searches upward;
            when nothing is found the defaults are used.
        env: Environment mapping for overrides (default: ``os.environ``).

    Returns:
        Validated DiscoveryConfig.

    Raises:
        ConfigError: If the file is unreadable or the values are invalid.
    """
    if path is None:
        path = find_config_file()

    data: dict = {}
    if path is not None:
        data = _read_config_file(path)

    for var, field in _ENV_OVERRIDES.items():
        value = (env if env is not None else os.environ).get(var)
        if value:
            data[field] = value

    try:
        config = DiscoveryConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid discovery configuration: {e}") from e

    logger.debug(
        "Discovery config: root=%s depth=%d ttl=%ds mapping=%s",
        config.root_path,
        config.scan_depth_limit,
        config.cache_ttl_seconds,
        config.host_path_mapping,
    )
    return config


def _read_config_file(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading discovery config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except Exception as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "discovery" key or be flat
    section = data.get("discovery", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'discovery' to be a mapping in {path}")
    return dict(section)
