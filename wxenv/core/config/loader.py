"""
Configuration loader — reads wxenv.yml into SetupConfig.

The file is optional.  When present it must be a YAML mapping that
validates against the Pydantic schema; anything else is a
ConfigError.  CLI flags and environment variables are applied on top
by the caller.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from wxenv.core.models.config import SetupConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "wxenv.yml"


class ConfigError(Exception):
    """Raised when wxenv.yml is unreadable or invalid."""

    exit_code: int = 1


def config_path(install_root: Path) -> Path:
    """Location of the config file for *install_root*."""
    return Path(install_root) / CONFIG_FILE


def load_config(install_root: Path, path: Path | None = None) -> SetupConfig:
    """Load and validate the install root's configuration.

    Args:
        install_root: Directory that may contain ``wxenv.yml``.
        path: Explicit config path (overrides the default location).

    Returns:
        SetupConfig.  Defaults when no file exists.

    Raises:
        ConfigError: If the file cannot be read, is not valid YAML,
            is not a mapping, or fails validation.
    """
    path = path or config_path(install_root)
    if not path.is_file():
        logger.debug("No %s at %s, using defaults", CONFIG_FILE, path.parent)
        return SetupConfig()

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    # An empty file is the same as no file
    if data is None:
        return SetupConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = SetupConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded configuration from %s", path)
    return config
