"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig
from ..validation import ErrorSeverity, handle_config_error
from .validators import validate_app_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default path of the main configuration file, relative to this script's location.
# Overridden by the CLI --config option and by tests.
_DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Clears any cached configuration so the next get_config() reloads.
    A path set here must exist; only the built-in default may be absent.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def reset_config_path() -> None:
    """Restore the default configuration path and clear the cache."""
    global _CONFIG_FILE_PATH
    _CONFIG_FILE_PATH = _DEFAULT_CONFIG_FILE_PATH
    clear_config_cache()


def _load_config(config_path: Path) -> AppConfig:
    """
    Load and validate the application configuration.

    Raises:
        FileNotFoundError: If an explicitly configured file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if config_path == _DEFAULT_CONFIG_FILE_PATH and not config_path.exists():
        logger.info(f"No configuration file at {config_path}, using built-in defaults")
        return AppConfig()

    try:
        with open(config_path, "rb") as f:
            config_data = tomllib.load(f)
        app_config = validate_app_config(config_data, config_path.parent)
        logger.info(f"Successfully loaded configuration from {config_path}")
        return app_config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton AppConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None


def get_config_info() -> dict:
    """Get information about the current configuration state."""
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "template_uri": _CONFIG.template.uri if _CONFIG else None,
    }
