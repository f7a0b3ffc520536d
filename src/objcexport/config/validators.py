"""
Configuration validation utilities.

Each `[section]` of config.toml is validated into its dataclass. Missing
keys take the dataclass defaults; present keys must be well-formed.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import (
    AppConfig,
    ConsoleConfig,
    EngineConfig,
    StoreConfig,
    TemplateConfig,
)
from ..validation import (
    ValidationError,
    validate_command,
    validate_enum_choice,
    validate_positive_float,
    validate_string_list,
)

logger = logging.getLogger(__name__)

MESSAGE_OUTPUT_LEVELS = ["error", "warning", "info", "debug"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value,
        )
    return value.strip()


def validate_template_config(template_data: Dict[str, Any]) -> TemplateConfig:
    defaults = TemplateConfig()

    uri = _non_empty_string(template_data.get("uri", defaults.uri), "template.uri")

    scratch_name = _non_empty_string(
        template_data.get("scratch_name", defaults.scratch_name), "template.scratch_name"
    )
    if "/" in scratch_name or "\\" in scratch_name:
        raise ValidationError(
            "template.scratch_name must be a plain file name",
            field_name="template.scratch_name",
            value=scratch_name,
        )

    fetch_timeout = validate_positive_float(
        template_data.get("fetch_timeout", defaults.fetch_timeout),
        min_value=0.1,
        max_value=600.0,
        field_name="template.fetch_timeout",
    )

    return TemplateConfig(uri=uri, scratch_name=scratch_name, fetch_timeout=fetch_timeout)


def validate_engine_config(engine_data: Dict[str, Any]) -> EngineConfig:
    defaults = EngineConfig()

    command = validate_command(engine_data.get("command", defaults.command), field_name="engine.command")
    message_output_level = validate_enum_choice(
        engine_data.get("message_output_level", defaults.message_output_level),
        choices=MESSAGE_OUTPUT_LEVELS,
        field_name="engine.message_output_level",
        case_sensitive=False,
    )
    extra_args = validate_string_list(
        engine_data.get("extra_args", defaults.extra_args), field_name="engine.extra_args"
    )

    return EngineConfig(command=command, message_output_level=message_output_level, extra_args=extra_args)


def validate_console_config(console_data: Dict[str, Any]) -> ConsoleConfig:
    target = _non_empty_string(console_data.get("target", ConsoleConfig().target), "console.target")
    return ConsoleConfig(target=target)


def validate_store_config(store_data: Dict[str, Any], config_dir: Path) -> StoreConfig:
    """
    Validate the store section. Relative paths resolve against the config file's directory.
    """
    raw_path = store_data.get("path")
    if raw_path is None:
        return StoreConfig()

    path = Path(_non_empty_string(raw_path, "store.path")).expanduser()
    if not path.is_absolute():
        path = config_dir / path
    return StoreConfig(path=path)


def validate_app_config(config_data: Dict[str, Any], config_dir: Path) -> AppConfig:
    """
    Validate and create an AppConfig from raw configuration data.

    Args:
        config_data: Raw configuration parsed from TOML
        config_dir: Directory containing the configuration file

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If validation fails
    """
    for section in ("template", "engine", "console", "store", "logging"):
        if not isinstance(config_data.get(section, {}), dict):
            raise ValidationError(f"[{section}] must be a table", field_name=section)

    log_level = validate_enum_choice(
        config_data.get("logging", {}).get("level", "INFO"),
        choices=LOG_LEVELS,
        field_name="logging.level",
        case_sensitive=False,
    )

    app_config = AppConfig(
        template=validate_template_config(config_data.get("template", {})),
        engine=validate_engine_config(config_data.get("engine", {})),
        console=validate_console_config(config_data.get("console", {})),
        store=validate_store_config(config_data.get("store", {}), config_dir),
        log_level=log_level,
    )
    logger.debug(f"Validated configuration: {app_config}")
    return app_config
