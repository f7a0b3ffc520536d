"""
Validation functions for configuration values and CLI arguments.
"""

import os
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from .exceptions import ValidationError


def validate_positive_float(
    value: Any,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
    field_name: str = "value"
) -> float:
    """
    Validate that a value is a positive float.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated

    Returns:
        Validated float value

    Raises:
        ValidationError: If validation fails
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        float_value = float(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid number, got {value}",
            field_name=field_name,
            value=value
        )
    if float_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and float_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {float_value}",
            field_name=field_name,
            value=value
        )
    return float_value


def validate_path_exists(path: Union[str, Path], field_name: str = "path") -> str:
    """
    Validate that a path exists.

    Args:
        path: Path to validate
        field_name: Name of the field being validated

    Returns:
        Validated path string

    Raises:
        ValidationError: If path doesn't exist
    """
    path_str = str(path)
    if not os.path.exists(path_str):
        raise ValidationError(
            f"{field_name} does not exist: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return path_str


def validate_directory(path: Union[str, Path], field_name: str = "directory") -> Path:
    """Validate that a path exists and is a directory."""
    path_str = validate_path_exists(path, field_name=field_name)
    if not os.path.isdir(path_str):
        raise ValidationError(
            f"{field_name} is not a directory: {path_str}",
            field_name=field_name,
            value=path_str
        )
    return Path(path_str)


def validate_project_name(name: str, field_name: str = "project_name") -> str:
    """
    Validate project name format.

    Project names double as store keys and file name prefixes, so path
    separators and leading dots are rejected.

    Raises:
        ValidationError: If name is invalid
    """
    if not name or not isinstance(name, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=name
        )

    if not re.match(r'^[a-zA-Z0-9_][a-zA-Z0-9_. -]*$', name):
        raise ValidationError(
            f"{field_name} must start with an alphanumeric character or underscore "
            f"and contain only alphanumerics, underscores, hyphens, dots and spaces: {name}",
            field_name=field_name,
            value=name
        )

    return name


def validate_command(command: Any, field_name: str = "command") -> List[str]:
    """Validate a command given as a non-empty list of strings."""
    if isinstance(command, str):
        command = command.split()
    if not isinstance(command, list) or not command:
        raise ValidationError(
            f"{field_name} must be a non-empty list of strings",
            field_name=field_name,
            value=command
        )
    for part in command:
        if not isinstance(part, str) or not part.strip():
            raise ValidationError(
                f"{field_name} entries must be non-empty strings, got {part!r}",
                field_name=field_name,
                value=command
            )
    return list(command)


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """Validate a (possibly empty) list of strings."""
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(
            f"{field_name} must be a list of strings",
            field_name=field_name,
            value=value
        )
    return list(value)


def validate_enum_choice(
    value: Any,
    choices: List[str],
    field_name: str = "value",
    case_sensitive: bool = True
) -> str:
    """
    Validate that a value is one of the allowed choices.

    Returns:
        The matching choice, in the case used by ``choices``

    Raises:
        ValidationError: If value is not in choices
    """
    str_value = str(value)

    if case_sensitive:
        if str_value not in choices:
            raise ValidationError(
                f"{field_name} must be one of {choices}, got {value}",
                field_name=field_name,
                value=value
            )
        return str_value

    lower_choices = [choice.lower() for choice in choices]
    lower_value = str_value.lower()
    if lower_value not in lower_choices:
        raise ValidationError(
            f"{field_name} must be one of {choices}, got {value}",
            field_name=field_name,
            value=value
        )
    return choices[lower_choices.index(lower_value)]
