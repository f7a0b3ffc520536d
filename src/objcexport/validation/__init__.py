"""
Validation and error handling for the objcexport package.

This module provides input validation, the build error taxonomy and
consistent error reporting across the application.
"""

from .exceptions import (
    BuildError,
    ErrorSeverity,
    TaskExecutionFailed,
    TeardownFailed,
    TemplateFetchFailed,
    TemplateMaterializeFailed,
    UnknownTask,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)

from .validators import (
    validate_command,
    validate_directory,
    validate_enum_choice,
    validate_path_exists,
    validate_positive_float,
    validate_project_name,
    validate_string_list,
)

__all__ = [
    # Errors
    "BuildError",
    "ErrorSeverity",
    "TaskExecutionFailed",
    "TeardownFailed",
    "TemplateFetchFailed",
    "TemplateMaterializeFailed",
    "UnknownTask",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    # Validators
    "validate_command",
    "validate_directory",
    "validate_enum_choice",
    "validate_path_exists",
    "validate_positive_float",
    "validate_project_name",
    "validate_string_list",
]
