"""
Exception types and error handling helpers.

This module provides the validation error used by the configuration layer,
the build error taxonomy raised by the orchestration layer, and the small
set of logging-and-reraise helpers used throughout the application.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    Used for configuration values, CLI arguments and configuration record keys.
    """

    exit_code = 1

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class BuildError(Exception):
    """Base class for failures of an export or cleanup run."""

    exit_code = 1


class TemplateFetchFailed(BuildError):
    """The build template resource could not be read or parsed."""

    exit_code = 2

    def __init__(self, uri: str, reason: Any):
        super().__init__(f"Could not read build template '{uri}': {reason}")
        self.uri = uri
        self.reason = reason


class TemplateMaterializeFailed(BuildError):
    """The scratch copy of the template could not be written."""

    exit_code = 3

    def __init__(self, path: Any, reason: Any):
        super().__init__(f"Could not write build template to '{path}': {reason}")
        self.path = path
        self.reason = reason


class UnknownTask(BuildError):
    """The template does not declare the requested target."""

    exit_code = 4

    def __init__(self, task_name: str):
        super().__init__(f"Build template does not define target '{task_name}'")
        self.task_name = task_name


class TaskExecutionFailed(BuildError):
    """The build tool reported an abnormal outcome."""

    exit_code = 5

    def __init__(self, task_name: str, cause: Any, exit_code: Optional[int] = None):
        super().__init__(f"Target '{task_name}' failed: {cause}")
        self.task_name = task_name
        self.cause = cause
        self.process_exit_code = exit_code


class TeardownFailed(BuildError):
    """The scratch template could not be removed. Reported, never raised."""

    def __init__(self, path: Any, reason: Any):
        super().__init__(f"Could not remove scratch template '{path}': {reason}")
        self.path = path
        self.reason = reason


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Handle errors with consistent logging and optional re-raising.

    Args:
        error: The exception that occurred
        context: Context description of where the error occurred
        severity: Severity level for logging
        reraise: Whether to re-raise the exception after logging
        logger: Logger instance to use (defaults to module logger)
    """
    effective_logger = logger or globals()['logger']

    error_msg = f"Error in {context}: {error}"

    if isinstance(severity, str):
        severity_str = severity.lower()
    else:
        severity_str = severity.value

    if severity_str == "debug":
        effective_logger.debug(error_msg, exc_info=True)
    elif severity_str == "info":
        effective_logger.info(error_msg)
    elif severity_str == "warning":
        effective_logger.warning(error_msg)
    elif severity_str == "error":
        effective_logger.error(error_msg)
    elif severity_str == "critical":
        effective_logger.critical(error_msg, exc_info=True)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors and exit the process."""
    exit_code = kwargs.pop('exit_code', getattr(error, 'exit_code', 1))

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
