"""
Data models for the objcexport package.

Configuration Models:
- Application settings loaded from config.toml
- The per-project translator configuration record

Build Models:
- Project identity and derived paths
- Target selection and bound parameters
- Target lifecycle events
"""

from .build import (
    CLEANUP_TARGET,
    EXPORT_DIRECTORY,
    EXPORT_TARGET,
    PROJECT_NAME,
    SOURCE_DIRECTORY,
    BuildEvent,
    Project,
    TaskParameters,
    TaskPhase,
    TaskSelector,
)
from .config import AppConfig, ConsoleConfig, EngineConfig, StoreConfig, TemplateConfig
from .record import CLASSPATH_KEY, TEXT_KEYS, ConfigurationRecord

__all__ = [
    # Build
    "CLEANUP_TARGET",
    "EXPORT_DIRECTORY",
    "EXPORT_TARGET",
    "PROJECT_NAME",
    "SOURCE_DIRECTORY",
    "BuildEvent",
    "Project",
    "TaskParameters",
    "TaskPhase",
    "TaskSelector",
    # Configuration
    "AppConfig",
    "ConsoleConfig",
    "EngineConfig",
    "StoreConfig",
    "TemplateConfig",
    # Record
    "CLASSPATH_KEY",
    "TEXT_KEYS",
    "ConfigurationRecord",
]
