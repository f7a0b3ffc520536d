"""
objcexport: run Java-to-Objective-C export and cleanup builds from the command line.

The package is organized into specialized modules:
- config: Configuration loading and validation
- models: Data structures and type definitions
- validation: Input validation, build errors and error handling
- store: Per-project translator configuration storage
- console: Sinks for narrated build output
- orchestration: Template lifecycle, Ant engine and event relay
- cli: Command-line interface

Usage:
    From command line:
        objcexport export --source build/objc --destination ../ios/Classes

    Programmatically:
        from objcexport import BuildOrchestrator, Project, StreamSink
        orchestrator = BuildOrchestrator(StreamSink())
        orchestrator.run_export(Project("MyApp", root), "build/objc", "out")
"""

from .config import clear_config_cache, get_config, set_config_path
from .console import FileSink, LogSink, MemorySink, StreamSink
from .models import (
    AppConfig,
    BuildEvent,
    ConfigurationRecord,
    Project,
    TaskPhase,
    TaskSelector,
)
from .orchestration import (
    AntEngine,
    BuildEngine,
    BuildEventRelay,
    BuildListener,
    BuildOrchestrator,
    TemplateLoader,
)
from .store import ConfigurationStore, TomlConfigurationStore
from .validation import (
    BuildError,
    TaskExecutionFailed,
    TeardownFailed,
    TemplateFetchFailed,
    TemplateMaterializeFailed,
    UnknownTask,
    ValidationError,
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "get_config",
    "set_config_path",
    "clear_config_cache",
    # Console
    "FileSink",
    "LogSink",
    "MemorySink",
    "StreamSink",
    # Models
    "AppConfig",
    "BuildEvent",
    "ConfigurationRecord",
    "Project",
    "TaskPhase",
    "TaskSelector",
    # Orchestration
    "AntEngine",
    "BuildEngine",
    "BuildEventRelay",
    "BuildListener",
    "BuildOrchestrator",
    "TemplateLoader",
    # Store
    "ConfigurationStore",
    "TomlConfigurationStore",
    # Errors
    "BuildError",
    "TaskExecutionFailed",
    "TeardownFailed",
    "TemplateFetchFailed",
    "TemplateMaterializeFailed",
    "UnknownTask",
    "ValidationError",
]
