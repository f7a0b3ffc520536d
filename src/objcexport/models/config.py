"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`:
template resolution, build engine invocation, console output, project store
location and logging.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_TEMPLATE_URI = "package:exportANT.xml"
DEFAULT_SCRATCH_NAME = ".exportANT.xml"
DEFAULT_STORE_PATH = Path("~/.objcexport/projects.toml")


@dataclass
class TemplateConfig:
    """
    Where the build template comes from and where it is materialized, `[template]`.
    """

    # package:<resource>, file:<path>, a bare path, or an http(s) URL.
    uri: str = DEFAULT_TEMPLATE_URI
    # File name of the scratch copy inside the project root.
    scratch_name: str = DEFAULT_SCRATCH_NAME
    # Seconds to wait for a remote template.
    fetch_timeout: float = 30.0


@dataclass
class EngineConfig:
    """
    How the external build tool is invoked, `[engine]`.
    """

    command: List[str] = field(default_factory=lambda: ["ant"])
    # Lowest severity of build tool output forwarded to the log: error, warning, info, debug.
    message_output_level: str = "error"
    extra_args: List[str] = field(default_factory=list)


@dataclass
class ConsoleConfig:
    """Destination of narrated build lines, `[console]`."""

    # "stdout" or a file path.
    target: str = "stdout"


@dataclass
class StoreConfig:
    """Location of the per-project configuration store, `[store]`."""

    path: Path = DEFAULT_STORE_PATH


@dataclass
class AppConfig:
    """
    The root configuration object for the entire application.
    """

    template: TemplateConfig = field(default_factory=TemplateConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = "INFO"
