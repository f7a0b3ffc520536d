"""
Build run data models.

This module contains the structures that flow through one export or cleanup
run: the project being built, the target selection, the bound parameters and
the lifecycle events reported by the build engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

EXPORT_TARGET = "Export-ObjectiveC-Files"
CLEANUP_TARGET = "CLEANUP"

SOURCE_DIRECTORY = "SOURCE_DIRECTORY"
EXPORT_DIRECTORY = "EXPORT_DIRECTORY"
PROJECT_NAME = "PROJECT_NAME"


@dataclass(frozen=True)
class Project:
    """
    A project the translator is configured for.

    The name is both the store key and the display name used in narration.
    """

    name: str
    root: Path

    @property
    def prefix_properties_file(self) -> Path:
        """Path of the `<name>-prefixes.properties` file holding package prefixes."""
        return (self.root / f"{self.name}-prefixes.properties").absolute()

    def has_prefix_properties_file(self) -> bool:
        return self.prefix_properties_file.is_file()


@dataclass(frozen=True)
class TaskSelector:
    """
    Which target of the template to run.

    ``target_name`` of ``None`` means the template's default target.
    """

    target_name: Optional[str] = None

    @classmethod
    def default(cls) -> "TaskSelector":
        return cls()

    @classmethod
    def named(cls, target_name: str) -> "TaskSelector":
        return cls(target_name=target_name)

    @property
    def uses_default(self) -> bool:
        return self.target_name is None

    def describe(self) -> str:
        return "<default>" if self.uses_default else self.target_name


@dataclass
class TaskParameters:
    """String properties bound into the template before execution."""

    values: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def for_export(cls, source_dir: str, destination_dir: str) -> "TaskParameters":
        return cls({SOURCE_DIRECTORY: str(source_dir), EXPORT_DIRECTORY: str(destination_dir)})

    @classmethod
    def for_cleanup(cls, project_name: str) -> "TaskParameters":
        return cls({PROJECT_NAME: project_name})

    def as_properties(self) -> Dict[str, str]:
        return dict(self.values)


class TaskPhase(Enum):
    """Lifecycle transition reported for a target."""
    STARTED = "started"
    FINISHED = "finished"


@dataclass(frozen=True)
class BuildEvent:
    """
    An immutable record of one target lifecycle transition.

    ``error`` carries the build tool's failure message on a failed finish.
    """

    task_name: str
    phase: TaskPhase
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None
