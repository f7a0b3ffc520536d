"""
Build event relay: narrates export and cleanup targets into a log sink.
"""

import logging
from enum import Enum
from typing import Optional

from ..console.sink import LogSink
from ..models.build import CLEANUP_TARGET, EXPORT_TARGET, BuildEvent
from .engine import BuildListener

logger = logging.getLogger(__name__)


class RelayState(Enum):
    IDLE = "idle"
    STARTED = "started"
    FINISHED = "finished"


class BuildEventRelay(BuildListener):
    """
    Writes narrated lines for the export and cleanup targets.

    Other targets are left to the engine's own logging. Nesting is not
    tracked: a second start before a finish is simply a new transition.
    Sink failures are logged and never interrupt the build.
    """

    def __init__(
        self,
        sink: LogSink,
        source_dir: Optional[str] = None,
        destination_dir: Optional[str] = None,
        project_display_name: Optional[str] = None,
    ):
        self.sink = sink
        self.source_dir = source_dir
        self.destination_dir = destination_dir
        self.project_display_name = project_display_name
        self.state = RelayState.IDLE
        self.current_task: Optional[str] = None

    def on_task_started(self, event: BuildEvent) -> None:
        self.state = RelayState.STARTED
        self.current_task = event.task_name

        if event.task_name == EXPORT_TARGET:
            self._emit(
                "Exporting ObjectiveC Files",
                f"Source Directory: {self.source_dir}",
                f"Destination Directory: {self.destination_dir}",
            )
        elif event.task_name == CLEANUP_TARGET:
            self._emit(
                "Cleans up internally generated files (<<project_name>>-classpath and <<project_name>>-prefix).",
                "Does not clean J2OBJC generated source files.",
                f"Cleaning up project: {self.project_display_name}",
            )

    def on_task_finished(self, event: BuildEvent) -> None:
        self.state = RelayState.FINISHED
        self.current_task = event.task_name

        if event.task_name == EXPORT_TARGET:
            self._emit("Export finished.")
        elif event.task_name == CLEANUP_TARGET:
            self._emit("Cleanup finished")

        self.state = RelayState.IDLE
        self.current_task = None

    def _emit(self, *lines: str) -> None:
        try:
            for line in lines:
                self.sink.println(line)
        except (OSError, ValueError):
            logger.exception("Failed to write build progress to the console")
