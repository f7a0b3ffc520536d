"""
Build engine: runs Ant as a subprocess and reports target lifecycle events.

Ant's default logger prints a line ``<target>:`` when a target starts and
ends the build with ``BUILD SUCCESSFUL`` or ``BUILD FAILED`` followed by the
failure message. AntOutputParser turns that output into BuildEvents; every
other line is forwarded to the module logger at a severity derived from its
content, filtered by the configured message output level.
"""

import logging
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Collection, Dict, List, Optional, Sequence, Tuple

from ..models.build import BuildEvent, TaskPhase
from ..validation import TaskExecutionFailed
from .process_manager import terminate_process_tree

logger = logging.getLogger(__name__)

MESSAGE_OUTPUT_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_TARGET_LINE = re.compile(r"^(\S(?:.*\S)?):$")
_TASK_LINE = re.compile(r"^\s+\[[^\]]+\]")


class BuildListener(ABC):
    """Receives target lifecycle events during a build."""

    @abstractmethod
    def on_task_started(self, event: BuildEvent) -> None:
        pass

    @abstractmethod
    def on_task_finished(self, event: BuildEvent) -> None:
        pass


def dispatch_event(event: BuildEvent, listeners: Sequence[BuildListener]) -> None:
    for listener in listeners:
        if event.phase is TaskPhase.STARTED:
            listener.on_task_started(event)
        else:
            listener.on_task_finished(event)


class BuildEngine(ABC):
    """Runs one target of a build file."""

    @abstractmethod
    def execute(
        self,
        build_file: Path,
        target: str,
        properties: Dict[str, str],
        listeners: Sequence[BuildListener],
        known_targets: Collection[str],
        cwd: Optional[Path] = None,
    ) -> None:
        """
        Run ``target`` and block until the build ends.

        Raises:
            TaskExecutionFailed: If the build cannot start or does not succeed
        """


class AntOutputParser:
    """
    Incremental parser for Ant default-logger output.

    Only lines naming a declared target count as target starts, so task
    output that happens to end in a colon is never mistaken for one.
    """

    def __init__(self, known_targets: Collection[str]):
        self.known_targets = set(known_targets)
        self.open_target: Optional[str] = None
        self.build_failed = False
        self.build_succeeded = False
        self.failure_lines: List[str] = []

    @property
    def failure_message(self) -> Optional[str]:
        if not self.failure_lines:
            return None
        return " ".join(self.failure_lines)

    def feed(self, raw_line: str) -> Tuple[List[BuildEvent], Optional[int]]:
        """
        Consume one output line.

        Returns:
            The events the line completes, and the log level for the line
            (None for lifecycle lines that are not logged)
        """
        line = raw_line.rstrip("\r\n")
        stripped = line.strip()

        match = _TARGET_LINE.match(line)
        if match and match.group(1) in self.known_targets:
            events = self._finish_open()
            self.open_target = match.group(1)
            events.append(BuildEvent(self.open_target, TaskPhase.STARTED))
            return events, None

        if stripped == "BUILD SUCCESSFUL":
            self.build_succeeded = True
            return self._finish_open(), None

        if stripped.startswith("BUILD FAILED"):
            self.build_failed = True
            return [], logging.ERROR

        if stripped.startswith("Total time:"):
            return self._finish_open(), logging.DEBUG

        if self.build_failed:
            if stripped:
                self.failure_lines.append(stripped)
            return [], logging.ERROR

        return [], classify_line(line)

    def close(self, exit_code: int) -> List[BuildEvent]:
        """Finish a target still open when the output ends."""
        if exit_code != 0 and not self.build_failed:
            self.build_failed = True
            self.failure_lines.append(f"build tool exited with code {exit_code}")
        return self._finish_open()

    def _finish_open(self) -> List[BuildEvent]:
        if self.open_target is None:
            return []
        error = (self.failure_message or "BUILD FAILED") if self.build_failed else None
        event = BuildEvent(self.open_target, TaskPhase.FINISHED, error=error)
        self.open_target = None
        return [event]


def classify_line(line: str) -> int:
    """Log level for a line of Ant output that is not a lifecycle line."""
    lowered = line.lower()
    if "error" in lowered or "exception" in lowered:
        return logging.ERROR
    if "warning" in lowered:
        return logging.WARNING
    if _TASK_LINE.match(line):
        return logging.INFO
    return logging.DEBUG


class AntEngine(BuildEngine):
    """
    Runs the ``ant`` command line tool.

    Args:
        command: Executable and leading arguments, e.g. ``["ant"]``
        message_output_level: Lowest severity of Ant output forwarded to the log
        extra_args: Arguments placed before the target name
    """

    def __init__(
        self,
        command: Sequence[str] = ("ant",),
        message_output_level: str = "error",
        extra_args: Sequence[str] = (),
    ):
        self.command = list(command)
        self.output_threshold = MESSAGE_OUTPUT_LEVELS[message_output_level.lower()]
        self.extra_args = list(extra_args)

    def build_command(self, build_file: Path, target: str, properties: Dict[str, str]) -> List[str]:
        args = self.command + ["-noinput", "-buildfile", str(build_file)]
        args += [f"-D{key}={value}" for key, value in properties.items()]
        args += self.extra_args
        args.append(target)
        return args

    def execute(
        self,
        build_file: Path,
        target: str,
        properties: Dict[str, str],
        listeners: Sequence[BuildListener],
        known_targets: Collection[str],
        cwd: Optional[Path] = None,
    ) -> None:
        args = self.build_command(build_file, target, properties)
        logger.info(f"Running target '{target}' of {build_file}")
        logger.debug(f"Build command: {args}")

        try:
            process = subprocess.Popen(
                args,
                cwd=cwd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
                start_new_session=True,
            )
        except OSError as e:
            raise TaskExecutionFailed(target, f"cannot start build tool '{self.command[0]}': {e}") from e

        parser = AntOutputParser(known_targets)
        completed = False
        try:
            for line in process.stdout:
                events, level = parser.feed(line)
                if level is not None and level >= self.output_threshold:
                    logger.log(level, f"[ant] {line.rstrip()}")
                for event in events:
                    dispatch_event(event, listeners)

            exit_code = process.wait()
            for event in parser.close(exit_code):
                dispatch_event(event, listeners)
            completed = True
        finally:
            if not completed and process.poll() is None:
                terminate_process_tree(process.pid, "build tool")
                process.wait()
            process.stdout.close()

        logger.info(f"Build tool exited with code {exit_code}")
        if exit_code != 0 or parser.build_failed:
            raise TaskExecutionFailed(
                target, parser.failure_message or f"exit code {exit_code}", exit_code=exit_code
            )
