"""
Build orchestrator for the export and cleanup operations.

Both operations share one procedure: materialize the template into the
project, bind the task parameters, attach a relay, run the selected target
and remove the scratch template again. The scratch file never outlives the
call, whatever the outcome.
"""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ..console.sink import LogSink
from ..models.build import (
    CLEANUP_TARGET,
    Project,
    TaskParameters,
    TaskSelector,
)
from ..models.config import AppConfig, DEFAULT_SCRATCH_NAME, DEFAULT_TEMPLATE_URI
from ..validation import (
    BuildError,
    ErrorSeverity,
    TaskExecutionFailed,
    TeardownFailed,
    UnknownTask,
    handle_error,
)
from .engine import AntEngine, BuildEngine
from .relay import BuildEventRelay
from .template import BuildTemplate, TemplateLoader

logger = logging.getLogger(__name__)

# One lock per scratch file: runs for the same project share that path.
# Each entry counts its holders and waiters and is dropped when that reaches zero.
_scratch_locks: Dict[Path, List[Any]] = {}
_scratch_locks_guard = threading.Lock()


@contextmanager
def _scratch_lock(path: Path) -> Iterator[None]:
    with _scratch_locks_guard:
        entry = _scratch_locks.setdefault(path, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _scratch_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _scratch_locks[path]


class BuildOrchestrator:
    """
    Runs the export or cleanup target of the build template against a project.

    Args:
        sink: Destination of narrated progress lines
        engine: Build engine that executes targets
        template_loader: Source of the build template, resolved once here
        scratch_name: File name of the scratch template inside the project root
    """

    def __init__(
        self,
        sink: LogSink,
        engine: Optional[BuildEngine] = None,
        template_loader: Optional[TemplateLoader] = None,
        scratch_name: str = DEFAULT_SCRATCH_NAME,
    ):
        self.sink = sink
        self.engine = engine or AntEngine()
        self.template_loader = template_loader or TemplateLoader.from_uri(DEFAULT_TEMPLATE_URI)
        self.scratch_name = scratch_name

    @classmethod
    def from_config(cls, app_config: AppConfig, sink: LogSink) -> "BuildOrchestrator":
        engine = AntEngine(
            command=app_config.engine.command,
            message_output_level=app_config.engine.message_output_level,
            extra_args=app_config.engine.extra_args,
        )
        loader = TemplateLoader.from_uri(
            app_config.template.uri, timeout=app_config.template.fetch_timeout
        )
        return cls(sink, engine=engine, template_loader=loader, scratch_name=app_config.template.scratch_name)

    def scratch_path(self, project: Project) -> Path:
        return (project.root / self.scratch_name).absolute()

    def run_export(self, project: Project, source_dir: str, destination_dir: str) -> None:
        """
        Run the template's default target to export translated sources.

        Directories are expected to be validated by the caller.

        Raises:
            TemplateFetchFailed, TemplateMaterializeFailed, UnknownTask,
            TaskExecutionFailed
        """
        relay = BuildEventRelay(self.sink, source_dir=source_dir, destination_dir=destination_dir)
        self._run(
            project,
            TaskSelector.default(),
            TaskParameters.for_export(source_dir, destination_dir),
            relay,
        )

    def run_cleanup(self, project: Project, display_name: Optional[str] = None) -> None:
        """
        Run the CLEANUP target, starting from an empty console.

        Raises:
            UnknownTask: If the template has no CLEANUP target
        """
        display_name = display_name or project.name
        relay = BuildEventRelay(self.sink, project_display_name=display_name)
        self._run(
            project,
            TaskSelector.named(CLEANUP_TARGET),
            TaskParameters.for_cleanup(display_name),
            relay,
            clear_sink=True,
        )

    def _run(
        self,
        project: Project,
        selector: TaskSelector,
        parameters: TaskParameters,
        relay: BuildEventRelay,
        clear_sink: bool = False,
    ) -> None:
        scratch_path = self.scratch_path(project)

        with _scratch_lock(scratch_path):
            if clear_sink:
                self._clear_sink()

            logger.info(f"Running {selector.describe()} for project '{project.name}' in {project.root}")
            try:
                self.template_loader.materialize(scratch_path)
                template = BuildTemplate.parse(scratch_path)
                target = template.resolve(selector)
                self.engine.execute(
                    scratch_path,
                    target,
                    parameters.as_properties(),
                    [relay],
                    template.targets,
                    cwd=project.root,
                )
            except BuildError as e:
                if isinstance(e, (UnknownTask, TaskExecutionFailed)):
                    self._report_failure(e)
                handle_error(
                    error=e,
                    context=f"{selector.describe()} for project '{project.name}'",
                    severity=ErrorSeverity.ERROR,
                    reraise=True,
                    logger=logger,
                )
            finally:
                self._teardown(scratch_path)

            logger.info(f"Finished {selector.describe()} for project '{project.name}'")

    def _clear_sink(self) -> None:
        try:
            self.sink.clear()
        except (OSError, ValueError):
            logger.exception("Failed to clear the console")

    def _report_failure(self, error: BuildError) -> None:
        try:
            self.sink.println(f"Build failed: {error}")
        except (OSError, ValueError):
            logger.exception("Failed to write build failure to the console")

    def _teardown(self, scratch_path: Path) -> None:
        try:
            scratch_path.unlink(missing_ok=True)
            logger.debug(f"Removed scratch template {scratch_path}")
        except OSError as e:
            handle_error(
                error=TeardownFailed(scratch_path, e),
                context="removing scratch template",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=logger,
            )
