"""
Unit tests for the error taxonomy, error helpers and value validators.
"""

import logging
import subprocess
import sys

import pytest

from objcexport.orchestration.process_manager import terminate_process_tree
from objcexport.validation import (
    BuildError,
    ErrorSeverity,
    TaskExecutionFailed,
    TemplateFetchFailed,
    TemplateMaterializeFailed,
    UnknownTask,
    ValidationError,
    handle_cli_error,
    handle_error,
    validate_command,
    validate_directory,
    validate_project_name,
)


@pytest.mark.unit
class TestBuildErrors:

    @pytest.mark.parametrize(
        "error, exit_code",
        [
            (TemplateFetchFailed("package:exportANT.xml", "missing"), 2),
            (TemplateMaterializeFailed("/p/.exportANT.xml", "read-only"), 3),
            (UnknownTask("CLEANUP"), 4),
            (TaskExecutionFailed("CLEANUP", "BUILD FAILED", exit_code=1), 5),
        ],
    )
    def test_exit_codes(self, error, exit_code):
        assert isinstance(error, BuildError)
        assert error.exit_code == exit_code

    def test_task_failure_keeps_cause(self):
        error = TaskExecutionFailed("Export-ObjectiveC-Files", "copy failed", exit_code=1)

        assert error.task_name == "Export-ObjectiveC-Files"
        assert error.process_exit_code == 1
        assert "copy failed" in str(error)


@pytest.mark.unit
class TestHandleError:

    def test_logs_and_reraises(self, caplog):
        log = logging.getLogger("objcexport.test")
        with caplog.at_level(logging.ERROR, logger="objcexport.test"):
            with pytest.raises(UnknownTask):
                handle_error(UnknownTask("x"), "running target", logger=log)

        assert "Error in running target" in caplog.text

    def test_warning_without_reraise(self, caplog):
        log = logging.getLogger("objcexport.test")
        with caplog.at_level(logging.WARNING, logger="objcexport.test"):
            handle_error(OSError("busy"), "teardown", severity=ErrorSeverity.WARNING, reraise=False, logger=log)

        assert "busy" in caplog.text

    def test_cli_error_exits_with_error_code(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(UnknownTask("CLEANUP"), "cleanup")

        assert exc_info.value.code == 4

    def test_cli_error_explicit_code(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(OSError("disk full"), "export", exit_code=1)

        assert exc_info.value.code == 1


@pytest.mark.unit
class TestValidators:

    @pytest.mark.parametrize("name", ["MyApp", "my-app", "My App 2.0", "_tools"])
    def test_valid_project_names(self, name):
        assert validate_project_name(name) == name

    @pytest.mark.parametrize("name", ["", ".hidden", "a/b", "../up", "-flag"])
    def test_invalid_project_names(self, name):
        with pytest.raises(ValidationError):
            validate_project_name(name)

    def test_directory(self, temp_dir):
        assert validate_directory(temp_dir) == temp_dir

        file_path = temp_dir / "file.txt"
        file_path.write_text("x")
        with pytest.raises(ValidationError):
            validate_directory(file_path)
        with pytest.raises(ValidationError):
            validate_directory(temp_dir / "absent")

    def test_command(self):
        assert validate_command("ant -lib x") == ["ant", "-lib", "x"]
        with pytest.raises(ValidationError):
            validate_command("")


@pytest.mark.unit
class TestTerminateProcessTree:

    def test_terminates_running_process(self):
        process = subprocess.Popen(
            [sys.executable, "-c", "import time; time.sleep(60)"],
            start_new_session=True,
        )

        terminate_process_tree(process.pid, "sleeper")

        assert process.wait(timeout=10) != 0

    def test_already_exited_process(self):
        process = subprocess.Popen([sys.executable, "-c", "pass"])
        process.wait()

        terminate_process_tree(process.pid, "finished")

    def test_invalid_pid(self, caplog):
        with caplog.at_level(logging.WARNING, logger="objcexport.orchestration.process_manager"):
            terminate_process_tree(0, "nothing")

        assert "Invalid PID" in caplog.text
