"""
Unit tests for the command-line interface.

The engine command points at the fake Ant script so export and cleanup run
end to end through argparse, the orchestrator and the stdout sink.
"""

import pytest
import toml

from objcexport.cli.main import build_parser, main_cli, resolve_project
from objcexport.store import TomlConfigurationStore


@pytest.fixture
def config_file(temp_dir, fake_ant):
    path = temp_dir / "config.toml"
    path.write_text(toml.dumps({
        "engine": {"command": fake_ant, "message_output_level": "error"},
        "store": {"path": "store/projects.toml"},
        "logging": {"level": "WARNING"},
    }))
    return path


@pytest.fixture
def run(config_file):
    def _run(*argv):
        main_cli(["--config", str(config_file), *argv])

    return _run


@pytest.mark.unit
class TestParser:

    def test_export_requires_directories(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["export"])

        assert exc_info.value.code == 2

    def test_config_subcommands(self, temp_dir):
        args = build_parser().parse_args(
            ["config", "--project-dir", str(temp_dir), "classpath", "a.jar", "b.jar"]
        )

        assert args.config_command == "classpath"
        assert args.entries == ["a.jar", "b.jar"]

    def test_project_dir_defaults_to_working_directory_at_run_time(self, temp_dir, monkeypatch):
        args = build_parser().parse_args(["cleanup"])
        assert args.project_dir is None

        later = temp_dir / "LaterApp"
        later.mkdir()
        monkeypatch.chdir(later)

        project = resolve_project(args)

        assert project.root == later.resolve()
        assert project.name == "LaterApp"


@pytest.mark.unit
class TestExportCommand:

    def test_export_narrates_to_stdout(self, run, project, temp_dir, capsys):
        source = temp_dir / "generated"
        source.mkdir()
        destination = temp_dir / "out"

        run("export", "--project-dir", str(project.root), "--source", str(source), "--destination", str(destination))

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "Exporting ObjectiveC Files",
            f"Source Directory: {source.resolve()}",
            f"Destination Directory: {destination.resolve()}",
            "Export finished.",
        ]
        assert destination.is_dir()
        assert not (project.root / ".exportANT.xml").exists()

    def test_missing_source_directory(self, run, project, temp_dir):
        with pytest.raises(SystemExit) as exc_info:
            run("export", "--project-dir", str(project.root),
                "--source", str(temp_dir / "absent"), "--destination", str(temp_dir / "out"))

        assert exc_info.value.code == 1

    def test_failed_build_exit_code(self, run, project, temp_dir, monkeypatch, capsys):
        monkeypatch.setenv("FAKE_ANT_FAIL", "1")
        source = temp_dir / "generated"
        source.mkdir()

        with pytest.raises(SystemExit) as exc_info:
            run("export", "--project-dir", str(project.root),
                "--source", str(source), "--destination", str(temp_dir / "out"))

        assert exc_info.value.code == 5
        assert capsys.readouterr().out.splitlines()[-1].startswith("Build failed: ")
        assert not (project.root / ".exportANT.xml").exists()

    def test_template_fetch_failure_exit_code(self, temp_dir, fake_ant, project, capsys):
        config = temp_dir / "broken.toml"
        config.write_text(toml.dumps({
            "template": {"uri": str(temp_dir / "missing.xml")},
            "engine": {"command": fake_ant},
        }))
        source = temp_dir / "generated"
        source.mkdir()

        with pytest.raises(SystemExit) as exc_info:
            main_cli(["--config", str(config), "export", "--project-dir", str(project.root),
                      "--source", str(source), "--destination", str(temp_dir / "out")])

        assert exc_info.value.code == 2
        assert capsys.readouterr().out == ""


@pytest.mark.unit
class TestCleanupCommand:

    def test_cleanup_narrates_project_name(self, run, project, capsys):
        run("cleanup", "--project-dir", str(project.root), "--name", "My App")

        out = capsys.readouterr().out.splitlines()
        assert "Cleaning up project: My App" in out
        assert out[-1] == "Cleanup finished"

    def test_invalid_project_name(self, run, project):
        with pytest.raises(SystemExit) as exc_info:
            run("cleanup", "--project-dir", str(project.root), "--name", "../escape")

        assert exc_info.value.code == 1


@pytest.mark.unit
class TestConfigCommand:

    def test_set_then_args(self, run, project, capsys):
        run("config", "--project-dir", str(project.root), "set", "use_arc=true", "use_reference_counting=false")
        run("config", "--project-dir", str(project.root), "classpath", "lib/a.jar", "lib/b.jar")
        capsys.readouterr()

        run("config", "--project-dir", str(project.root), "args")

        assert capsys.readouterr().out.strip() == "-x objective-c -use-arc -classpath lib/a.jar:lib/b.jar"

    def test_show_unconfigured_project(self, run, project, capsys):
        run("config", "--project-dir", str(project.root), "show")

        out = capsys.readouterr().out
        assert "use_arc = <unset>" in out
        assert "bootclasspath = \n" in out
        assert "classpath = []" in out

    def test_init_and_unset(self, run, project, config_file, capsys):
        run("config", "--project-dir", str(project.root), "init")
        run("config", "--project-dir", str(project.root), "unset", "x_language_objective_c")
        capsys.readouterr()

        run("config", "--project-dir", str(project.root), "show")

        out = capsys.readouterr().out
        assert "x_language_objective_c = <unset>" in out
        assert "use_reference_counting = true" in out
        assert (config_file.parent / "store" / "projects.toml").exists()

    def test_set_after_unset_keeps_stored_settings(self, run, project, config_file):
        run("config", "--project-dir", str(project.root), "set", "quiet=true", "verbose=true")
        run("config", "--project-dir", str(project.root), "unset", "generate_debugging_support")
        run("config", "--project-dir", str(project.root), "set", "timing_info=true")

        store = TomlConfigurationStore(config_file.parent / "store" / "projects.toml")
        assert store.get("MyApp", "quiet") == "true"
        assert store.get("MyApp", "verbose") == "true"
        assert store.get("MyApp", "timing_info") == "true"
        assert store.get("MyApp", "generate_debugging_support") is None

    def test_classpath_print_and_clear(self, run, project, capsys):
        run("config", "--project-dir", str(project.root), "classpath", "a.jar")
        run("config", "--project-dir", str(project.root), "classpath")
        assert capsys.readouterr().out.splitlines() == ["a.jar"]

        run("config", "--project-dir", str(project.root), "classpath", "--clear")
        run("config", "--project-dir", str(project.root), "classpath")
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize(
        "argv",
        [
            ["set", "colour=blue"],
            ["set", "use_arc"],
            ["unset", "colour"],
        ],
    )
    def test_invalid_config_edits(self, run, project, argv):
        with pytest.raises(SystemExit) as exc_info:
            run("config", "--project-dir", str(project.root), *argv)

        assert exc_info.value.code == 1


@pytest.mark.unit
def test_missing_config_file(temp_dir, project):
    with pytest.raises(SystemExit) as exc_info:
        main_cli(["--config", str(temp_dir / "absent.toml"), "cleanup", "--project-dir", str(project.root)])

    assert exc_info.value.code == 1
