"""
Command-line interface for objcexport.

Subcommands:
- export: copy translated Objective-C sources out of a project
- cleanup: remove the helper files generated for the translator
- config: inspect and edit the per-project translator configuration

Exit codes: 0 on success, 1 for invalid arguments or configuration, and the
BuildError exit codes (2-5) for failed runs.
"""

import argparse
import logging
import sys
import tomllib
from pathlib import Path
from typing import List, Optional

from ..config import get_config, set_config_path
from ..console.sink import create_sink
from ..models.build import Project
from ..models.config import AppConfig
from ..models.record import ConfigurationRecord
from ..orchestration import BuildOrchestrator
from ..store import (
    ConfigurationStore,
    TomlConfigurationStore,
    default_record,
    get_classpath_entries,
    get_project_properties,
    persist_classpath_entries,
    persist_properties,
    project_translator_arguments,
)
from ..validation import (
    BuildError,
    ValidationError,
    handle_cli_error,
    validate_directory,
    validate_project_name,
)

# --- Logging Setup ---
# Diagnostics go to stderr; stdout carries the narrated build output.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="objcexport",
        description="Export and clean up Java-to-Objective-C translation output with Ant.",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override [logging] level from the configuration.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export generated Objective-C files.")
    _add_project_arguments(export_parser)
    export_parser.add_argument("--source", required=True, type=Path, help="Directory holding translated sources.")
    export_parser.add_argument("--destination", required=True, type=Path, help="Directory to export into.")

    cleanup_parser = subparsers.add_parser("cleanup", help="Remove internally generated helper files.")
    _add_project_arguments(cleanup_parser)

    config_parser = subparsers.add_parser("config", help="Show or edit the project's translator settings.")
    _add_project_arguments(config_parser)
    config_sub = config_parser.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Print the stored settings.")
    config_sub.add_parser("init", help="Store the default settings, replacing any existing ones.")
    set_parser = config_sub.add_parser("set", help="Set one or more KEY=VALUE settings.")
    set_parser.add_argument("assignments", nargs="+", metavar="KEY=VALUE")
    unset_parser = config_sub.add_parser("unset", help="Remove settings.")
    unset_parser.add_argument("keys", nargs="+", metavar="KEY")
    classpath_parser = config_sub.add_parser("classpath", help="Print or replace the classpath.")
    classpath_parser.add_argument("entries", nargs="*", metavar="ENTRY")
    classpath_parser.add_argument("--clear", action="store_true", help="Remove all classpath entries.")
    config_sub.add_parser("args", help="Print the translator arguments implied by the settings.")

    return parser


def _add_project_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--project-dir", type=Path, default=None,
        help="Project root directory (default: current directory).",
    )
    parser.add_argument("--name", help="Project name (default: project directory name).")


def resolve_project(args: argparse.Namespace) -> Project:
    project_dir = args.project_dir if args.project_dir is not None else Path.cwd()
    root = validate_directory(project_dir, field_name="--project-dir").resolve()
    name = validate_project_name(args.name or root.name, field_name="--name")
    return Project(name=name, root=root)


def run_export(app_config: AppConfig, args: argparse.Namespace) -> None:
    project = resolve_project(args)
    source = validate_directory(args.source, field_name="--source").resolve()
    destination = args.destination.expanduser().resolve()
    try:
        destination.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ValidationError(
            f"--destination cannot be created: {e}", field_name="--destination", value=str(destination)
        ) from e

    with create_sink(app_config.console.target) as sink:
        orchestrator = BuildOrchestrator.from_config(app_config, sink)
        orchestrator.run_export(project, str(source), str(destination))


def run_cleanup(app_config: AppConfig, args: argparse.Namespace) -> None:
    project = resolve_project(args)
    with create_sink(app_config.console.target) as sink:
        orchestrator = BuildOrchestrator.from_config(app_config, sink)
        orchestrator.run_cleanup(project)


def run_config(store: ConfigurationStore, args: argparse.Namespace) -> None:
    project = resolve_project(args)
    command = args.config_command

    if command == "show":
        record = get_project_properties(store, project.name)
        for key, value in record.to_dict().items():
            print(f"{key} = {value if value is not None else '<unset>'}")
        print(f"classpath = {get_classpath_entries(store, project.name)}")
    elif command == "init":
        persist_properties(store, project.name, default_record())
        logger.info(f"Stored default settings for project '{project.name}'")
    elif command == "set":
        values = _parse_assignments(args.assignments)
        record = _current_record(store, project.name)
        updated = ConfigurationRecord.from_mapping({**record.to_dict(), **values})
        persist_properties(store, project.name, updated)
        logger.info(f"Updated {', '.join(values)} for project '{project.name}'")
    elif command == "unset":
        record = _current_record(store, project.name)
        for key in args.keys:
            if key not in ConfigurationRecord.keys():
                raise ValidationError(f"Unknown configuration key: {key}", field_name="key", value=key)
            setattr(record, key, None)
        persist_properties(store, project.name, record)
    elif command == "classpath":
        if args.clear:
            persist_classpath_entries(store, project.name, [])
        elif args.entries:
            persist_classpath_entries(store, project.name, args.entries)
        else:
            for entry in get_classpath_entries(store, project.name):
                print(entry)
    elif command == "args":
        print(" ".join(project_translator_arguments(store, project)))


def _current_record(store: ConfigurationStore, project_id: str) -> ConfigurationRecord:
    record = store.get_all(project_id)
    if all(value is None for value in record.to_dict().values()):
        logger.info(f"Project '{project_id}' has no stored settings, starting from defaults")
        return default_record()
    return record


def _parse_assignments(assignments: List[str]) -> dict:
    values = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key.strip():
            raise ValidationError(
                f"Expected KEY=VALUE, got '{assignment}'", field_name="assignment", value=assignment
            )
        values[key.strip()] = value
    return values


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line interface for objcexport.

    Raises:
        SystemExit: With a non-zero code on validation or build failures.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        set_config_path(args.config)

    try:
        app_config = get_config()
    except (FileNotFoundError, ValidationError, tomllib.TOMLDecodeError) as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            logger=logger,
        )

    logging.getLogger().setLevel(args.log_level or app_config.log_level)

    try:
        if args.command == "export":
            run_export(app_config, args)
        elif args.command == "cleanup":
            run_cleanup(app_config, args)
        elif args.command == "config":
            run_config(TomlConfigurationStore(app_config.store.path), args)
    except ValidationError as e:
        handle_cli_error(error=e, context=f"{args.command} arguments", logger=logger)
    except BuildError as e:
        handle_cli_error(error=e, context=args.command, logger=logger)
    except OSError as e:
        handle_cli_error(error=e, context=args.command, exit_code=1, logger=logger)


if __name__ == "__main__":
    main_cli()
