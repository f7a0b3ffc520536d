"""
Project property helpers.

Thin functions over a ConfigurationStore for the questions the CLI asks
about a project: is a flag on, is a text value set, has the project ever been
configured, and which translator arguments the stored record implies.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from ..models.build import Project
from ..models.record import TEXT_KEYS, ConfigurationRecord
from .base import ConfigurationStore

logger = logging.getLogger(__name__)

# Boolean flags and the translator switch each one enables, in command line order.
FLAG_ARGUMENTS = (
    ("generate_debugging_support", ["-g"]),
    ("no_package_directories", ["--no-package-directories"]),
    ("x_language_objective_c", ["-x", "objective-c"]),
    ("x_language_objective_cpp", ["-x", "objective-c++"]),
    ("use_reference_counting", ["-use-reference-counting"]),
    ("use_gc", ["-use-gc"]),
    ("use_arc", ["-use-arc"]),
    ("error_to_warning", ["--error-to-warning"]),
    ("quiet", ["-q"]),
    ("verbose", ["-v"]),
    ("no_inline_field_access", ["--no-inline-field-access"]),
    ("no_generate_test_main", ["--no-generate-test-main"]),
    ("ignore_missing_imports", ["--ignore-missing-imports"]),
    ("print_converted_sources", ["--print-converted-sources"]),
    ("timing_info", ["-t"]),
)

TEXT_ARGUMENTS = (
    ("dead_code_report", "--dead-code-report"),
    ("method_mapping_file", "--mapping"),
    ("bootclasspath", "-bootclasspath"),
)


def default_record() -> ConfigurationRecord:
    """Record written the first time a project is configured."""
    record = ConfigurationRecord(**{key: "false" for key, _ in FLAG_ARGUMENTS})
    record.x_language_objective_c = "true"
    record.use_reference_counting = "true"
    record.initialize_first_time = "true"
    for key in TEXT_KEYS:
        setattr(record, key, "")
    return record


def has_property(record: ConfigurationRecord, key: str) -> bool:
    value = record.get(key)
    return value is not None and value.strip().lower() == "true"


def has_text_property(record: ConfigurationRecord, key: str) -> bool:
    value = record.get(key)
    return value is not None and value != ""


def is_default_properties_set(store: ConfigurationStore, project_id: str) -> bool:
    """True once a record has been stored for the project."""
    return store.get(project_id, "generate_debugging_support") is not None


def get_project_properties(store: ConfigurationStore, project_id: str) -> ConfigurationRecord:
    """
    Read the full record for display or argument building.

    Unset text values come back as "" instead of None.
    """
    record = store.get_all(project_id)
    for key in TEXT_KEYS:
        if getattr(record, key) is None:
            setattr(record, key, "")
    return record


def persist_properties(store: ConfigurationStore, project_id: str, record: ConfigurationRecord) -> None:
    store.set_all(project_id, record)


def get_classpath_entries(store: ConfigurationStore, project_id: str) -> List[str]:
    return store.get_classpath(project_id)


def persist_classpath_entries(store: ConfigurationStore, project_id: str, classpath: Sequence[Optional[str]]) -> None:
    store.set_classpath(project_id, classpath)


def translator_arguments(
    record: ConfigurationRecord,
    classpath: Sequence[str] = (),
    prefix_file: Optional[Path] = None,
) -> List[str]:
    """
    Build the translator command line switches implied by a record.

    Args:
        record: Stored translator flags
        classpath: Classpath entries, joined with the platform path separator
        prefix_file: Package prefix properties file, passed when given

    Returns:
        Argument list, without the translator executable or source files
    """
    args: List[str] = []
    for key, switch in FLAG_ARGUMENTS:
        if has_property(record, key):
            args.extend(switch)

    for key, switch in TEXT_ARGUMENTS:
        if has_text_property(record, key):
            args.extend([switch, record.get(key)])

    if classpath:
        args.extend(["-classpath", os.pathsep.join(classpath)])

    if prefix_file is not None:
        args.extend(["--prefixes", str(prefix_file)])

    return args


def project_translator_arguments(store: ConfigurationStore, project: Project) -> List[str]:
    """Translator arguments for a project, including its prefix file when present."""
    record = get_project_properties(store, project.name)
    prefix_file = project.prefix_properties_file if project.has_prefix_properties_file() else None
    if prefix_file is None:
        logger.debug(f"No prefix properties file for project '{project.name}'")
    return translator_arguments(record, get_classpath_entries(store, project.name), prefix_file)
