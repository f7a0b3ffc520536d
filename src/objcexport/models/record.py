"""
Per-project translator configuration record.

The record is a flat set of string-valued flags. ``None`` means the flag has
never been set and the translator default applies. Boolean flags are stored
as ``"true"``/``"false"`` strings.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from ..validation import ValidationError

CLASSPATH_KEY = "classpath"

# Text-valued keys that read back as "" rather than None in a full snapshot.
TEXT_KEYS = ("dead_code_report", "method_mapping_file", "bootclasspath")


@dataclass
class ConfigurationRecord:
    """Snapshot of the translator flags stored for one project."""

    generate_debugging_support: Optional[str] = None
    no_package_directories: Optional[str] = None
    x_language_objective_c: Optional[str] = None
    x_language_objective_cpp: Optional[str] = None

    # Memory management
    use_reference_counting: Optional[str] = None
    use_gc: Optional[str] = None
    use_arc: Optional[str] = None

    # Output
    error_to_warning: Optional[str] = None
    quiet: Optional[str] = None
    verbose: Optional[str] = None

    no_inline_field_access: Optional[str] = None
    no_generate_test_main: Optional[str] = None
    ignore_missing_imports: Optional[str] = None
    print_converted_sources: Optional[str] = None
    timing_info: Optional[str] = None

    initialize_first_time: Optional[str] = None

    dead_code_report: Optional[str] = None
    method_mapping_file: Optional[str] = None
    bootclasspath: Optional[str] = None

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ConfigurationRecord":
        """
        Build a record from a mapping, rejecting keys outside the fixed set.

        Non-string values are stored in their string form; booleans become
        ``"true"``/``"false"``.
        """
        known = set(cls.keys())
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValidationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                field_name="record",
                value=unknown,
            )
        return cls(**{key: to_property_value(value) for key, value in values.items()})

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dataclasses.asdict(self)

    def get(self, key: str) -> Optional[str]:
        if key not in self.keys():
            raise ValidationError(f"Unknown configuration key: {key}", field_name="key", value=key)
        return getattr(self, key)


def to_property_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
