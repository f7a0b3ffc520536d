"""
Per-project configuration storage.

- ConfigurationStore: abstract key/value contract shared by all backends
- TomlConfigurationStore: single TOML file with one table per project
- properties: record, classpath and translator argument helpers
"""

from .base import ConfigurationStore, decode_classpath, encode_classpath
from .properties import (
    default_record,
    get_classpath_entries,
    get_project_properties,
    has_property,
    has_text_property,
    is_default_properties_set,
    persist_classpath_entries,
    persist_properties,
    project_translator_arguments,
    translator_arguments,
)
from .toml_store import TomlConfigurationStore

__all__ = [
    "ConfigurationStore",
    "TomlConfigurationStore",
    "decode_classpath",
    "default_record",
    "encode_classpath",
    "get_classpath_entries",
    "get_project_properties",
    "has_property",
    "has_text_property",
    "is_default_properties_set",
    "persist_classpath_entries",
    "persist_properties",
    "project_translator_arguments",
    "translator_arguments",
]
