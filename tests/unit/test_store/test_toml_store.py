"""
Unit tests for the TOML configuration store.

Covers whole-record round trips, the absent sentinel, stale key removal and
the comma-joined classpath encoding.
"""

import tomllib

import pytest

from objcexport.models import ConfigurationRecord
from objcexport.store import TomlConfigurationStore, decode_classpath, encode_classpath
from objcexport.store.toml_store import render_document
from objcexport.validation import ValidationError


@pytest.fixture
def store(temp_dir):
    return TomlConfigurationStore(temp_dir / "store" / "projects.toml")


def _full_record():
    return ConfigurationRecord(**{key: f"value-{i}" for i, key in enumerate(ConfigurationRecord.keys())})


@pytest.mark.unit
class TestRecordRoundTrip:
    """Test cases for set_all/get."""

    def test_every_key_reads_back(self, store):
        record = _full_record()
        store.set_all("MyApp", record)

        for key in ConfigurationRecord.keys():
            assert store.get("MyApp", key) == getattr(record, key)

    def test_unset_keys_read_back_as_none(self, store):
        store.set_all("MyApp", ConfigurationRecord(use_arc="true", verbose="false"))

        assert store.get("MyApp", "use_arc") == "true"
        assert store.get("MyApp", "verbose") == "false"
        assert store.get("MyApp", "use_gc") is None
        assert store.get("MyApp", "bootclasspath") is None

    def test_set_all_removes_stale_keys(self, store):
        store.set_all("MyApp", _full_record())
        store.set_all("MyApp", ConfigurationRecord(quiet="true"))

        assert store.get_all("MyApp") == ConfigurationRecord(quiet="true")

    def test_set_all_keeps_classpath(self, store):
        store.set_classpath("MyApp", ["lib/a.jar"])
        store.set_all("MyApp", ConfigurationRecord(quiet="true"))

        assert store.get_classpath("MyApp") == ["lib/a.jar"]

    def test_projects_are_isolated(self, store):
        store.set_all("One", ConfigurationRecord(use_arc="true"))
        store.set_all("Two", ConfigurationRecord(use_gc="true"))

        assert store.get("One", "use_gc") is None
        assert store.get("Two", "use_arc") is None
        assert store.project_ids() == ["One", "Two"]

    def test_values_survive_a_new_instance(self, store):
        store.set_all("My App 2.0", ConfigurationRecord(timing_info="true"))

        reopened = TomlConfigurationStore(store.path)
        assert reopened.get("My App 2.0", "timing_info") == "true"

    def test_missing_file_reads_as_empty(self, store):
        assert not store.path.exists()
        assert store.get("MyApp", "use_arc") is None
        assert store.get_all("MyApp") == ConfigurationRecord()
        assert store.project_ids() == []

    def test_file_is_valid_toml(self, store):
        store.set_all("MyApp", ConfigurationRecord(use_arc="true"))

        with open(store.path, "rb") as f:
            document = tomllib.load(f)
        assert document["projects"]["MyApp"] == {"use_arc": "true"}

    def test_unknown_key_is_rejected(self, store):
        with pytest.raises(ValidationError):
            store.get("MyApp", "not_a_key")
        with pytest.raises(ValidationError):
            store.set("MyApp", "not_a_key", "x")

    def test_malformed_file_raises(self, store):
        store.path.parent.mkdir(parents=True)
        store.path.write_text("[projects\n")

        with pytest.raises(tomllib.TOMLDecodeError):
            store.get("MyApp", "use_arc")


@pytest.mark.unit
class TestClasspath:
    """Test cases for classpath storage."""

    def test_missing_value_is_empty(self, store):
        assert store.get_classpath("MyApp") == []

    def test_empty_value_is_empty(self, store):
        store.set_classpath("MyApp", [])

        assert store.get("MyApp", "classpath") == ""
        assert store.get_classpath("MyApp") == []

    def test_round_trip_with_trailing_separator(self, store):
        store.set_classpath("MyApp", ["a", "b"])

        assert store.get("MyApp", "classpath") == "a,b,"
        assert store.get_classpath("MyApp") == ["a", "b"]

    def test_none_entries_are_skipped(self):
        assert encode_classpath(["a", None, "b"]) == "a,b,"

    @pytest.mark.parametrize(
        "stored, expected",
        [
            (None, []),
            ("", []),
            ("   ", []),
            (",", []),
            ("a", ["a"]),
            ("a,,b,", ["a", "b"]),
            ("lib/x.jar,lib/y.jar,", ["lib/x.jar", "lib/y.jar"]),
        ],
    )
    def test_decode(self, stored, expected):
        assert decode_classpath(stored) == expected


TRICKY_VALUES = [
    "C:\\xdeps\\a.jar",
    "C:\\x41",
    "C:\\Users\\dev\\lib\\rt.jar",
    "\\\\server\\share\\mappings.properties",
    'say "hi"',
    "it's",
    "tab\there",
    "line\nbreak",
    "ends with backslash\\",
    "/home/usér/ünïcode",
    "\u0001control",
]


@pytest.mark.unit
class TestEscaping:
    """Test cases for values that need escaping in TOML."""

    @pytest.mark.parametrize("value", TRICKY_VALUES)
    def test_record_value_round_trip(self, store, value):
        store.set_all("MyApp", ConfigurationRecord(method_mapping_file=value, bootclasspath=value))

        reopened = TomlConfigurationStore(store.path)
        assert reopened.get("MyApp", "method_mapping_file") == value
        assert reopened.get("MyApp", "bootclasspath") == value

    @pytest.mark.parametrize("value", TRICKY_VALUES)
    def test_classpath_round_trip(self, store, value):
        if "," in value:
            pytest.skip("commas separate classpath entries")
        store.set_classpath("MyApp", [value, "lib/b.jar"])

        assert TomlConfigurationStore(store.path).get_classpath("MyApp") == [value, "lib/b.jar"]

    def test_windows_classpath_keeps_other_projects_readable(self, store):
        store.set_all("Other", ConfigurationRecord(use_arc="true"))
        store.set_classpath("MyApp", ["C:\\xdeps\\a.jar"])

        assert store.get("Other", "use_arc") == "true"
        assert store.get_classpath("MyApp") == ["C:\\xdeps\\a.jar"]

    def test_unrepresentable_project_id_leaves_file_intact(self, store):
        store.set_all("MyApp", ConfigurationRecord(quiet="true"))
        before = store.path.read_bytes()

        with pytest.raises(ValidationError):
            store.set_all("C:\\xdeps", ConfigurationRecord(quiet="true"))

        assert store.path.read_bytes() == before
        assert store.get("MyApp", "quiet") == "true"

    def test_rendered_document_is_valid_toml(self):
        document = {"projects": {"MyApp": {"bootclasspath": "C:\\x41", "quiet": "true"}}}

        assert tomllib.loads(render_document(document)) == document
