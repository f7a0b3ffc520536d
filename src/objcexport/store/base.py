"""
Abstract base class for per-project configuration stores.

A store keeps string values under (project id, key). Implementations only
provide the three primitives below; whole-record and classpath access are
built on top of them here so every backend shares the same key set and the
same classpath encoding.

The interface includes methods for:
- Reading a single key
- Replacing a group of keys for a project in one atomic write
- Reading and writing the full configuration record
- Reading and writing the classpath list
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Mapping, Optional, Sequence

from ..models.record import CLASSPATH_KEY, ConfigurationRecord
from ..validation import ValidationError

logger = logging.getLogger(__name__)

CLASSPATH_SEPARATOR = ","


class ConfigurationStore(ABC):
    """Abstract base class for configuration store implementations."""

    @abstractmethod
    def get_raw(self, project_id: str, key: str) -> Optional[str]:
        """
        Return the stored value, or None when the key is absent.

        Args:
            project_id: Project the key belongs to
            key: Key to look up
        """

    @abstractmethod
    def set_many(self, project_id: str, values: Mapping[str, Optional[str]]) -> None:
        """
        Write several keys for a project as one atomic update.

        A value of None removes the key.

        Args:
            project_id: Project the keys belong to
            values: Keys and their new values
        """

    @abstractmethod
    def project_ids(self) -> List[str]:
        """Return the ids of all projects with stored values."""

    def get(self, project_id: str, key: str) -> Optional[str]:
        _check_key(key)
        return self.get_raw(project_id, key)

    def set(self, project_id: str, key: str, value: Optional[str]) -> None:
        _check_key(key)
        self.set_many(project_id, {key: value})

    def get_all(self, project_id: str) -> ConfigurationRecord:
        """Read the full record; keys never written come back as None."""
        return ConfigurationRecord(
            **{key: self.get_raw(project_id, key) for key in ConfigurationRecord.keys()}
        )

    def set_all(self, project_id: str, record: ConfigurationRecord) -> None:
        """
        Replace the full record for a project.

        Every key of the fixed set is written, unset keys are removed, so no
        value from an earlier record can survive.
        """
        self.set_many(project_id, record.to_dict())
        logger.debug(f"Stored configuration record for project '{project_id}'")

    def get_classpath(self, project_id: str) -> List[str]:
        return decode_classpath(self.get_raw(project_id, CLASSPATH_KEY))

    def set_classpath(self, project_id: str, entries: Sequence[Optional[str]]) -> None:
        self.set_many(project_id, {CLASSPATH_KEY: encode_classpath(entries)})


def encode_classpath(entries: Sequence[Optional[str]]) -> str:
    """
    Join entries with a comma after each one, skipping None.

    The trailing separator keeps stored values byte-compatible with
    projects configured by earlier releases.
    """
    return "".join(f"{entry}{CLASSPATH_SEPARATOR}" for entry in entries if entry is not None)


def decode_classpath(value: Optional[str]) -> List[str]:
    """Split a stored classpath; missing, blank and empty entries yield nothing."""
    if value is None or not value.strip():
        return []
    return [
        entry for entry in value.split(CLASSPATH_SEPARATOR)
        if entry and entry != CLASSPATH_SEPARATOR
    ]


def _check_key(key: str) -> None:
    if key != CLASSPATH_KEY and key not in ConfigurationRecord.keys():
        raise ValidationError(f"Unknown configuration key: {key}", field_name="key", value=key)
