"""
TOML file backed configuration store.

All projects live in one file, one table per project under `[projects]`:

    [projects.MyApp]
    use_arc = "true"
    classpath = "lib/a.jar,lib/b.jar,"

Reads go through ``tomllib``. Writes are rendered with ``toml``, parsed back
as a check, then written to a temporary file in the same directory and moved
over the original, so a reader never sees a half-written snapshot.
"""

import logging
import os
import tempfile
import threading
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import toml

from ..validation import ErrorSeverity, ValidationError, handle_file_error
from .base import ConfigurationStore

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "projects"

_STRING_ESCAPES = {
    "\\": "\\\\",
    "\"": "\\\"",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


class TomlConfigurationStore(ConfigurationStore):
    """Configuration store persisted as a single TOML document."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def get_raw(self, project_id: str, key: str) -> Optional[str]:
        with self._lock:
            project = self._load().get(PROJECTS_TABLE, {}).get(project_id, {})
        value = project.get(key)
        return None if value is None else str(value)

    def set_many(self, project_id: str, values: Mapping[str, Optional[str]]) -> None:
        with self._lock:
            document = self._load()
            projects = document.setdefault(PROJECTS_TABLE, {})
            project = projects.setdefault(project_id, {})
            for key, value in values.items():
                if value is None:
                    project.pop(key, None)
                else:
                    project[key] = str(value)
            self._write(document)
        logger.debug(f"Wrote {len(values)} keys for project '{project_id}' to {self.path}")

    def project_ids(self) -> List[str]:
        with self._lock:
            return sorted(self._load().get(PROJECTS_TABLE, {}))

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            handle_file_error(
                error=e,
                context=f"reading configuration store {self.path}",
                severity=ErrorSeverity.ERROR,
                reraise=True,
                logger=logger,
            )
            raise

    def _write(self, document: Dict[str, Any]) -> None:
        text = render_document(document)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug(f"Temporary store file {tmp_name} already gone")
            handle_file_error(
                error=e,
                context=f"writing configuration store {self.path}",
                severity=ErrorSeverity.ERROR,
                reraise=True,
                logger=logger,
            )


def _basic_string(value: str) -> str:
    """Render ``value`` as a TOML basic string."""
    parts = []
    for ch in value:
        if ch in _STRING_ESCAPES:
            parts.append(_STRING_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


class StoreEncoder(toml.TomlEncoder):
    """
    TomlEncoder whose strings always read back unchanged with tomllib.

    The stock encoder escapes strings via ``repr``, which leaves sequences
    like ``\\x`` in Windows paths unescaped.
    """

    def __init__(self, _dict=dict, preserve=False):
        super().__init__(_dict, preserve)
        self.dump_funcs[str] = _basic_string


def render_document(document: Dict[str, Any]) -> str:
    """
    Render the store document, checking that it parses back to the same data.

    Table names still go through the stock encoder, so a project id that it
    cannot quote is rejected here instead of corrupting every project.

    Raises:
        ValidationError: If the rendered document does not read back unchanged
    """
    text = toml.dumps(document, encoder=StoreEncoder())
    try:
        parsed = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Configuration store cannot represent this data: {e}") from e
    if parsed != document:
        raise ValidationError("Configuration store cannot represent this data: values changed on read back")
    return text
