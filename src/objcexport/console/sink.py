"""
Console log sinks for narrated build output.

A sink is an append-only line stream with a ``clear()`` operation. Build
events may be relayed from whatever thread reads the build tool's output,
so every implementation serializes writes and clears with a lock.
"""

import logging
import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, Any, List, Optional

logger = logging.getLogger(__name__)

NEW_LINE = "\n"
_ANSI_CLEAR = "\033[2J\033[H"


class LogSink(ABC):
    """Abstract base class for narrated output destinations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def println(self, text: str) -> None:
        """
        Append one line.

        Raises:
            OSError: If the underlying destination cannot be written
        """
        with self._lock:
            self._write(text + NEW_LINE)

    def clear(self) -> None:
        """Discard everything written so far."""
        with self._lock:
            self._clear()

    def close(self) -> None:
        """Release the destination. The default has nothing to release."""

    @abstractmethod
    def _write(self, text: str) -> None:
        pass

    @abstractmethod
    def _clear(self) -> None:
        pass

    def __enter__(self) -> "LogSink":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class StreamSink(LogSink):
    """
    Writes to a text stream, stdout by default.

    Clearing a terminal emits the ANSI clear-screen sequence; clearing a
    non-terminal stream is not possible and only logged.
    """

    def __init__(self, stream: Optional[IO[str]] = None):
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def _clear(self) -> None:
        isatty = getattr(self.stream, "isatty", None)
        if isatty is not None and isatty():
            self.stream.write(_ANSI_CLEAR)
            self.stream.flush()
        else:
            logger.debug("Console stream is not a terminal, nothing to clear")


class FileSink(LogSink):
    """Appends to a file; ``clear()`` truncates it."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle: Optional[IO[str]] = open(self.path, "a", encoding="utf-8")
        logger.debug(f"Console output goes to {self.path}")

    def _write(self, text: str) -> None:
        if self._handle is None:
            raise OSError(f"Console file {self.path} is closed")
        self._handle.write(text)
        self._handle.flush()

    def _clear(self) -> None:
        if self._handle is None:
            raise OSError(f"Console file {self.path} is closed")
        self._handle.seek(0)
        self._handle.truncate()

    def close(self) -> None:
        with self._lock:
            if self._handle is None:
                return
            try:
                self._handle.close()
            except Exception as e:
                logger.warning(f"Failed to close console file {self.path}: {e}")
            finally:
                self._handle = None


class MemorySink(LogSink):
    """Keeps lines in memory. Used by tests and by callers that render output themselves."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer: List[str] = []
        self.clear_count = 0

    def _write(self, text: str) -> None:
        self._buffer.append(text)

    def _clear(self) -> None:
        self._buffer.clear()
        self.clear_count += 1

    @property
    def text(self) -> str:
        with self._lock:
            return "".join(self._buffer)

    @property
    def lines(self) -> List[str]:
        return self.text.splitlines()


def create_sink(target: str) -> LogSink:
    """Create the sink named by the `[console] target` setting."""
    if target == "stdout":
        return StreamSink(sys.stdout)
    if target == "stderr":
        return StreamSink(sys.stderr)
    return FileSink(Path(target).expanduser())
