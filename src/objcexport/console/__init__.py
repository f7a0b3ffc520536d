"""
Console output for narrated build progress.
"""

from .sink import NEW_LINE, FileSink, LogSink, MemorySink, StreamSink, create_sink

__all__ = [
    "NEW_LINE",
    "FileSink",
    "LogSink",
    "MemorySink",
    "StreamSink",
    "create_sink",
]
