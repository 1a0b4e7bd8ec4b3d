"""
Sink contract and the synchronous sinks.

A sink accepts `(severity, tag, message)` triples that the logger has already
gated and built. Sinks report the longest tag they accept; the logger demotes
longer tags into the message body.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime, timezone
from typing import Any, NamedTuple, TextIO

import orjson

from .config.sinks import SystemFormat, SystemSinkSettings, SystemStream
from .formatters import ConsoleFormatter
from .levels import Severity

DEFAULT_MAX_TAG_LEN = 100
STRICT_MAX_TAG_LEN = 23


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for log sinks."""

    def open(self, settings: Any = None) -> None:
        """Prepare the sink for output. Must be idempotent."""

    @abstractmethod
    def println(self, severity: int, tag: str, message: str) -> None:
        """Emit one line."""
        ...

    def max_tag_len(self) -> int:
        return DEFAULT_MAX_TAG_LEN

    def close(self) -> None:
        """Release resources."""

    @property
    def name(self) -> str:
        return type(self).__name__


class SystemSink(BaseSink):
    """Process system log: one line per record on stderr (or stdout).

    Args:
        fmt: Output format - "console" (aligned, colored on a TTY) or "json"
        stream: Output stream; resolved at write time when omitted
        strict_tags: Enforce the short per-call-site tag limit
    """

    def __init__(
        self,
        fmt: SystemFormat | str = SystemFormat.CONSOLE,
        stream: TextIO | None = None,
        strict_tags: bool = False,
    ):
        self._fmt = SystemFormat(fmt)
        self._stream = stream
        self._stream_name = SystemStream.STDERR
        self._strict_tags = strict_tags
        self._lock = threading.Lock()

    def open(self, settings: SystemSinkSettings | None = None) -> None:
        if settings is None:
            return
        self._fmt = settings.format
        self._stream_name = settings.stream
        self._strict_tags = settings.strict_tags
        ConsoleFormatter.configure(
            timestamp_format=settings.timestamp_format,
            level_width=settings.level_width,
            tag_width=settings.tag_width,
            separator=settings.separator,
        )

    @property
    def stream(self) -> TextIO:
        if self._stream is not None:
            return self._stream
        return sys.stdout if self._stream_name is SystemStream.STDOUT else sys.stderr

    def max_tag_len(self) -> int:
        return STRICT_MAX_TAG_LEN if self._strict_tags else DEFAULT_MAX_TAG_LEN

    def println(self, severity: int, tag: str, message: str) -> None:
        stream = self.stream
        if self._fmt is SystemFormat.JSON:
            line = orjson_dumps(
                {
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "level": Severity(severity).name,
                    "tag": tag,
                    "message": message,
                }
            )
        else:
            use_color = bool(getattr(stream, "isatty", lambda: False)())
            record = {"level": severity, "tag": tag, "message": message, "timestamp": datetime.now()}
            line = ConsoleFormatter.format(record, use_color=use_color)

        with self._lock:
            try:
                stream.write(line + "\n")
            except UnicodeEncodeError:
                encoding = getattr(stream, "encoding", None) or "utf-8"
                stream.write(line.encode(encoding, errors="replace").decode(encoding) + "\n")
            stream.flush()


class Record(NamedTuple):
    severity: int
    tag: str
    message: str


class MemorySink(BaseSink):
    """Keeps the most recent records in memory."""

    def __init__(self, capacity: int = 1000, max_tag_len: int = DEFAULT_MAX_TAG_LEN):
        self._records: deque[Record] = deque(maxlen=capacity)
        self._max_tag_len = max_tag_len
        self._lock = threading.Lock()

    def println(self, severity: int, tag: str, message: str) -> None:
        with self._lock:
            self._records.append(Record(severity, tag, message))

    def max_tag_len(self) -> int:
        return self._max_tag_len

    @property
    def records(self) -> list[Record]:
        with self._lock:
            return list(self._records)

    def messages(self) -> list[str]:
        return [record.message for record in self.records]

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class NullSink(BaseSink):
    """Discards everything."""

    def println(self, severity: int, tag: str, message: str) -> None:
        pass
