"""
Process-wide logger table.

Each (severity, target) pair has exactly one `Logger`, built once at import:

    v d i w e a     system sink
    fv fd fi fw fe fa   default rotating file sink
    none            DISABLED, bound to a null sink

`diagnostics` is the library's own ERROR logger. It always writes to the
system sink so that a failing file sink never reports into itself.
"""

from __future__ import annotations

from typing import NamedTuple

from .file_sink import RotatingFileSink
from .levels import Severity
from .logger import Logger
from .sinks import BaseSink, NullSink, SystemSink

system_sink = SystemSink()
file_sink = RotatingFileSink()
null_sink = NullSink()


class LoggerSet(NamedTuple):
    """One logger per emitting severity, all bound to the same target."""

    v: Logger
    d: Logger
    i: Logger
    w: Logger
    e: Logger
    a: Logger

    @classmethod
    def bound_to(cls, sink: BaseSink) -> LoggerSet:
        return cls(
            Logger(Severity.VERBOSE, sink),
            Logger(Severity.DEBUG, sink),
            Logger(Severity.INFO, sink),
            Logger(Severity.WARN, sink),
            Logger(Severity.ERROR, sink),
            Logger(Severity.ASSERT, sink),
        )

    def at(self, severity: Severity) -> Logger:
        """Logger of this set matching `severity`."""
        severity = Severity.parse(severity)
        if severity is Severity.DISABLED:
            raise ValueError("DISABLED has no emitting logger")
        return self[int(severity) - int(Severity.VERBOSE)]


SYSTEM = LoggerSet.bound_to(system_sink)
FILE = LoggerSet.bound_to(file_sink)

v, d, i, w, e, a = SYSTEM
fv, fd, fi, fw, fe, fa = FILE
none = Logger(Severity.DISABLED, null_sink)

diagnostics = Logger(Severity.ERROR, system_sink)

__all__ = [
    "LoggerSet",
    "SYSTEM",
    "FILE",
    "system_sink",
    "file_sink",
    "null_sink",
    "diagnostics",
    "none",
    "v", "d", "i", "w", "e", "a",
    "fv", "fd", "fi", "fw", "fe", "fa",
]
