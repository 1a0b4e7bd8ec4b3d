"""
cascadelog error taxonomy.

Only `throw()` lets an exception escape the logging path, and that exception is
the caller's own. Everything defined here is raised and handled inside the
library: format errors degrade the message, dispatch errors go to the uncaught
handler path, and I/O errors are reported through the system sink.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CascadeLogError(Exception):
    """Base class for cascadelog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class LogFormatError(CascadeLogError):
    """printf-style pattern does not match its arguments."""

    def __init__(self, *, pattern: str, reason: str) -> None:
        super().__init__(
            f"cannot format {pattern!r}: {reason}",
            code="FORMAT_ERROR",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
        self.reason = reason


class SinkDispatchError(CascadeLogError):
    """A sink rejected a line and the fallback write failed as well."""

    def __init__(self, *, sink: str, tag: str, reason: str) -> None:
        super().__init__(
            f"sink {sink} rejected line tagged {tag!r}: {reason}",
            code="SINK_DISPATCH_ERROR",
            details={"sink": sink, "tag": tag, "reason": reason},
        )


class SinkIOError(CascadeLogError):
    """File open, write, rotate or archive failure on the writer thread."""

    def __init__(self, *, path: str, operation: str, reason: str) -> None:
        super().__init__(
            f"{operation} failed for {path}: {reason}",
            code="SINK_IO_ERROR",
            details={"path": path, "operation": operation, "reason": reason},
        )
        self.path = path
        self.operation = operation


class SinkClosedError(CascadeLogError):
    """Control command issued to a sink whose writer thread was interrupted."""

    def __init__(self, *, sink: str, operation: str) -> None:
        super().__init__(
            f"cannot {operation}: writer of {sink} is not running",
            code="SINK_CLOSED",
            details={"sink": sink, "operation": operation},
        )
