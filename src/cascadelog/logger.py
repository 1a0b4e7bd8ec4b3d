"""
Cascaded, level-gated logger.

Usage:
    from cascadelog import loggers

    loggers.d.msg("log this message")
    loggers.e.tag("MyFooClass").fmt("First:%s Last:%s", first, last)
    loggers.i.out(file_sink).tag("FooBar").cat(" ", item.name, item.desc)
    loggers.w.tag_msg(self, "fast path, no stack inspection")

Every entry point compares the logger's severity with the global threshold
first and returns immediately when gated out, so tag resolution, joining and
formatting only run for lines that will be emitted.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, NoReturn, Optional

from . import levels
from .exceptions import SinkDispatchError
from .levels import Severity
from .rendering import exception_message, join_parts, safe_format, stack_trace, stringize
from .sinks import BaseSink
from .tags import clear_thread_tag, resolve_tag, set_thread_tag, tag_of
from .uncaught import handle_uncaught

Notifier = Callable[[Severity, str, str], None]

DEFAULT_TAG_PREFIX = "cl."

_tag_prefix: str = DEFAULT_TAG_PREFIX
_notifier: Optional[Notifier] = None


def set_tag_prefix(prefix: str) -> None:
    global _tag_prefix
    _tag_prefix = prefix


def get_tag_prefix() -> str:
    return _tag_prefix


def set_notifier(notifier: Optional[Notifier]) -> None:
    """Callable shown ERROR and ASSERT lines logged from the main thread."""
    global _notifier
    _notifier = notifier


class Logger:
    """Fixed severity bound to a replaceable sink.

    Instances are process-wide singletons (see `cascadelog.loggers`); the
    severity never changes, only the bound sink may be swapped with `out()`.
    """

    __slots__ = ("_severity", "_sink")

    def __init__(self, severity: Severity, sink: BaseSink):
        self._severity = Severity(severity)
        self._sink = sink

    @property
    def severity(self) -> Severity:
        return self._severity

    @property
    def sink(self) -> BaseSink:
        return self._sink

    @property
    def is_loggable(self) -> bool:
        return levels.is_loggable(self._severity)

    def __repr__(self) -> str:
        return f"Logger({self._severity.name}, {self._sink.name})"

    # -------------------------------------------------------------------------
    # Cascade
    # -------------------------------------------------------------------------

    def out(self, sink: BaseSink) -> Logger:
        """Bind a different output sink."""
        self._sink = sink
        return self

    def tag(self, tag: str) -> Logger:
        """Set the calling thread's tag for subsequent lines.

        An empty string clears it, like `self_tag()`.
        """
        if levels.is_loggable(self._severity):
            set_thread_tag(tag or None)
        return self

    def self_tag(self) -> Logger:
        """Derive the tag from the caller's `file:line`. Stack inspection is slow.

        Clears the tag even when gated out; the DISABLED logger leaves it alone.
        """
        if self._severity is not Severity.DISABLED:
            clear_thread_tag()
        return self

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    def msg(self, *parts: Any, sep: str = "") -> None:
        """Join parts (exceptions render as message plus cause) and emit."""
        if levels.is_loggable(self._severity):
            self.println(resolve_tag(), join_parts(parts, sep))

    def msg_tr(self, text: str, exc: BaseException) -> None:
        """Emit text followed by the exception's stack trace."""
        if levels.is_loggable(self._severity):
            self.println(resolve_tag(), "\n".join((stringize(text), stack_trace(exc))))

    def fmt(self, pattern: str, *args: Any) -> None:
        """printf-style message. A mismatch emits the raw pattern and a marker."""
        if levels.is_loggable(self._severity):
            self.println(resolve_tag(), safe_format(pattern, args))

    def cat(self, sep: str, *parts: Any) -> None:
        """Join parts with `sep` and emit."""
        if levels.is_loggable(self._severity):
            self.println(resolve_tag(), join_parts(parts, sep))

    def tag_msg(self, tag_obj: Any, *parts: Any, sep: str = "") -> None:
        """Emit with a tag taken from `tag_obj`, leaving thread state untouched."""
        if levels.is_loggable(self._severity):
            self.println(tag_of(tag_obj), join_parts(parts, sep))

    def tr(self, exc: BaseException) -> None:
        """Emit the exception's message and stack trace."""
        if levels.is_loggable(self._severity):
            self.println(resolve_tag(), "\n".join((exception_message(exc), stack_trace(exc))))

    def throw(self, exc: BaseException, *parts: Any) -> NoReturn:
        """Log `exc` (with optional leading parts), then raise it."""
        if levels.is_loggable(self._severity):
            text = join_parts(parts) if parts else exception_message(exc)
            self.println(resolve_tag(), "\n".join((text, stack_trace(exc))))
        raise exc

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def println(self, tag: str, message: str) -> None:
        """Hand a built line to the sink, demoting tags the sink cannot hold."""
        sink = self._sink
        prefix = _tag_prefix
        try:
            full_tag = prefix + tag
            if len(full_tag) <= sink.max_tag_len():
                sink.println(self._severity, full_tag, message)
            else:
                sink.println(self._severity, prefix, f"{tag}: {message}")
        except Exception as exc:
            try:
                sink.println(self._severity, prefix, exception_message(exc))
            except Exception as fallback_exc:
                error = SinkDispatchError(sink=sink.name, tag=tag, reason=exception_message(fallback_exc))
                error.__cause__ = fallback_exc
                handle_uncaught(error)

        if self._severity >= Severity.ERROR and _notifier is not None:
            self._notify(tag, message)

    def _notify(self, tag: str, message: str) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        notifier = _notifier
        if notifier is None:
            return
        try:
            notifier(self._severity, tag, message)
        except Exception as exc:
            handle_uncaught(exc)
