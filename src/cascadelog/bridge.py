"""
Bridges from the standard library `logging` module and from structlog.

Both routes end in the facade: the record's level picks the logger of the
target set (system or file) and the record's logger name becomes the tag, so
the global threshold, tag handling and sinks apply to third-party output too.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from .levels import Severity
from .loggers import SYSTEM, LoggerSet

# =============================================================================
# Stdlib -> facade
# =============================================================================


class RedirectStdLibHandler(logging.Handler):
    """Redirect standard library logging records into the facade."""

    def __init__(self, target: LoggerSet = SYSTEM, level: int = logging.NOTSET):
        super().__init__(level)
        self.target = target
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            logger = self.target.at(Severity.from_stdlib(record.levelno))
            if not logger.is_loggable:
                return
            logger.tag_msg(simplify_logger_name(record.name), self.format(record))
        except Exception:
            self.handleError(record)


def simplify_logger_name(name: str) -> str:
    """
    Simplify a logger name for use as a tag.

    Rules:
    - "" or "root" -> "root"
    - "uvicorn.access" -> "uvicorn.access"
    - Other -> keep last 2 parts
    """
    if not name:
        return "root"
    parts = name.split(".")
    if len(parts) <= 2:
        return name
    return ".".join(parts[-2:])


def intercept_stdlib(target: LoggerSet = SYSTEM, level: int = logging.NOTSET) -> RedirectStdLibHandler:
    """Replace the root logger's handlers with a redirect into the facade."""
    root_logger = logging.getLogger()
    release_stdlib()
    handler = RedirectStdLibHandler(target)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler


def release_stdlib() -> None:
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RedirectStdLibHandler):
            root_logger.removeHandler(handler)


# =============================================================================
# Structlog -> facade
# =============================================================================

_structlog_target: LoggerSet = SYSTEM

_EXCLUDED_KEYS = {"level", "event", "message", "logger", "_name", "timestamp"}


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = event_dict.get("_name", "root")
    event_dict.pop("_name", None)
    return event_dict


def cascade_renderer(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
    """Hand the event to the facade. Returns empty to suppress default output."""
    try:
        severity = Severity.parse(event_dict.get("level", method_name))
    except ValueError:
        severity = Severity.INFO
    if severity is Severity.DISABLED:
        return ""

    message = str(event_dict.get("message", event_dict.get("event", "")))
    extras = [f"{k}={v}" for k, v in event_dict.items() if k not in _EXCLUDED_KEYS]
    if extras:
        message = f"{message} " + " ".join(extras)

    _structlog_target.at(severity).tag_msg(str(event_dict.get("logger", "root")), message)
    return ""


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


class SilentPrintLoggerFactory:
    """Logger factory that returns a logger writing to nowhere."""

    def __call__(self, *args: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=_NOP_FILE)


def _filtering_level(level: str | int | Severity) -> int:
    """structlog only knows the stdlib levels from NOTSET to CRITICAL."""
    severity = Severity.parse(level)
    if severity <= Severity.VERBOSE:
        return logging.NOTSET
    return min(severity.to_stdlib(), logging.CRITICAL)


def configure_structlog(level: str | int | Severity = Severity.VERBOSE, target: LoggerSet = SYSTEM) -> None:
    """Configure structlog so that every event is emitted through the facade."""
    global _structlog_target
    _structlog_target = target

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            cascade_renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_filtering_level(level)),
        context_class=dict,
        logger_factory=SilentPrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger whose events go through the facade."""
    return structlog.get_logger(_name=name or "root")
