"""
Line formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from .levels import Severity

# =============================================================================
# Rendered Line (file sink)
# =============================================================================

DEFAULT_LINE_FORMAT = "{timestamp} {level} {tag} - {message}"
DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def format_timestamp(now: datetime, fmt: str) -> str:
    """strftime where `%f` means milliseconds."""
    if "%f" in fmt:
        fmt = fmt.replace("%f", f"{now.microsecond // 1000:03d}")
    return now.strftime(fmt)


class LineFormatter:
    """Four-field line pattern: timestamp, severity glyph, tag, message."""

    FIELDS = ("timestamp", "level", "tag", "message")

    def __init__(self, pattern: str = DEFAULT_LINE_FORMAT, timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT):
        self._check(pattern)
        self.pattern = pattern
        self.timestamp_format = timestamp_format

    @classmethod
    def _check(cls, pattern: str) -> None:
        try:
            pattern.format(**{name: "" for name in cls.FIELDS})
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"invalid line format {pattern!r}: {exc}") from exc

    def format(self, severity: int, tag: str, message: str, now: datetime | None = None) -> str:
        return self.pattern.format(
            timestamp=format_timestamp(now or datetime.now(), self.timestamp_format),
            level=Severity(severity).glyph,
            tag=tag,
            message=message,
        )


# =============================================================================
# Console Formatter (system sink)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "tag": "\033[35m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Human-readable system log rendering (fixed width, right-aligned)."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "VERBOSE": "\x1b[2m",
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARN": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "ASSERT": "\x1b[1;31m",
    }

    TIMESTAMP_FORMAT = "%H:%M:%S"
    LEVEL_WIDTH = 1
    TAG_WIDTH = 24
    SEPARATOR = " | "

    @classmethod
    def configure(
        cls,
        *,
        timestamp_format: str | None = None,
        level_width: int | None = None,
        tag_width: int | None = None,
        separator: str | None = None,
    ) -> None:
        """Configure alignment and rendering parameters."""
        if timestamp_format:
            cls.TIMESTAMP_FORMAT = timestamp_format
        if level_width:
            cls.LEVEL_WIDTH = level_width
        if tag_width:
            cls.TAG_WIDTH = tag_width
        if separator is not None:
            cls.SEPARATOR = separator

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    @classmethod
    def _colorize_level(cls, text: str, level_name: str, use_color: bool) -> str:
        if not use_color:
            return text
        color = cls._LEVEL_COLORS.get(level_name)
        if not color:
            return text
        return f"{color}{text}{cls._RESET}"

    @staticmethod
    def _maybe_color(text: str, color: str, use_color: bool) -> str:
        if not use_color:
            return text
        return colorize(text, color)

    @classmethod
    def format(cls, record: Mapping[str, Any], *, use_color: bool = True) -> str:
        """Format a record dict (level, tag, message, timestamp) into an aligned line."""
        severity = Severity.parse(record.get("level", Severity.INFO))
        now = record.get("timestamp") or datetime.now()
        if isinstance(now, str):
            now = datetime.fromisoformat(now)

        level_text = severity.glyph if cls.LEVEL_WIDTH <= 1 else severity.name
        level_text = cls._colorize_level(cls._fit_right(level_text, cls.LEVEL_WIDTH), severity.name, use_color)

        return "".join(
            [
                cls._maybe_color(format_timestamp(now, cls.TIMESTAMP_FORMAT), "timestamp", use_color),
                cls.SEPARATOR,
                level_text,
                cls.SEPARATOR,
                cls._maybe_color(cls._fit_right(str(record.get("tag", "")), cls.TAG_WIDTH), "tag", use_color),
                cls.SEPARATOR,
                str(record.get("message", "")),
            ]
        )
