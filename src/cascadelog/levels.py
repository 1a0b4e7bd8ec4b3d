"""
Severity levels and the process-wide global threshold.

The threshold is a plain module global: every logging call reads it once, with
no synchronization, before doing any other work. Writes from another thread
become visible eventually, which is all a log-level knob needs.
"""

from __future__ import annotations

import logging
from enum import IntEnum

from .config.environment import EnvironmentSettings


class Severity(IntEnum):
    """Ordered log priority (2=V, 3=D, 4=I, 5=W, 6=E, 7=A, 8=disabled)."""

    VERBOSE = 2
    DEBUG = 3
    INFO = 4
    WARN = 5
    ERROR = 6
    ASSERT = 7
    DISABLED = 8

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @classmethod
    def parse(cls, value: str | int | Severity) -> Severity:
        """Accept a Severity, its integer code, its name or a stdlib level name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        key = str(value).strip().upper()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"unknown severity {value!r}") from None

    @classmethod
    def from_stdlib(cls, levelno: int) -> Severity:
        """Map a stdlib `logging` level number onto the closest severity."""
        if levelno >= logging.CRITICAL:
            return cls.ASSERT
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.VERBOSE

    def to_stdlib(self) -> int:
        return _STDLIB_LEVELS[self]


_GLYPHS = {
    Severity.VERBOSE: "V",
    Severity.DEBUG: "D",
    Severity.INFO: "I",
    Severity.WARN: "W",
    Severity.ERROR: "E",
    Severity.ASSERT: "A",
    Severity.DISABLED: "-",
}

_ALIASES = {
    "V": Severity.VERBOSE,
    "D": Severity.DEBUG,
    "I": Severity.INFO,
    "W": Severity.WARN,
    "WARNING": Severity.WARN,
    "E": Severity.ERROR,
    "A": Severity.ASSERT,
    "CRITICAL": Severity.ASSERT,
    "NONE": Severity.DISABLED,
    "OFF": Severity.DISABLED,
}

_STDLIB_LEVELS = {
    Severity.VERBOSE: 5,
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.ASSERT: logging.CRITICAL,
    Severity.DISABLED: logging.CRITICAL + 10,
}


# =============================================================================
# Global Threshold
# =============================================================================


def default_min_level(environment: EnvironmentSettings | None = None) -> Severity:
    """WARN for production builds, VERBOSE otherwise."""
    environment = environment or EnvironmentSettings()
    return Severity.WARN if environment.is_production else Severity.VERBOSE


_min_level: int = int(default_min_level())


def set_min_level(level: str | int | Severity) -> Severity:
    """Set the global threshold. Returns the parsed severity."""
    global _min_level
    severity = Severity.parse(level)
    _min_level = int(severity)
    return severity


def get_min_level() -> Severity:
    return Severity(_min_level)


def is_loggable(severity: int) -> bool:
    """DISABLED is never loggable, whatever the threshold."""
    return _min_level <= severity < Severity.DISABLED
