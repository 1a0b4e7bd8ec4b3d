"""
Lazy message construction.

Nothing here runs unless the calling logger already passed the threshold. A
message is a sequence of parts; plain parts are stringized and joined, and a
`Token` part takes over the rest of the sequence as its own arguments.
"""

from __future__ import annotations

import traceback
from abc import ABC, abstractmethod
from typing import Any, Sequence

from .exceptions import LogFormatError

FORMAT_ERROR_MARKER = "[format error: {reason}]"


# =============================================================================
# Tokens
# =============================================================================


class Token(ABC):
    """Formatting directive placed among message parts.

    When the join reaches a token, the token renders every remaining part and
    joining stops there.
    """

    @abstractmethod
    def render(self, args: Sequence[Any]) -> str:
        ...


class Fmt(Token):
    """printf-style substitution of the remaining parts into `pattern`."""

    def __init__(self, pattern: str):
        self.pattern = pattern

    def render(self, args: Sequence[Any]) -> str:
        return safe_format(self.pattern, args)

    def __repr__(self) -> str:
        return f"Fmt({self.pattern!r})"


class Ident(Token):
    """Identity tags (`ClassName@hex`) of the remaining parts."""

    def render(self, args: Sequence[Any]) -> str:
        return " ".join(identity_tag(arg) for arg in args)

    def __repr__(self) -> str:
        return "Ident()"


def identity_tag(obj: Any) -> str:
    return f"{type(obj).__name__}@{id(obj):x}"


# =============================================================================
# Formatting
# =============================================================================


def printf(pattern: str, args: Sequence[Any]) -> str:
    """Apply `%` formatting, raising LogFormatError on any mismatch."""
    try:
        if len(args) == 1 and isinstance(args[0], dict):
            return pattern % args[0]
        return pattern % tuple(args)
    except Exception as exc:
        # Includes failures raised by an argument's __str__ or __repr__.
        raise LogFormatError(pattern=pattern, reason=f"{type(exc).__name__}: {exc}") from exc


def safe_format(pattern: str, args: Sequence[Any]) -> str:
    """printf() that degrades to the raw pattern plus an error marker."""
    try:
        return printf(pattern, args)
    except LogFormatError as exc:
        return f"{pattern} {FORMAT_ERROR_MARKER.format(reason=exc.reason)}"


# =============================================================================
# Throwables
# =============================================================================


def exception_message(exc: BaseException) -> str:
    """Localized message of an exception, its class name when empty."""
    try:
        text = str(exc)
    except Exception:
        text = ""
    return text if text else type(exc).__name__


def exception_cause(exc: BaseException) -> BaseException | None:
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__context__ is not None and not exc.__suppress_context__:
        return exc.__context__
    return None


def render_exception(exc: BaseException) -> str:
    """`<message>` plus ` Cause=<cause>` when the exception has a cause."""
    text = exception_message(exc)
    cause = exception_cause(exc)
    if cause is not None:
        text += f" Cause={exception_message(cause)}"
    return text


def stack_trace(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip("\n")


# =============================================================================
# Join
# =============================================================================


def unprintable(obj: Any) -> str:
    return f"<unprintable {type(obj).__name__}>"


def stringize(part: Any) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, BaseException):
        return render_exception(part)
    try:
        return str(part)
    except Exception:
        return unprintable(part)


def join_parts(parts: Sequence[Any], sep: str = "") -> str:
    """Join message parts, handing off to the first Token encountered."""
    pieces: list[str] = []
    for index, part in enumerate(parts):
        if isinstance(part, Token):
            pieces.append(part.render(parts[index + 1 :]))
            break
        pieces.append(stringize(part))
    return sep.join(pieces)
