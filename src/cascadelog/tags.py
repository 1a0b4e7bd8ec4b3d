"""
Tag resolution.

An explicit tag lives in a per-thread slot shared by every logger. When the
slot is empty the tag is derived by walking the call stack to the first frame
outside this package, which is slow; `Logger.tag_msg` avoids it entirely.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Any

_INTERNAL_MODULES = ("cascadelog", "logging", "structlog")

_local = threading.local()


# =============================================================================
# Thread-local tag
# =============================================================================


def set_thread_tag(tag: str | None) -> None:
    _local.tag = tag


def get_thread_tag() -> str | None:
    return getattr(_local, "tag", None)


def clear_thread_tag() -> None:
    _local.tag = None


# =============================================================================
# Tag derivation
# =============================================================================


def _is_internal(module: str) -> bool:
    for prefix in _INTERNAL_MODULES:
        if module == prefix or module.startswith(prefix + "."):
            return True
    return False


def caller_tag() -> str:
    """`file:line` of the first frame outside cascadelog and the logging stacks."""
    frame = sys._getframe(1)
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if not _is_internal(module):
            return f"{os.path.basename(frame.f_code.co_filename)}:{frame.f_lineno}"
        frame = frame.f_back
    return ""


def resolve_tag() -> str:
    tag = get_thread_tag()
    return tag if tag is not None else caller_tag()


def tag_of(obj: Any) -> str:
    """Tag for an arbitrary object: strings as-is, otherwise a class name."""
    if isinstance(obj, str):
        return obj
    if isinstance(obj, type):
        return obj.__name__
    return type(obj).__name__
