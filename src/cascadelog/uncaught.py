"""
Uncaught exception path.

`handle_uncaught()` is where failures that must not reach the caller end up,
such as a sink that rejected both a line and its fallback. By default it hands
the exception to `sys.excepthook`; `UncaughtExceptionReporter` replaces the
process hooks so that uncaught exceptions from any thread are logged through
the system error logger before the previous hooks run.
"""

from __future__ import annotations

import sys
import threading
import traceback
from types import TracebackType
from typing import Callable, Optional

UncaughtHandler = Callable[[BaseException], None]

_handler: Optional[UncaughtHandler] = None
_guard = threading.local()


def _default_handler(exc: BaseException) -> None:
    sys.excepthook(type(exc), exc, exc.__traceback__)


def set_uncaught_handler(handler: Optional[UncaughtHandler]) -> None:
    """Replace the handler; None restores `sys.excepthook` delivery."""
    global _handler
    _handler = handler


def handle_uncaught(exc: BaseException) -> None:
    """Deliver `exc` to the uncaught handler without ever raising."""
    if getattr(_guard, "active", False):
        # Re-entered from inside the handler: the logging path itself is broken.
        traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.__stderr__)
        return
    _guard.active = True
    try:
        (_handler or _default_handler)(exc)
    except Exception:
        traceback.print_exc(file=sys.__stderr__)
    finally:
        _guard.active = False


class UncaughtExceptionReporter:
    """Logs uncaught exceptions, then chains to the hooks it replaced."""

    TAG = "UncaughtException"

    def __init__(self) -> None:
        self._original_excepthook = None
        self._original_threading_hook = None
        self.installed = False

    def install(self) -> "UncaughtExceptionReporter":
        if self.installed:
            return self
        self._original_excepthook = sys.excepthook
        self._original_threading_hook = threading.excepthook
        sys.excepthook = self._excepthook
        threading.excepthook = self._threading_hook
        self.installed = True
        return self

    def uninstall(self) -> None:
        if not self.installed:
            return
        sys.excepthook = self._original_excepthook
        threading.excepthook = self._original_threading_hook
        self.installed = False

    def report(self, exc: BaseException, thread_name: str | None = None) -> None:
        from .loggers import d, e

        d.tag_msg(self.TAG, "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip())
        if thread_name:
            e.tag_msg(self.TAG, f"[{thread_name}] ", exc)
        else:
            e.tag_msg(self.TAG, exc)

    def _excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        self.report(exc)
        if self._original_excepthook is not None:
            self._original_excepthook(exc_type, exc, tb)

    def _threading_hook(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_value is not None:
            self.report(args.exc_value, thread_name=getattr(args.thread, "name", None))
        if self._original_threading_hook is not None:
            self._original_threading_hook(args)
