"""
Uncaught exception path tests.
"""

from __future__ import annotations

import sys
import threading

import pytest

from cascadelog import loggers
from cascadelog.levels import Severity
from cascadelog.logger import Logger
from cascadelog.sinks import MemorySink
from cascadelog.uncaught import UncaughtExceptionReporter, handle_uncaught, set_uncaught_handler


class TestHandleUncaught:
    def test_delivers_to_handler(self, uncaught: list[BaseException]) -> None:
        error = RuntimeError("x")
        handle_uncaught(error)
        assert uncaught == [error]

    def test_failing_handler_is_contained(self) -> None:
        def handler(exc: BaseException) -> None:
            raise ValueError("handler broke")

        set_uncaught_handler(handler)
        handle_uncaught(RuntimeError("x"))

    def test_default_handler_uses_excepthook(self, monkeypatch) -> None:
        seen: list[BaseException] = []
        monkeypatch.setattr(sys, "excepthook", lambda t, v, tb: seen.append(v))
        error = RuntimeError("x")
        handle_uncaught(error)
        assert seen == [error]


@pytest.fixture
def reporter_sink(monkeypatch) -> MemorySink:
    sink = MemorySink()
    monkeypatch.setattr(loggers, "d", Logger(Severity.DEBUG, sink))
    monkeypatch.setattr(loggers, "e", Logger(Severity.ERROR, sink))
    return sink


class TestUncaughtExceptionReporter:
    """Process hooks log, then chain to the previous hooks"""

    def test_excepthook_reports_and_chains(self, monkeypatch, reporter_sink: MemorySink) -> None:
        chained: list[BaseException] = []
        monkeypatch.setattr(sys, "excepthook", lambda t, v, tb: chained.append(v))
        reporter = UncaughtExceptionReporter().install()
        try:
            error = ValueError("unhandled")
            sys.excepthook(ValueError, error, None)
        finally:
            reporter.uninstall()
        assert chained == [error]
        assert [r.severity for r in reporter_sink.records] == [Severity.DEBUG, Severity.ERROR]
        assert reporter_sink.records[1] == (Severity.ERROR, "cl.UncaughtException", "unhandled")

    def test_thread_exceptions_name_the_thread(self, monkeypatch, reporter_sink: MemorySink) -> None:
        chained: list[str] = []
        monkeypatch.setattr(threading, "excepthook", lambda args: chained.append(args.thread.name))
        reporter = UncaughtExceptionReporter().install()
        try:

            def fail() -> None:
                raise KeyError("lost")

            worker = threading.Thread(target=fail, name="worker-1")
            worker.start()
            worker.join()
        finally:
            reporter.uninstall()
        assert chained == ["worker-1"]
        assert reporter_sink.messages()[-1] == "[worker-1] 'lost'"

    def test_uninstall_restores_hooks(self, monkeypatch) -> None:
        original = sys.excepthook
        reporter = UncaughtExceptionReporter()
        reporter.install()
        assert sys.excepthook is not original
        reporter.install()
        reporter.uninstall()
        assert sys.excepthook is original
        assert not reporter.installed
