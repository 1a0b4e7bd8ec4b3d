from __future__ import annotations

import pytest

from cascadelog import levels
from cascadelog.file_sink import RotatingFileSink
from cascadelog.levels import Severity
from cascadelog.logger import DEFAULT_TAG_PREFIX, set_notifier, set_tag_prefix
from cascadelog.sinks import MemorySink
from cascadelog.tags import clear_thread_tag
from cascadelog.uncaught import set_uncaught_handler


@pytest.fixture(autouse=True)
def reset_facade_state():
    """
    Every test starts from the same process-wide state.

    Threshold, thread tag, tag prefix, notifier and uncaught handler are
    module globals shared by all loggers.
    """
    previous = levels.get_min_level()
    levels.set_min_level(Severity.VERBOSE)
    clear_thread_tag()
    set_tag_prefix(DEFAULT_TAG_PREFIX)
    yield
    levels.set_min_level(previous)
    clear_thread_tag()
    set_tag_prefix(DEFAULT_TAG_PREFIX)
    set_notifier(None)
    set_uncaught_handler(None)


@pytest.fixture
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def uncaught() -> list[BaseException]:
    """Collects exceptions delivered to the uncaught handler path."""
    caught: list[BaseException] = []
    set_uncaught_handler(caught.append)
    return caught


@pytest.fixture
def diagnostics_sink(monkeypatch) -> MemorySink:
    """Redirects the library's own error reports into memory."""
    from cascadelog import loggers
    from cascadelog.logger import Logger

    sink = MemorySink()
    monkeypatch.setattr(loggers, "diagnostics", Logger(Severity.ERROR, sink))
    return sink


@pytest.fixture
def file_sink(tmp_path):
    """Rotating file sink in a temporary directory with a 100 byte limit."""
    sink = RotatingFileSink(tmp_path, "filelog.txt", 100)
    yield sink
    sink.shutdown()
