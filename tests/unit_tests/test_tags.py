"""
Thread-local tag and stack-derived tag tests.
"""

from __future__ import annotations

import threading

from cascadelog.tags import caller_tag, clear_thread_tag, get_thread_tag, resolve_tag, set_thread_tag, tag_of


class Widget:
    pass


class TestThreadTag:
    """Per-thread explicit tag"""

    def test_set_and_clear(self) -> None:
        set_thread_tag("Net")
        assert get_thread_tag() == "Net"
        assert resolve_tag() == "Net"
        clear_thread_tag()
        assert get_thread_tag() is None

    def test_tag_is_not_shared_between_threads(self) -> None:
        """Another thread never sees this thread's tag"""
        set_thread_tag("Main")
        seen: list[str | None] = []
        worker = threading.Thread(target=lambda: seen.append(get_thread_tag()))
        worker.start()
        worker.join()
        assert seen == [None]
        assert get_thread_tag() == "Main"


class TestDerivedTag:
    """Tag derived from the call stack"""

    def test_caller_tag_points_at_this_file(self) -> None:
        """The first frame outside the package gives file:line"""
        tag = caller_tag()
        name, line = tag.split(":")
        assert name == "test_tags.py"
        assert int(line) > 0

    def test_resolve_without_explicit_tag_derives(self) -> None:
        clear_thread_tag()
        assert resolve_tag().startswith("test_tags.py:")


class TestTagOf:
    """Fast-path tag naming"""

    def test_string_is_used_as_is(self) -> None:
        assert tag_of("Parser") == "Parser"

    def test_instance_uses_class_name(self) -> None:
        assert tag_of(Widget()) == "Widget"

    def test_class_uses_its_name(self) -> None:
        assert tag_of(Widget) == "Widget"
