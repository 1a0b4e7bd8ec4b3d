"""
configure_logging and runtime knob tests.
"""

from __future__ import annotations

import logging

import pytest
import structlog

from cascadelog import core, levels, loggers
from cascadelog.bridge import RedirectStdLibHandler, release_stdlib
from cascadelog.config import Settings
from cascadelog.file_sink import DEFAULT_FILE_NAME, DEFAULT_SIZE_LIMIT
from cascadelog.formatters import DEFAULT_LINE_FORMAT
from cascadelog.levels import Severity
from cascadelog.logger import get_tag_prefix


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("CL_ENV", "CL_LOG_MIN_LEVEL", "CL_LOG_TAG_PREFIX", "CL_FILE_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConfigureLogging:
    def test_explicit_min_level(self, clean_env) -> None:
        clean_env.setenv("CL_LOG_MIN_LEVEL", "error")
        core.configure_logging(Settings())
        assert levels.get_min_level() is Severity.ERROR

    def test_environment_default_level(self, clean_env) -> None:
        clean_env.setenv("CL_ENV", "production")
        core.configure_logging(Settings())
        assert levels.get_min_level() is Severity.WARN

    def test_tag_prefix(self, clean_env) -> None:
        clean_env.setenv("CL_LOG_TAG_PREFIX", "app.")
        core.configure_logging(Settings())
        assert get_tag_prefix() == "app."

    def test_bridges_and_reporter(self, clean_env) -> None:
        clean_env.setenv("CL_LOG_BRIDGE_STDLIB", "true")
        clean_env.setenv("CL_LOG_BRIDGE_STRUCTLOG", "true")
        clean_env.setenv("CL_LOG_REPORT_UNCAUGHT", "true")
        root = logging.getLogger()
        previous_level = root.level
        try:
            core.configure_logging(Settings())
            assert any(isinstance(h, RedirectStdLibHandler) for h in root.handlers)
            assert core._reporter is not None and core._reporter.installed
        finally:
            for name in ("CL_LOG_BRIDGE_STDLIB", "CL_LOG_BRIDGE_STRUCTLOG", "CL_LOG_REPORT_UNCAUGHT"):
                clean_env.setenv(name, "false")
            core.configure_logging(Settings())
            release_stdlib()
            root.setLevel(previous_level)
            structlog.reset_defaults()
        assert not core._reporter.installed

    def test_file_sink_enabled(self, clean_env, tmp_path) -> None:
        clean_env.setenv("CL_FILE_ENABLED", "true")
        clean_env.setenv("CL_FILE_DIRECTORY", str(tmp_path))
        clean_env.setenv("CL_FILE_LINE_FORMAT", "{level} {tag} {message}")
        try:
            core.configure_logging(Settings())
            loggers.fi.tag_msg("Boot", "hello file")
            assert loggers.file_sink.flush(2.0)
            assert core.get_current_file() == tmp_path / "filelog.txt"
            assert (tmp_path / "filelog.txt").read_text() == "I cl.Boot hello file\n"
        finally:
            loggers.file_sink.shutdown()


class TestRuntimeKnobs:
    def test_set_global_threshold(self) -> None:
        assert core.set_global_threshold("assert") is Severity.ASSERT
        assert not loggers.e.is_loggable
        assert loggers.a.is_loggable

    def test_set_directory_changes_current_file(self, tmp_path) -> None:
        previous = loggers.file_sink.get_current_file().parent
        core.set_directory(tmp_path)
        try:
            assert core.get_current_file() == tmp_path / loggers.file_sink.get_current_file().name
        finally:
            core.set_directory(previous)


class TestFileSurface:
    """File knobs act on the default file sink"""

    @pytest.fixture
    def default_file(self, tmp_path):
        previous = loggers.file_sink.get_current_file().parent
        core.set_directory(tmp_path)
        core.set_line_format("{level} {message}")
        yield tmp_path / DEFAULT_FILE_NAME
        loggers.file_sink.shutdown()
        core.set_line_format(DEFAULT_LINE_FORMAT)
        core.set_directory(previous)

    def test_open_file(self, default_file) -> None:
        assert core.open_file(DEFAULT_FILE_NAME, DEFAULT_SIZE_LIMIT)
        assert core.get_current_file() == default_file
        loggers.fw.tag_msg("T", "first")
        assert loggers.file_sink.flush(2.0)
        assert default_file.read_text() == "W first\n"

    def test_clear(self, default_file) -> None:
        core.open_file(DEFAULT_FILE_NAME, DEFAULT_SIZE_LIMIT)
        loggers.fw.tag_msg("T", "first")
        assert core.clear()
        loggers.fe.tag_msg("T", "second")
        assert loggers.file_sink.flush(2.0)
        assert default_file.read_text() == "E second\n"

    def test_delete(self, default_file) -> None:
        core.open_file(DEFAULT_FILE_NAME, DEFAULT_SIZE_LIMIT)
        loggers.fi.tag_msg("T", "gone")
        assert core.delete()
        assert not default_file.exists()
        assert not loggers.file_sink.is_open

    def test_set_line_format_rejects_unknown_fields(self, default_file) -> None:
        with pytest.raises(ValueError, match="invalid line format"):
            core.set_line_format("{when}")
