"""
Configuration surface of the logging facade.

`configure_logging()` applies a `Settings` object in one go; the remaining
functions change a single knob at runtime and act on the default file sink.
"""

from __future__ import annotations

import atexit
from pathlib import Path
from typing import Optional

from . import levels
from .config import Settings
from .config import settings as default_settings
from .levels import Severity
from .logger import set_tag_prefix
from .loggers import FILE, SYSTEM, file_sink, system_sink
from .uncaught import UncaughtExceptionReporter

_reporter: Optional[UncaughtExceptionReporter] = None
_atexit_registered = False


def configure_logging(settings: Settings | None = None) -> None:
    """
    Configure the logging facade.

    Args:
        settings: Composite settings; the process-wide `cascadelog.config.settings`
            when omitted

    Steps:
        1. Global threshold (explicit min_level or the environment default)
        2. Tag prefix and system sink rendering
        3. Default file sink, when enabled, closed again at exit
        4. Optional stdlib / structlog bridges and uncaught reporter
    """
    global _reporter, _atexit_registered
    settings = settings or default_settings

    # 1. Threshold
    if settings.logger.min_level:
        threshold = levels.set_min_level(settings.logger.min_level)
    else:
        threshold = levels.set_min_level(levels.default_min_level(settings.environment))

    # 2. Tags and system sink
    set_tag_prefix(settings.logger.tag_prefix)
    system_sink.open(settings.system)

    # 3. File sink
    if settings.file.enabled:
        file_sink.open(settings.file)
        if not _atexit_registered:
            atexit.register(file_sink.shutdown)
            _atexit_registered = True

    # 4. Integrations
    target = FILE if settings.file.enabled else SYSTEM
    if settings.logger.bridge_stdlib or settings.logger.bridge_structlog:
        from .bridge import configure_structlog, intercept_stdlib

        if settings.logger.bridge_stdlib:
            intercept_stdlib(target, threshold.to_stdlib())
        if settings.logger.bridge_structlog:
            configure_structlog(threshold, target)

    if settings.logger.report_uncaught:
        if _reporter is None:
            _reporter = UncaughtExceptionReporter()
        _reporter.install()
    elif _reporter is not None:
        _reporter.uninstall()


# =============================================================================
# Runtime Knobs
# =============================================================================


def set_global_threshold(level: str | int | Severity) -> Severity:
    """Minimum severity emitted by every logger, effective immediately."""
    return levels.set_min_level(level)


def set_directory(path: str | Path) -> None:
    file_sink.set_directory(path)


def open_file(name: str | None = None, size_limit: int | None = None) -> bool:
    """(Re)open the default file sink on `<directory>/<name>`."""
    return file_sink.open_file(name, size_limit)


def get_current_file() -> Path:
    return file_sink.get_current_file()


def clear() -> bool:
    return file_sink.clear()


def delete() -> bool:
    return file_sink.delete()


def set_line_format(pattern: str, timestamp_format: str | None = None) -> None:
    file_sink.set_line_format(pattern, timestamp_format)
