"""
cascadelog: level-gated, tag-aware logging facade.

Provides cascaded loggers with lazy message building and pluggable sinks:
- system: stderr/stdout (console/json format)
- file: asynchronous, size-bounded file with gzip archive on rollover
- memory / null: inspection and discard

Usage:
    from cascadelog import d, e, fi

    d.tag("Parser").msg("parsed ", count, " items")
    e.fmt("bad header %r", header)
    fi.tag_msg(self, "written to the log file")
"""

from .channels import Channel, ChannelRegistry, Output, channels
from .core import (
    clear,
    configure_logging,
    delete,
    get_current_file,
    open_file,
    set_directory,
    set_global_threshold,
    set_line_format,
)
from .exceptions import CascadeLogError, LogFormatError, SinkClosedError, SinkDispatchError, SinkIOError
from .file_sink import RotatingFileSink, WriteQueue
from .levels import Severity
from .logger import Logger, set_notifier, set_tag_prefix
from .loggers import (
    FILE,
    SYSTEM,
    LoggerSet,
    a,
    d,
    e,
    fa,
    fd,
    fe,
    fi,
    file_sink,
    fv,
    fw,
    i,
    none,
    system_sink,
    v,
    w,
)
from .rendering import Fmt, Ident, Token
from .sinks import BaseSink, MemorySink, NullSink, SystemSink

__all__ = [
    # Configuration
    "configure_logging",
    "set_global_threshold",
    "set_directory",
    "open_file",
    "get_current_file",
    "clear",
    "delete",
    "set_line_format",
    "set_tag_prefix",
    "set_notifier",
    # Loggers
    "Logger",
    "LoggerSet",
    "Severity",
    "SYSTEM",
    "FILE",
    "v", "d", "i", "w", "e", "a",
    "fv", "fd", "fi", "fw", "fe", "fa",
    "none",
    # Tokens
    "Token",
    "Fmt",
    "Ident",
    # Sinks
    "BaseSink",
    "SystemSink",
    "MemorySink",
    "NullSink",
    "RotatingFileSink",
    "WriteQueue",
    "system_sink",
    "file_sink",
    # Channels
    "Channel",
    "ChannelRegistry",
    "Output",
    "channels",
    # Errors
    "CascadeLogError",
    "LogFormatError",
    "SinkDispatchError",
    "SinkIOError",
    "SinkClosedError",
]
