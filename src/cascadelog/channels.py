"""
Named logging channels.

A channel groups related logging (fragments, network, parsing, ...) under a
name and an output target. Logging happens only when the channel is enabled
and the line passes the global threshold; a disabled channel hands out the
DISABLED logger, which never emits.

Usage:
    from cascadelog.channels import channels

    channels["network"].d().tag("Http").cat(" ", method, url)
    channels.enable("network")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from . import loggers
from .levels import Severity
from .logger import Logger


class Output(str, Enum):
    SYSTEM = "system"
    FILE = "file"
    NONE = "none"


@dataclass
class Channel:
    """Named grouping resolving to one logger per severity."""

    name: str
    output: Output = Output.SYSTEM
    enabled: bool = True

    def at(self, severity: Severity | str | int) -> Logger:
        if not self.enabled or self.output is Output.NONE:
            return loggers.none
        severity = Severity.parse(severity)
        if severity is Severity.DISABLED:
            return loggers.none
        target = loggers.FILE if self.output is Output.FILE else loggers.SYSTEM
        return target.at(severity)

    def v(self) -> Logger:
        return self.at(Severity.VERBOSE)

    def d(self) -> Logger:
        return self.at(Severity.DEBUG)

    def i(self) -> Logger:
        return self.at(Severity.INFO)

    def w(self) -> Logger:
        return self.at(Severity.WARN)

    def e(self) -> Logger:
        return self.at(Severity.ERROR)

    def a(self) -> Logger:
        return self.at(Severity.ASSERT)


DEFAULT_CHANNELS = (
    Channel("default", Output.SYSTEM),
    Channel("file", Output.FILE),
    Channel("frag", Output.SYSTEM),
    Channel("network", Output.NONE),
    Channel("parsing", Output.NONE),
)


class ChannelRegistry:
    """Name -> Channel mapping."""

    def __init__(self, channels: tuple[Channel, ...] | list[Channel] = ()):
        self._channels: dict[str, Channel] = {}
        for channel in channels:
            self.register(channel.name, channel.output, enabled=channel.enabled)

    @classmethod
    def with_defaults(cls) -> ChannelRegistry:
        return cls(DEFAULT_CHANNELS)

    def register(self, name: str, output: Output | str = Output.SYSTEM, *, enabled: bool = True) -> Channel:
        channel = Channel(name, Output(output), enabled)
        self._channels[name] = channel
        return channel

    def get(self, name: str) -> Channel:
        try:
            return self._channels[name]
        except KeyError:
            raise KeyError(f"unknown logging channel {name!r}") from None

    def enable(self, name: str, output: Output | str | None = None) -> Channel:
        """Enable a channel; a channel registered with Output.NONE needs an output."""
        channel = self.get(name)
        if output is not None:
            channel.output = Output(output)
        elif channel.output is Output.NONE:
            channel.output = Output.SYSTEM
        channel.enabled = True
        return channel

    def disable(self, name: str) -> Channel:
        channel = self.get(name)
        channel.enabled = False
        return channel

    def __getitem__(self, name: str) -> Channel:
        return self.get(name)

    def __getattr__(self, name: str) -> Channel:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._channels[name]
        except KeyError:
            raise AttributeError(f"unknown logging channel {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._channels

    def __iter__(self) -> Iterator[Channel]:
        return iter(list(self._channels.values()))

    def __len__(self) -> int:
        return len(self._channels)


channels = ChannelRegistry.with_defaults()
