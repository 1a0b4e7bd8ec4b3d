"""
cascadelog Configuration Module.

Each sub-module represents an independent concern with its own environment
variable prefix:

    CL_ENV            environment (development, testing, staging, production)
    CL_LOG_*          global threshold, tag prefix, integrations
    CL_SYSTEM_*       system sink rendering
    CL_FILE_*         rotating file sink

Usage:
    from cascadelog.config import settings

    settings.environment.is_production
    settings.file.size_limit
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import EnvironmentSettings
from .logging import LoggerSettings
from .sinks import DropPolicy, FileSinkSettings, SystemFormat, SystemSinkSettings, SystemStream


class Settings(BaseSettings):
    """Composite settings aggregating all configuration domains."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def logger(self) -> LoggerSettings:
        return LoggerSettings()

    @cached_property
    def system(self) -> SystemSinkSettings:
        return SystemSinkSettings()

    @cached_property
    def file(self) -> FileSinkSettings:
        return FileSinkSettings()


# Singleton instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "EnvironmentSettings",
    "LoggerSettings",
    "SystemSinkSettings",
    "FileSinkSettings",
    "SystemFormat",
    "SystemStream",
    "DropPolicy",
]
