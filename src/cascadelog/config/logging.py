"""
Logger Configuration.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggerSettings(BaseSettings):
    """Global threshold, tag prefix and optional integrations."""

    model_config = SettingsConfigDict(
        env_prefix="CL_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    min_level: Optional[str] = Field(
        default=None,
        description="Global threshold (VERBOSE..ASSERT, DISABLED); environment default when unset",
    )
    tag_prefix: str = Field(default="cl.", description="Prefix prepended to every emitted tag")
    bridge_stdlib: bool = Field(default=False, description="Route stdlib logging records into the facade")
    bridge_structlog: bool = Field(default=False, description="Route structlog events into the facade")
    report_uncaught: bool = Field(default=False, description="Install the uncaught exception reporter")

    @field_validator("min_level")
    @classmethod
    def _known_severity(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        from ..levels import Severity

        return Severity.parse(value).name
