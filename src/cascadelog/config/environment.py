"""
Environment Configuration.

The environment is determined by the `CL_ENV` environment variable and decides
the initial global threshold: production builds start at WARN, every other
environment starts at VERBOSE.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """Environment detection."""

    model_config = SettingsConfigDict(
        env_prefix="CL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Environment = Field(
        default="development",
        description="Current environment (development, testing, staging, production)",
    )

    @property
    def is_production(self) -> bool:
        return self.env == "production"
