"""
Sink Configuration.
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SystemFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


class SystemStream(str, Enum):
    STDERR = "stderr"
    STDOUT = "stdout"


class DropPolicy(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


class SystemSinkSettings(BaseSettings):
    """System log sink (process text stream)."""

    model_config = SettingsConfigDict(
        env_prefix="CL_SYSTEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    format: SystemFormat = Field(default=SystemFormat.CONSOLE, description="Output format")
    stream: SystemStream = Field(default=SystemStream.STDERR, description="Target stream")
    strict_tags: bool = Field(default=False, description="Enforce the 23 character tag limit")
    timestamp_format: str = Field(default="%H:%M:%S", description="Console timestamp format")
    level_width: int = Field(default=1, description="Console level column width")
    tag_width: int = Field(default=24, description="Console tag column width")
    separator: str = Field(default=" | ", description="Console column separator")


class FileSinkSettings(BaseSettings):
    """Asynchronous rotating file sink."""

    model_config = SettingsConfigDict(
        env_prefix="CL_FILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    enabled: bool = Field(default=False, description="Open the default file sink on configure")
    directory: str = Field(default="logs", description="Directory holding the log file and its archive")
    name: str = Field(default="filelog.txt", description="Active log file name")
    size_limit: int = Field(default=10 * 1024, description="Rotation threshold in bytes")
    queue_capacity: int = Field(default=20, description="Pending line capacity of the write queue")
    drop_policy: DropPolicy = Field(default=DropPolicy.NEWEST, description="Line dropped when the queue is full")
    line_format: str = Field(
        default="{timestamp} {level} {tag} - {message}",
        description="Line pattern with timestamp, level, tag and message fields",
    )
    timestamp_format: str = Field(default="%Y-%m-%d %H:%M:%S.%f", description="strftime pattern, %f cut to millis")

    @field_validator("size_limit", "queue_capacity")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value
