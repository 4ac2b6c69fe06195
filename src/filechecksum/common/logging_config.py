"""The ``[logging]`` configuration section."""

from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field, ConfigDict, field_validator


class LoggingConfig(BaseModel):
    """Console verbosity and an optional rotating JSON log file.

    stdout is reserved for the checksum report, so the console handler
    writes to stderr and stays at WARNING unless asked otherwise.
    """

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Console and file log level"
    )
    format: Literal["simple", "detailed", "json"] = Field(
        default="simple",
        description="Console format; the log file is always JSON"
    )
    file: Path | None = Field(default=None, description="Rotating log file path")
    max_file_size_mb: int = Field(default=10, ge=1, description="Rotate the log file at this size")
    backup_count: int = Field(default=5, ge=0, description="Rotated log files to keep")

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator('file')
    @classmethod
    def expand_file(cls, v: Path | None) -> Path | None:
        """Allow ``~/logs/filechecksum.log`` in config files."""
        if v is None:
            return v
        return v.expanduser()
