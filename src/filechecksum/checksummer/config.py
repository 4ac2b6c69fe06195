"""Configuration models for the checksum tools."""

from pydantic import BaseModel, Field, ConfigDict
from filechecksum.common import LoggingConfig

from .algorithms import AlgorithmId
from .engine import DEFAULT_CHUNK_SIZE

MIN_CHUNK_SIZE = 0x100       # 256 bytes
MAX_CHUNK_SIZE = 0x4000000   # 64 MiB


class ChecksumConfig(BaseModel):
    """Checksum run configuration."""

    model_config = ConfigDict(extra='forbid')

    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE,
        ge=MIN_CHUNK_SIZE,
        le=MAX_CHUNK_SIZE,
        description="Input buffer size in bytes for each read"
    )
    md5: bool = Field(default=True, description="Compute MD5")
    sha1: bool = Field(default=True, description="Compute SHA1")
    sha256: bool = Field(default=False, description="Compute SHA256 (slow)")
    sha512: bool = Field(default=False, description="Compute SHA512 (slower)")
    progress_log_interval: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Log progress every N percent when progress logging is on"
    )

    def enabled_algorithms(self) -> set[AlgorithmId]:
        """Algorithms switched on by this config (CRC32 always included)."""
        enabled = {AlgorithmId.CRC32}
        for algorithm in (AlgorithmId.MD5, AlgorithmId.SHA1, AlgorithmId.SHA256, AlgorithmId.SHA512):
            if getattr(self, algorithm.value):
                enabled.add(algorithm)
        return enabled


class FileChecksumConfig(BaseModel):
    """Root configuration for filechecksum."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    checksum: ChecksumConfig = Field(default_factory=ChecksumConfig)
