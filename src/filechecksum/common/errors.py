"""Base error definitions for filechecksum packages."""

from typing import Any, Dict


class ChecksumToolError(Exception):
    """Base exception for all filechecksum errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(ChecksumToolError):
    """Configuration could not be loaded or is invalid."""
    pass
