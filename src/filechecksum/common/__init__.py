"""Common utilities for filechecksum packages."""

from .config import ConfigLoader
from .logging import setup_logging, LogContext
from .logging_config import LoggingConfig
from .errors import ChecksumToolError, ConfigurationError

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LogContext',
    'ChecksumToolError',
    'ConfigurationError',
]
