"""Logging setup for the filechecksum tools.

stdout carries the checksum report, so every handler installed here writes
to stderr or to the rotating log file.
"""

import logging
import logging.handlers
import json
import sys
import threading
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from .logging_config import LoggingConfig


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with any LogContext fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        log_data.update(getattr(record, "context", {}))

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


class DetailedFormatter(logging.Formatter):
    """Timestamped lines naming the thread, so worker records stand out."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class SimpleFormatter(logging.Formatter):
    """Short console lines: level and message."""

    def __init__(self) -> None:
        super().__init__(fmt="%(levelname)s: %(message)s")


_CONSOLE_FORMATTERS = {
    "simple": SimpleFormatter,
    "detailed": DetailedFormatter,
    "json": StructuredFormatter,
}


class LogContext:
    """Attach fields to every record emitted while the block is active.

    The fields are process-wide rather than per-thread: a context opened by
    the CLI also tags records from the checksum worker thread. Nested
    contexts extend the outer fields and restore them on exit.
    """

    _fields: Dict[str, Any] = {}
    _lock = threading.Lock()

    def __init__(self, **fields: Any) -> None:
        self.fields = fields
        self._saved: Optional[Dict[str, Any]] = None

    @classmethod
    def current(cls) -> Dict[str, Any]:
        return cls._fields

    def __enter__(self) -> "LogContext":
        with LogContext._lock:
            self._saved = LogContext._fields
            LogContext._fields = {**self._saved, **self.fields}
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        with LogContext._lock:
            LogContext._fields = self._saved


class ContextFilter(logging.Filter):
    """Copies the active LogContext fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.context = dict(LogContext.current())
        return True


def setup_logging(config: LoggingConfig, level: Optional[str] = None) -> None:
    """Replace the root logger's handlers according to ``config``.

    Args:
        config: The ``[logging]`` section
        level: Overrides ``config.level`` (from --log-level or --debug)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel((level or config.level).upper())
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(_CONSOLE_FORMATTERS[config.format]())
    console_handler.addFilter(ContextFilter())
    root_logger.addHandler(console_handler)

    if config.file is not None:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(StructuredFormatter())
        file_handler.addFilter(ContextFilter())
        root_logger.addHandler(file_handler)
