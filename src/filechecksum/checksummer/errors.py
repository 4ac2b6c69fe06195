"""Error classes for the checksum engine."""

from filechecksum.common import ChecksumToolError


class ChecksumError(ChecksumToolError):
    """Base error for checksum engine operations."""
    pass


class UnreadableSourceError(ChecksumError):
    """Byte source could not be opened or a read failed mid-stream."""

    @property
    def category(self) -> str:
        return self.context.get("category", "unknown")


class AlgorithmUnavailableError(ChecksumError):
    """Requested digest algorithm is not provided by the runtime."""
    pass


class UserCancelledError(ChecksumError):
    """Run was cancelled before it completed."""
    pass


class AccumulatorStateError(ChecksumError, RuntimeError):
    """Accumulator used after it was finalized."""
    pass


class RunInProgressError(ChecksumError, RuntimeError):
    """A run is already active on this worker."""
    pass


class WorkerFailedError(ChecksumError, RuntimeError):
    """Background run ended with an unexpected exception instead of a result."""
    pass


class InvalidBufferSizeError(ChecksumError, ValueError):
    """Buffer size is malformed or outside the accepted range."""
    pass


def classify_error(exception: Exception) -> str:
    """
    Classify a read failure into an error category.

    Args:
        exception: The exception to classify

    Returns:
        Error category string: 'permission', 'not_found', 'is_directory',
        'io', or 'unknown'
    """
    if isinstance(exception, UnreadableSourceError):
        return exception.category
    elif isinstance(exception, PermissionError):
        return 'permission'
    elif isinstance(exception, FileNotFoundError):
        return 'not_found'
    elif isinstance(exception, IsADirectoryError):
        return 'is_directory'
    elif isinstance(exception, OSError):
        return 'io'
    else:
        return 'unknown'
