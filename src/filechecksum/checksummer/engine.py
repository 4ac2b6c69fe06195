"""Single-pass, multi-algorithm checksum engine.

One run reads a byte source sequentially in fixed-size chunks and feeds
every enabled accumulator with each chunk:

1. Build a RunContext (enabled set, cancel token, progress sink, DigestSet)
2. Read a chunk, update all digests, publish the new byte count
3. Check the cancel token between chunks
4. Finalize on end-of-stream; skip finalization on cancel or read failure

The source is closed on every exit path. Read errors and unavailable
algorithms end up in the ChecksumResult instead of propagating.
"""

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Optional

from .algorithms import AlgorithmId, create_accumulator
from .cancellation import CancelToken
from .digest_set import AccumulatorFactory, DigestSet
from .errors import UnreadableSourceError, classify_error
from .progress import ProgressReporter
from .result import ChecksumResult, RunStatus

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 0x10000  # 64 KiB


@dataclass
class RunContext:
    """Everything one run owns, passed explicitly through the engine."""
    digests: DigestSet
    cancel_token: CancelToken
    progress: ProgressReporter
    chunk_size: int
    source_name: Optional[str] = None
    bytes_done: int = 0
    started_at: float = field(default_factory=time.monotonic)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class ChecksumEngine:
    """Computes CRC32 plus any enabled digests in one pass over a source.

    A single engine runs one source at a time; callers that need a
    background run use ChecksumWorker.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        accumulator_factory: AccumulatorFactory = create_accumulator,
    ) -> None:
        """Initialize engine.

        Args:
            chunk_size: Bytes per read. Range checks are left to callers.
            accumulator_factory: Builds one accumulator per algorithm
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.accumulator_factory = accumulator_factory

    def run(
        self,
        source: BinaryIO,
        total_size: int,
        enabled: Iterable[AlgorithmId],
        cancel_token: Optional[CancelToken] = None,
        progress: Optional[ProgressReporter] = None,
        source_name: Optional[str] = None,
    ) -> ChecksumResult:
        """Checksum a readable byte source.

        Args:
            source: Object with read(n); closed before returning
            total_size: Expected byte count, used only for progress
            enabled: Algorithms to compute (CRC32 is always added)
            cancel_token: Checked between chunks
            progress: Receives bytes_done after every chunk
            source_name: Label used in logs and on the result

        Returns:
            ChecksumResult with status COMPLETED, CANCELLED or FAILED
        """
        try:
            context = self._start_run(total_size, enabled, cancel_token, progress, source_name)
            return self._read_all(source, context)
        finally:
            self._close(source, source_name)

    def run_file(
        self,
        path: Path,
        enabled: Iterable[AlgorithmId],
        cancel_token: Optional[CancelToken] = None,
        progress: Optional[ProgressReporter] = None,
    ) -> ChecksumResult:
        """Checksum a file on disk.

        Failure to stat or open the file produces a FAILED result.
        """
        path = Path(path)
        try:
            total_size = os.stat(path).st_size
            source = open(path, "rb")
        except OSError as e:
            enabled = frozenset(enabled)
            context = self._start_run(0, enabled, cancel_token, progress, str(path))
            return self._failed(context, e, f"Can't open file: {path}")

        return self.run(
            source,
            total_size,
            enabled,
            cancel_token=cancel_token,
            progress=progress,
            source_name=str(path),
        )

    def _start_run(
        self,
        total_size: int,
        enabled: Iterable[AlgorithmId],
        cancel_token: Optional[CancelToken],
        progress: Optional[ProgressReporter],
        source_name: Optional[str],
    ) -> RunContext:
        progress = progress if progress is not None else ProgressReporter()
        progress.reset(total_size)
        return RunContext(
            digests=DigestSet(enabled, factory=self.accumulator_factory),
            cancel_token=cancel_token if cancel_token is not None else CancelToken(),
            progress=progress,
            chunk_size=self.chunk_size,
            source_name=source_name,
        )

    def _read_all(self, source: BinaryIO, context: RunContext) -> ChecksumResult:
        logger.info(
            f"Computing {', '.join(a.label for a in context.digests.active)} "
            f"for {context.source_name or 'stream'}"
        )

        while True:
            if context.cancel_token.is_cancelled:
                logger.info(
                    f"Checksum calculation cancelled after {context.bytes_done:,} bytes"
                )
                return self._abandoned(context, RunStatus.CANCELLED)

            try:
                chunk = source.read(context.chunk_size)
            except OSError as e:
                return self._failed(context, e, f"Can't read from file: {e}")

            if not chunk:
                break

            context.digests.update(chunk)
            context.bytes_done += len(chunk)
            context.progress.publish(context.bytes_done)

        digests = context.digests.finalize_all()

        logger.debug(
            f"{context.source_name or 'stream'} - buffer size {context.chunk_size:,} "
            f"read {context.bytes_done:,} bytes in {context.elapsed * 1000:,.0f} milliseconds"
        )
        context.progress.log_final_summary()

        return ChecksumResult.completed(
            digests,
            context.digests.unavailable,
            bytes_processed=context.bytes_done,
            bytes_total=context.progress.bytes_total,
            elapsed_seconds=context.elapsed,
            source_name=context.source_name,
        )

    def _abandoned(
        self,
        context: RunContext,
        status: RunStatus,
        error: Optional[UnreadableSourceError] = None,
    ) -> ChecksumResult:
        return ChecksumResult.abandoned(
            status,
            context.digests.requested,
            context.digests.unavailable,
            bytes_processed=context.bytes_done,
            bytes_total=context.progress.bytes_total,
            elapsed_seconds=context.elapsed,
            error=error,
            source_name=context.source_name,
        )

    def _failed(self, context: RunContext, cause: OSError, message: str) -> ChecksumResult:
        category = classify_error(cause)
        error = UnreadableSourceError(
            message,
            source=context.source_name,
            category=category,
            bytes_processed=context.bytes_done,
        )
        error.__cause__ = cause
        logger.error(f"{message} (category={category})")
        return self._abandoned(context, RunStatus.FAILED, error)

    def _close(self, source: BinaryIO, source_name: Optional[str]) -> None:
        try:
            source.close()
        except OSError as e:
            logger.warning(f"Failed to close {source_name or 'stream'}: {e}")
