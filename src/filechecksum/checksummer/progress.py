"""Progress tracking for checksum runs.

The engine pushes byte counts into a ProgressReporter after every chunk.
Callers either poll ``snapshot()`` from another thread or subscribe a
callback that is invoked on the engine's thread, in publish order.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressState:
    """Point-in-time view of a run's progress."""
    bytes_done: int
    bytes_total: int

    @property
    def fraction(self) -> float:
        """Completed fraction in [0, 1]; 0 when the total is unknown."""
        if self.bytes_total <= 0:
            return 0.0
        return min(1.0, self.bytes_done / self.bytes_total)

    @property
    def percentage(self) -> float:
        return self.fraction * 100


ProgressCallback = Callable[[ProgressState], None]


class ProgressReporter:
    """Tracks bytes read, processing rate and ETA.

    Features:
    - Monotonic byte counter per run
    - Processing rate (bytes/sec)
    - Estimated time remaining
    - Periodic logging (every N percent)
    """

    def __init__(self, bytes_total: int = 0, log_interval_percent: Optional[int] = None):
        """Initialize progress reporter.

        Args:
            bytes_total: Expected number of bytes for the run
            log_interval_percent: Log progress every N percent; None disables
        """
        if log_interval_percent is not None and log_interval_percent <= 0:
            raise ValueError(f"log_interval_percent must be positive, got {log_interval_percent}")
        self.log_interval_percent = log_interval_percent
        self._lock = threading.Lock()
        self._callbacks: List[ProgressCallback] = []
        self.reset(bytes_total)

    def reset(self, bytes_total: int) -> None:
        """Start tracking a new run."""
        if bytes_total < 0:
            raise ValueError(f"bytes_total must be >= 0, got {bytes_total}")
        with self._lock:
            self._state = ProgressState(bytes_done=0, bytes_total=bytes_total)
            self.start_time = time.monotonic()
            self._next_log_percent = self.log_interval_percent

    def subscribe(self, callback: ProgressCallback) -> None:
        """Register a callback invoked after every publish."""
        with self._lock:
            self._callbacks.append(callback)

    @property
    def bytes_done(self) -> int:
        return self._state.bytes_done

    @property
    def bytes_total(self) -> int:
        return self._state.bytes_total

    def publish(self, bytes_done: int) -> None:
        """Record the running byte count.

        Args:
            bytes_done: Total number of bytes processed so far

        Raises:
            ValueError: If the count would go backwards
        """
        with self._lock:
            if bytes_done < self._state.bytes_done:
                raise ValueError(
                    f"Progress cannot decrease ({self._state.bytes_done} -> {bytes_done})"
                )
            state = ProgressState(bytes_done=bytes_done, bytes_total=self._state.bytes_total)
            self._state = state
            callbacks = list(self._callbacks)

        self._maybe_log(state)
        for callback in callbacks:
            callback(state)

    def snapshot(self) -> ProgressState:
        """Current progress, safe to call from any thread."""
        with self._lock:
            return self._state

    def get_progress(self) -> dict:
        """Get current progress statistics.

        Returns:
            Dict with progress metrics
        """
        state = self.snapshot()
        elapsed_time = time.monotonic() - self.start_time

        if elapsed_time > 0:
            rate = state.bytes_done / elapsed_time
        else:
            rate = 0.0

        remaining_bytes = max(0, state.bytes_total - state.bytes_done)
        if rate > 0 and remaining_bytes > 0:
            eta_seconds = remaining_bytes / rate
        else:
            eta_seconds = 0.0

        return {
            "bytes_total": state.bytes_total,
            "bytes_done": state.bytes_done,
            "remaining_bytes": remaining_bytes,
            "percentage": state.percentage,
            "elapsed_seconds": elapsed_time,
            "rate_bytes_per_sec": rate,
            "eta_seconds": eta_seconds,
        }

    def _maybe_log(self, state: ProgressState) -> None:
        if self._next_log_percent is None or state.bytes_total <= 0:
            return
        if state.percentage < self._next_log_percent:
            return

        progress = self.get_progress()
        logger.info(
            f"Progress: {state.bytes_done:,}/{state.bytes_total:,} bytes "
            f"({progress['percentage']:.1f}%) - "
            f"{format_rate(progress['rate_bytes_per_sec'])} - "
            f"ETA: {format_time(progress['eta_seconds'])}"
        )
        while self._next_log_percent <= state.percentage:
            self._next_log_percent += self.log_interval_percent

    def log_final_summary(self) -> None:
        """Log final progress summary."""
        progress = self.get_progress()
        logger.info(
            f"Read complete: {progress['bytes_done']:,} bytes "
            f"in {format_time(progress['elapsed_seconds'])} "
            f"({format_rate(progress['rate_bytes_per_sec'])} average)"
        )


def format_time(seconds: float) -> str:
    """Format seconds as human-readable time.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted string (e.g., "2h 15m 30s")
    """
    if seconds <= 0:
        return "0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)


def format_rate(bytes_per_sec: float) -> str:
    """Format a throughput figure (e.g., "12.5 MiB/s")."""
    for unit in ("B", "KiB", "MiB"):
        if bytes_per_sec < 1024:
            return f"{bytes_per_sec:.1f} {unit}/s"
        bytes_per_sec /= 1024
    return f"{bytes_per_sec:.1f} GiB/s"
