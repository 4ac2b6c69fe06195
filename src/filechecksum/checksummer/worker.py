"""Background worker for checksum runs.

The worker keeps the caller's thread free while a large file is read:
1. start() spawns a daemon thread that calls ChecksumEngine.run_file()
2. cancel() sets the shared CancelToken; the engine stops at the next chunk
3. wait() blocks until the result is published, re-raising a crash as
   WorkerFailedError

The result is published only after run_file() returns, so every progress
update of the run happens before the result becomes visible.
"""

import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

from .algorithms import AlgorithmId
from .cancellation import CancelToken
from .engine import ChecksumEngine
from .errors import RunInProgressError, WorkerFailedError
from .progress import ProgressReporter
from .result import ChecksumResult

logger = logging.getLogger(__name__)


class ChecksumWorker:
    """Runs one checksum at a time on a background thread."""

    def __init__(self, engine: ChecksumEngine, progress: Optional[ProgressReporter] = None) -> None:
        self.engine = engine
        self.progress = progress if progress is not None else ProgressReporter()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._cancel_token: Optional[CancelToken] = None
        self._timer: Optional[threading.Timer] = None
        self._done = threading.Event()
        self._result: Optional[ChecksumResult] = None
        self._error: Optional[BaseException] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._done.is_set()

    @property
    def result(self) -> Optional[ChecksumResult]:
        """Result of the last run, or None while running / before the first run."""
        if not self._done.is_set():
            return None
        return self._result

    def start(self, path: Path, enabled: Iterable[AlgorithmId]) -> CancelToken:
        """Start checksumming a file in the background.

        Args:
            path: File to read
            enabled: Algorithms to compute (CRC32 is always added)

        Returns:
            The run's cancellation token

        Raises:
            RunInProgressError: If a previous run has not finished
        """
        with self._lock:
            if self.is_running:
                raise RunInProgressError(
                    "A checksum run is already in progress", path=str(path)
                )
            self._stop_timer()
            enabled = frozenset(enabled)
            self._cancel_token = CancelToken()
            self._result = None
            self._error = None
            self._done.clear()
            self._thread = threading.Thread(
                target=self._run,
                args=(Path(path), enabled, self._cancel_token),
                name="checksum-worker",
                daemon=True,
            )
            self._thread.start()
            logger.debug(f"Worker thread started for {path}")
            return self._cancel_token

    def cancel(self) -> None:
        """Request cancellation of the active run, if any."""
        token = self._cancel_token
        if token is not None and self.is_running:
            logger.info("Cancellation requested")
            token.cancel()

    def cancel_after(self, seconds: float) -> None:
        """Cancel the active run if it is still going after a deadline.

        The timer is bound to the current run's token, so a late timer
        never cancels a later run.
        """
        with self._lock:
            if not self.is_running:
                return
            self._stop_timer()
            self._timer = threading.Timer(seconds, self._cancel_token.cancel)
            self._timer.daemon = True
            self._timer.start()

    def wait(self, timeout: Optional[float] = None) -> Optional[ChecksumResult]:
        """Wait for the active run to finish.

        Returns:
            The result, or None if the timeout expired first

        Raises:
            WorkerFailedError: If the run raised instead of producing a result
        """
        if self._thread is None:
            return None
        if not self._done.wait(timeout):
            return None
        if self._error is not None:
            raise WorkerFailedError(
                f"Checksum run failed: {self._error}",
                error_type=type(self._error).__name__,
            ) from self._error
        return self._result

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _run(self, path: Path, enabled: frozenset, cancel_token: CancelToken) -> None:
        try:
            self._result = self.engine.run_file(
                path, enabled, cancel_token=cancel_token, progress=self.progress
            )
        except Exception as e:
            logger.exception(f"Worker thread crashed while reading {path}")
            self._error = e
        finally:
            with self._lock:
                self._stop_timer()
            self._done.set()
