"""Cooperative cancellation signal shared between threads."""

import threading
from typing import Optional


class CancelToken:
    """One-shot cancellation flag.

    Backed by threading.Event, so a cancel() on one thread is visible to
    the engine thread at its next chunk boundary.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or the timeout expires."""
        return self._event.wait(timeout)
