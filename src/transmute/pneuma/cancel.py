"""Caller-supplied cancellation and deadlines for node requests."""

from __future__ import annotations

import threading
import time
from typing import Optional

from ..errors import Cancelled


class CancelToken:
    """
    Cancellation flag with an optional wall-clock budget.

    Either ``cancel()`` it from another thread or give it a ``timeout`` in
    seconds; once either fires, every node request that receives the token
    raises ``Cancelled``.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._event = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self, operation: str) -> None:
        if self.cancelled:
            raise Cancelled("Request cancelled", operation=operation)

    def sleep(self, seconds: float) -> None:
        """Sleep up to ``seconds``, waking early if cancelled."""
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(seconds)
