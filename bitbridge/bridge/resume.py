"""Latch that lets the interaction thread park until replies are in."""

from __future__ import annotations

import threading


class ResumeSignal:
    """Level-triggered wake-up for the interaction driver.

    ``wake`` sets a flag, so a wake that arrives before ``wait`` is not lost and
    repeated wakes collapse into one. The waiter calls ``arm`` before emitting
    an action, which discards any stale wake from the previous round. Once
    closed the latch stays set.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._closed = False
        self.wakes = 0

    def arm(self) -> None:
        with self._lock:
            if not self._closed:
                self._event.clear()

    def wake(self) -> None:
        with self._lock:
            self.wakes += 1
            self._event.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until woken; returns False only on timeout."""
        return self._event.wait(timeout)

    def close(self) -> None:
        """Release the waiter for good; used when the session ends."""
        with self._lock:
            self._closed = True
            self._event.set()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_set(self) -> bool:
        return self._event.is_set()
