"""
Process-wide request counter.

Worker threads dispatch requests concurrently, so the increment is done
under a lock: ``count += 1`` is a read-modify-write and two threads doing it
at once would lose an update.
"""

import threading
import time
from typing import Callable


class RequestCounter:
    """
    Monotonic request count plus the time counting started.

        counter = RequestCounter()
        counter.increment()   # → 1
        counter.count         # → 1
        counter.uptime        # → seconds since creation
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self.start_time = clock()

    @property
    def count(self) -> int:
        return self._count

    @property
    def uptime(self) -> float:
        """Seconds elapsed since the counter was created."""
        return self._clock() - self.start_time

    def increment(self) -> int:
        """Add one and return the new count."""
        with self._lock:
            self._count += 1
            return self._count
