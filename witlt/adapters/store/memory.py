"""
In-memory registration store - Implements RegistrationStore protocol.

Single-process replacement for Redis, used for local development with
``STORE_BACKEND=memory`` and in tests. Expiry is lazy: a key whose
deadline has passed is dropped the next time it is touched.
"""

import math
import threading
import time
from collections.abc import Callable


class InMemoryRegistrationStore:
    """
    Implements RegistrationStore protocol with a dict and per-key deadlines.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The clock is injectable so TTL behaviour can be tested without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[str, float | None]] = {}

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl_seconds)

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._live_entry(key)
            return None if entry is None else entry[0]

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def ttl(self, key: str) -> int | None:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None or entry[1] is None:
                return None
            return math.ceil(entry[1] - self._clock())

    def increment(self, key: str) -> int:
        """Increment a counter, keeping its current deadline (Redis INCR semantics)."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                value, deadline = 1, None
            else:
                value, deadline = int(entry[0]) + 1, entry[1]
            self._entries[key] = (str(value), deadline)
            return value

    def expire(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            entry = self._live_entry(key)
            if entry is not None:
                self._entries[key] = (entry[0], self._clock() + ttl_seconds)

    def ping(self) -> bool:
        return True

    def _live_entry(self, key: str) -> tuple[str, float | None] | None:
        """Return the entry for key, evicting it first if it has expired. Caller holds the lock."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        deadline = entry[1]
        if deadline is not None and deadline <= self._clock():
            del self._entries[key]
            return None
        return entry
