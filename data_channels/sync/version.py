"""
Version stamps for record mutations.

Every successful create or update stamps the record with a numeric version
taken from a VersionGenerator. Stamps order mutations within one channel:

    stamp = wall_clock_ms * 1000 + (counter % 1000)

The low three digits let up to 1000 mutations share a millisecond. Past that
the counter wraps and the raw formula can go backwards, so the strict mode
(the default) clamps every stamp to at least ``last + 1``.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from threading import Lock

STAMPS_PER_MILLISECOND = 1000


class VersionGenerator:
    """Produces increasing version stamps for a single channel.

    Example:
        clock at 1700000000.000s, counter=0 -> 1700000000000000
        next call in the same ms, counter=1 -> 1700000000000001
    """

    def __init__(self, strict: bool = True, clock: Callable[[], float] | None = None) -> None:
        """Initialize the generator.

        Args:
            strict: Clamp stamps so they never repeat or decrease. With
                strict=False the raw wall-clock formula is returned as-is,
                which may repeat after 1000 stamps within one millisecond.
            clock: Time source in seconds (defaults to time.time)
        """
        self.strict = strict
        self._clock = clock or time.time
        self._counter = 0
        self._last = 0
        self._lock = Lock()

    def next(self) -> int:
        """Return the next version stamp."""
        with self._lock:
            millis = int(self._clock() * 1000)
            stamp = millis * STAMPS_PER_MILLISECOND + (self._counter % STAMPS_PER_MILLISECOND)
            self._counter += 1
            if self.strict and stamp <= self._last:
                stamp = self._last + 1
            self._last = stamp
            return stamp

    def observe(self, stamp: int) -> None:
        """Account for a stamp issued elsewhere (e.g. a seeded record).

        In strict mode later stamps are then guaranteed to exceed it.
        """
        with self._lock:
            self._last = max(self._last, stamp)

    @property
    def last(self) -> int:
        """Last stamp handed out (0 before the first call)."""
        return self._last
