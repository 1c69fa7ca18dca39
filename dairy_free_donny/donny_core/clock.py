"""
Clocks
======

Time sources for the simulation. The core never reads a clock on its own:
callers read one of these and pass ``now`` (seconds) into every timed call.
"""

from __future__ import annotations

import time


class SimClock:
    """
    Manually advanced clock.

    Used by tests, the Gymnasium environment and evaluation so that a whole
    game can run deterministically without real delays.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        """Current simulated time in seconds."""
        return self._now

    def advance(self, dt: float) -> float:
        """
        Move time forward.

        Args:
            dt: Seconds to advance. Must not be negative.

        Returns:
            The new current time.
        """
        if dt < 0:
            raise ValueError(f"Clock cannot run backwards (dt={dt})")
        self._now += dt
        return self._now

    def reset(self, start: float = 0.0) -> None:
        self._now = float(start)


class MonotonicClock:
    """Wall clock based on time.monotonic(), zeroed at construction."""

    def __init__(self):
        self._origin = time.monotonic()

    def now(self) -> float:
        return time.monotonic() - self._origin
