"""Simulation tick counter shared by the spawn phases."""
from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock


@dataclass
class TickClock:
    """Tracks the current tick index and simulation time in a threadsafe way.

    Only the owning director advances the clock; other threads may read a
    value that is at most one tick stale.
    """

    _tick: int = 0
    _time: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False)

    def advance(self, dt: float) -> int:
        """Advance by one tick of ``dt`` seconds and return the new index."""

        with self._lock:
            self._tick += 1
            self._time += max(0.0, dt)
            return self._tick

    @property
    def tick(self) -> int:
        with self._lock:
            return self._tick

    @property
    def time(self) -> float:
        """Simulation seconds elapsed since the session started."""

        with self._lock:
            return self._time


__all__ = ["TickClock"]
