"""Lightweight runtime telemetry for the spawn pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from horde.engine.logger import ChannelLogger


@dataclass
class PlacementSnapshot:
    spawn_points: int
    spawn_points_valid: int
    waypoints: int
    waypoints_valid: int

    @property
    def spawn_points_rejected(self) -> int:
        return self.spawn_points - self.spawn_points_valid

    @property
    def waypoints_rejected(self) -> int:
        return self.waypoints - self.waypoints_valid


@dataclass
class SpawnTelemetrySnapshot:
    tick: int
    evaluated: int
    eligible: int
    allowed: int
    spawned_total: int
    spawned_by_archetype: Dict[str, int]


@dataclass
class SpawnTelemetry:
    """Aggregates eligibility and spawn statistics per tick."""

    tick: int = -1
    evaluated: int = 0
    eligible: int = 0
    allowed: int = 0
    spawned_total: int = 0
    spawned_by_archetype: Dict[str, int] = field(default_factory=dict)
    _log_accumulator: float = 0.0

    def begin_tick(self, tick: int) -> None:
        if tick != self.tick:
            self.tick = tick
            self.evaluated = 0
            self.eligible = 0
            self.allowed = 0

    def record_eligibility(self, allowed: int, evaluated: int, eligible: int) -> None:
        self.allowed = allowed
        self.evaluated = evaluated
        self.eligible = eligible

    def record_spawn(self, tag: str) -> None:
        self.spawned_total += 1
        self.spawned_by_archetype[tag] = self.spawned_by_archetype.get(tag, 0) + 1

    def advance_time(self, dt: float, logger: ChannelLogger | None = None) -> None:
        self._log_accumulator += dt
        if self._log_accumulator >= 3.0:
            self._log_accumulator = 0.0
            if logger and logger.enabled:
                logger.info(
                    "Spawner: tick=%d allowed=%d eligible=%d/%d spawned=%d",
                    self.tick,
                    self.allowed,
                    self.eligible,
                    self.evaluated,
                    self.spawned_total,
                )

    def snapshot(self) -> SpawnTelemetrySnapshot:
        return SpawnTelemetrySnapshot(
            tick=self.tick,
            evaluated=self.evaluated,
            eligible=self.eligible,
            allowed=self.allowed,
            spawned_total=self.spawned_total,
            spawned_by_archetype=dict(self.spawned_by_archetype),
        )


__all__ = [
    "PlacementSnapshot",
    "SpawnTelemetry",
    "SpawnTelemetrySnapshot",
]
