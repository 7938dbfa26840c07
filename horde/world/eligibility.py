"""Per-tick spawn point eligibility."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from pygame.math import Vector3

from horde.engine.logger import ChannelLogger
from horde.physics.queries import EnvironmentQueries
from horde.world.observer import Observer
from horde.world.spawn_points import SpawnPoint


def allowed_active_points(population_cap: int, live_total: int) -> int:
    """Number of spawn points allowed to be active given current headroom."""

    return (population_cap - live_total) // 2


def within_band(distance: float, min_distance: float, max_distance: float) -> bool:
    return min_distance < distance < max_distance


def should_activate(valid: bool, distance: float, seen: bool, allowed: int, min_distance: float, max_distance: float) -> bool:
    """Pure activation rule for a single spawn point."""

    if allowed <= 0 or not valid:
        return False
    return not seen and within_band(distance, min_distance, max_distance)


@dataclass
class EligibilityResult:
    allowed: int
    evaluated: int
    eligible: List[SpawnPoint]


class EligibilityFilter:
    """Rebuilds the set of usable spawn points from scratch every tick."""

    def __init__(
        self,
        queries: EnvironmentQueries,
        min_distance: float,
        max_distance: float,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.queries = queries
        self.min_distance = min_distance
        self.max_distance = max_distance
        self.logger = logger
        self.eligible: List[SpawnPoint] = []

    def is_seen(self, observer: Observer, position: Vector3, point: SpawnPoint | None = None) -> bool:
        """True when ``position`` is inside the view volume and unobstructed."""

        viewport = self.queries.viewport_project(observer, position)
        if not observer.in_view_volume(viewport):
            return False
        to_point = position - observer.position
        distance = to_point.length()
        if distance == 0:
            return True
        hit = self.queries.ray_cast(observer.position, to_point, distance)
        if hit is None:
            return True
        return point is not None and hit.entity is point

    def update(
        self,
        points: Iterable[SpawnPoint],
        observer: Observer,
        population_cap: int,
        live_total: int,
    ) -> EligibilityResult:
        self.eligible = []
        ordered = list(points)
        allowed = allowed_active_points(population_cap, live_total)
        if allowed <= 0:
            for point in ordered:
                point.set_active(False)
            return EligibilityResult(allowed=allowed, evaluated=0, eligible=[])

        ordered.sort(key=lambda point: observer.distance_to(point.position))
        evaluated = 0
        for point in ordered:
            if not point.valid:
                point.set_active(False)
                continue
            evaluated += 1
            distance = observer.distance_to(point.position)
            seen = False
            if within_band(distance, self.min_distance, self.max_distance):
                seen = self.is_seen(observer, point.position, point)
            active = should_activate(
                point.valid, distance, seen, allowed, self.min_distance, self.max_distance
            )
            if point.set_active(active) and self.logger and self.logger.enabled:
                self.logger.debug(
                    "Spawn point %s %s (distance=%.1f seen=%s)",
                    point.id,
                    "activated" if active else "deactivated",
                    distance,
                    seen,
                )
            if active:
                self.eligible.append(point)
        return EligibilityResult(allowed=allowed, evaluated=evaluated, eligible=list(self.eligible))


__all__ = [
    "EligibilityFilter",
    "EligibilityResult",
    "allowed_active_points",
    "should_activate",
    "within_band",
]
