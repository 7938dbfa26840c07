"""Patrol waypoints and their floor-clearance correction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from pygame.math import Vector3

from horde.engine.logger import ChannelLogger
from horde.engine.settings import SpawnSettings
from horde.math.pose import WORLD_UP, Pose
from horde.physics.queries import EnvironmentQueries


@dataclass
class Waypoint:
    """Designated location used to build patrol routes."""

    id: str
    pose: Pose
    valid: bool = True

    @property
    def position(self) -> Vector3:
        return self.pose.position


class WaypointCorrector:
    """Lifts waypoints to a fraction of the local floor-to-ceiling clearance."""

    def __init__(
        self,
        queries: EnvironmentQueries,
        settings: SpawnSettings,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.queries = queries
        self.settings = settings
        self.logger = logger

    def corrected_position(self, position: Vector3) -> Optional[Vector3]:
        reach = self.settings.waypoint_ray_distance
        ceiling = self.queries.ray_cast(position, WORLD_UP, reach)
        floor = self.queries.ray_cast(position, -WORLD_UP, reach)
        if ceiling is None or floor is None:
            return None
        clearance = floor.point.distance_to(ceiling.point)
        height = floor.point.y + clearance / self.settings.ground_offset_divisor
        return Vector3(position.x, height, position.z)

    def correct(self, waypoint: Waypoint) -> bool:
        position = self.corrected_position(waypoint.pose.position)
        if position is None:
            # Keep the raw pose but never route through it.
            waypoint.valid = False
            if self.logger:
                self.logger.warning(
                    "Waypoint %s has no floor or ceiling within %.1f units; excluded from patrol routes",
                    waypoint.id,
                    self.settings.waypoint_ray_distance,
                )
            return False
        waypoint.pose = waypoint.pose.moved_to(position)
        waypoint.valid = True
        return True

    def correct_all(self, waypoints: Iterable[Waypoint]) -> List[Waypoint]:
        rejected: List[Waypoint] = []
        for waypoint in waypoints:
            if not self.correct(waypoint):
                rejected.append(waypoint)
        return rejected


class WaypointRegistry:
    """Owns the session's waypoints, indexed by id."""

    def __init__(self, waypoints: Iterable[Waypoint] = ()) -> None:
        self._waypoints: Dict[str, Waypoint] = {}
        for waypoint in waypoints:
            self.add(waypoint)

    def add(self, waypoint: Waypoint) -> None:
        if waypoint.id in self._waypoints:
            raise ValueError(f"Duplicate waypoint id '{waypoint.id}'")
        self._waypoints[waypoint.id] = waypoint

    def get(self, waypoint_id: str) -> Waypoint:
        return self._waypoints[waypoint_id]

    def all(self) -> List[Waypoint]:
        return list(self._waypoints.values())

    def usable(self) -> List[Waypoint]:
        return [waypoint for waypoint in self._waypoints.values() if waypoint.valid]

    def __len__(self) -> int:
        return len(self._waypoints)


__all__ = ["Waypoint", "WaypointCorrector", "WaypointRegistry"]
