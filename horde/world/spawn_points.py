"""Spawn point records and the static placement pass."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from pygame.math import Vector3

from horde.engine.logger import ChannelLogger
from horde.engine.settings import SpawnSettings
from horde.math.pose import WORLD_UP, Pose, midpoint
from horde.physics.queries import EnvironmentQueries, Hit


SWEEP_DIRECTIONS: tuple[str, ...] = ("left", "right", "front", "back", "up", "down")


@dataclass
class SpawnPoint:
    """Designated location where an actor may be created."""

    id: str
    pose: Pose
    valid: bool = True
    active: bool = False
    raw_position: Vector3 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.raw_position = Vector3(self.pose.position)

    @property
    def position(self) -> Vector3:
        return self.pose.position

    def set_active(self, active: bool) -> bool:
        """Mirror ``active`` onto the point and report whether it changed."""

        if self.active == active:
            return False
        self.active = active
        return True


def cavity_centroid(hits: Dict[str, Vector3]) -> Vector3:
    """Average of the left/right, front/back and down/up contact midpoints."""

    total = Vector3()
    total += midpoint(hits["left"], hits["right"])
    total += midpoint(hits["front"], hits["back"])
    total += midpoint(hits["down"], hits["up"])
    return total / 3.0


class SpawnPointCorrector:
    """Pulls raw spawn markers toward the centre of the surrounding void.

    Horizontal probes use a capsule matching the actor's collider; vertical
    probes use a sphere of the same radius. A point whose probes do not all
    touch geometry lies outside the enclosed level and is invalidated.
    """

    def __init__(
        self,
        queries: EnvironmentQueries,
        settings: SpawnSettings,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.queries = queries
        self.settings = settings
        self.logger = logger

    def probe(self, pose: Pose) -> Dict[str, Optional[Hit]]:
        settings = self.settings
        basis = pose.basis()
        position = pose.position
        top = position + WORLD_UP * settings.capsule_half_height
        bottom = position - WORLD_UP * settings.capsule_half_height
        radius = settings.capsule_radius
        reach = settings.max_cast_length
        capsule = self.queries.capsule_sweep
        sphere = self.queries.sphere_sweep
        return {
            "left": capsule(bottom, top, radius, -basis.right, reach),
            "right": capsule(bottom, top, radius, basis.right, reach),
            "front": capsule(bottom, top, radius, basis.forward, reach),
            "back": capsule(bottom, top, radius, -basis.forward, reach),
            "up": sphere(position, radius, basis.up, reach),
            "down": sphere(position, radius, -basis.up, reach),
        }

    def corrected_position(self, pose: Pose, point_id: str = "?") -> Optional[Vector3]:
        hits = self.probe(pose)
        missing = [name for name in SWEEP_DIRECTIONS if hits[name] is None]
        if missing:
            if self.logger:
                for name in missing:
                    self.logger.error(
                        "%s sweep of spawn point %s found no geometry within %.1f units. "
                        "Make sure it is inside the level.",
                        name.capitalize(),
                        point_id,
                        self.settings.max_cast_length,
                    )
            return None
        return cavity_centroid({name: hit.point for name, hit in hits.items()})

    def correct(self, point: SpawnPoint) -> bool:
        position = self.corrected_position(point.pose, point.id)
        if position is None:
            point.valid = False
            point.set_active(False)
            return False
        point.pose = point.pose.moved_to(position)
        point.valid = True
        if self.logger and self.logger.enabled:
            self.logger.debug(
                "Spawn point %s moved %.2f units to (%.2f, %.2f, %.2f)",
                point.id,
                point.raw_position.distance_to(position),
                position.x,
                position.y,
                position.z,
            )
        return True

    def correct_all(self, points: Iterable[SpawnPoint]) -> List[SpawnPoint]:
        """Correct every point and return the ones that failed placement."""

        rejected: List[SpawnPoint] = []
        for point in points:
            if not self.correct(point):
                rejected.append(point)
        return rejected


__all__ = ["SWEEP_DIRECTIONS", "SpawnPoint", "SpawnPointCorrector", "cavity_centroid"]
