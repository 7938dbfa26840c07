"""Static axis-aligned box geometry implementing the environment queries."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, TYPE_CHECKING

from pygame.math import Vector3

from horde.math.geometry import box_contains, closest_point_on_box, ray_box_entry
from horde.physics.queries import Hit

if TYPE_CHECKING:  # pragma: no cover - only used for typing
    from horde.world.observer import Observer


@dataclass
class Collider:
    """Named level piece with an axis-aligned bounding volume."""

    id: str
    name: str
    box_min: Vector3
    box_max: Vector3
    collider: bool = True

    @classmethod
    def from_bounds(
        cls,
        id: str,
        box_min: Sequence[float],
        box_max: Sequence[float],
        name: str | None = None,
        collider: bool = True,
    ) -> "Collider":
        lo = Vector3(*(float(v) for v in box_min))
        hi = Vector3(*(float(v) for v in box_max))
        return cls(
            id=id,
            name=name or id,
            box_min=Vector3(min(lo.x, hi.x), min(lo.y, hi.y), min(lo.z, hi.z)),
            box_max=Vector3(max(lo.x, hi.x), max(lo.y, hi.y), max(lo.z, hi.z)),
            collider=collider,
        )

    def contains(self, point: Vector3) -> bool:
        return box_contains(point, self.box_min, self.box_max)


class BoxWorld:
    """Answers ray, sweep and viewport queries against static boxes.

    Sweeps are resolved as ray casts against boxes inflated by the swept
    shape's half extents, which is exact on faces and slightly conservative
    around edges. Boxes that already contain the query origin are ignored.
    """

    def __init__(self, colliders: Iterable[Collider] = ()) -> None:
        self._colliders: List[Collider] = list(colliders)

    @property
    def colliders(self) -> List[Collider]:
        return self._colliders

    def solid_colliders(self) -> List[Collider]:
        return [collider for collider in self._colliders if collider.collider]

    def ray_cast(self, origin: Vector3, direction: Vector3, max_distance: float) -> Optional[Hit]:
        return self._cast(origin, direction, max_distance, Vector3())

    def sphere_sweep(
        self, origin: Vector3, radius: float, direction: Vector3, max_distance: float
    ) -> Optional[Hit]:
        return self._cast(origin, direction, max_distance, Vector3(radius, radius, radius))

    def capsule_sweep(
        self,
        bottom: Vector3,
        top: Vector3,
        radius: float,
        direction: Vector3,
        max_distance: float,
    ) -> Optional[Hit]:
        center = (bottom + top) * 0.5
        half = (top - bottom) * 0.5
        inflation = Vector3(radius + abs(half.x), radius + abs(half.y), radius + abs(half.z))
        return self._cast(center, direction, max_distance, inflation)

    def viewport_project(self, observer: "Observer", point: Vector3) -> Vector3:
        return observer.viewport_point(point)

    def _cast(
        self,
        origin: Vector3,
        direction: Vector3,
        max_distance: float,
        inflation: Vector3,
    ) -> Optional[Hit]:
        if direction.length_squared() == 0 or max_distance <= 0.0:
            return None
        heading = direction.normalize()
        best: Optional[Hit] = None
        for collider in self._colliders:
            if not collider.collider:
                continue
            entry = ray_box_entry(
                origin,
                heading,
                collider.box_min - inflation,
                collider.box_max + inflation,
                max_distance,
            )
            if entry is None:
                continue
            if best is not None and entry.distance >= best.distance:
                continue
            center_at_impact = origin + heading * entry.distance
            best = Hit(
                point=closest_point_on_box(center_at_impact, collider.box_min, collider.box_max),
                entity=collider,
                distance=entry.distance,
                normal=entry.normal,
            )
        return best


__all__ = ["BoxWorld", "Collider"]
