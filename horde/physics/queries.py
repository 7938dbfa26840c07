"""Environment query contract consumed by the spawner."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, TYPE_CHECKING

from pygame.math import Vector3

if TYPE_CHECKING:  # pragma: no cover - only used for typing
    from horde.world.observer import Observer


@dataclass(frozen=True)
class Hit:
    """First surface reported by a ray or sweep query."""

    point: Vector3
    entity: Any
    distance: float
    normal: Vector3 = field(default_factory=Vector3)


class EnvironmentQueries(Protocol):
    """Synchronous collision and visibility queries against static geometry.

    A miss is reported as ``None``; queries never raise for "nothing there".
    """

    def ray_cast(self, origin: Vector3, direction: Vector3, max_distance: float) -> Optional[Hit]:
        ...

    def capsule_sweep(
        self,
        bottom: Vector3,
        top: Vector3,
        radius: float,
        direction: Vector3,
        max_distance: float,
    ) -> Optional[Hit]:
        ...

    def sphere_sweep(
        self, origin: Vector3, radius: float, direction: Vector3, max_distance: float
    ) -> Optional[Hit]:
        ...

    def viewport_project(self, observer: "Observer", point: Vector3) -> Vector3:
        ...


__all__ = ["EnvironmentQueries", "Hit"]
