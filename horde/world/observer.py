"""Observer pose used for distance and visibility tests."""
from __future__ import annotations

from dataclasses import dataclass, field
from math import radians, tan

from pygame.math import Vector3

from horde.math.pose import Pose


@dataclass
class Observer:
    """Reference viewpoint with a perspective view volume.

    The spawner only reads from the observer; whoever owns the player or
    camera moves it between ticks.
    """

    position: Vector3 = field(default_factory=Vector3)
    forward: Vector3 = field(default_factory=lambda: Vector3(0.0, 0.0, 1.0))
    right: Vector3 = field(default_factory=lambda: Vector3(1.0, 0.0, 0.0))
    up: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    fov_deg: float = 60.0
    aspect: float = 16.0 / 9.0

    @classmethod
    def from_pose(cls, pose: Pose, fov_deg: float = 60.0, aspect: float = 16.0 / 9.0) -> "Observer":
        observer = cls(fov_deg=fov_deg, aspect=aspect)
        observer.set_pose(pose)
        return observer

    def set_pose(self, pose: Pose) -> None:
        basis = pose.basis()
        self.position = Vector3(pose.position)
        self.forward = basis.forward
        self.right = basis.right
        self.up = basis.up

    @property
    def fov_factor(self) -> float:
        return 1.0 / tan(radians(self.fov_deg) * 0.5)

    def distance_to(self, point: Vector3) -> float:
        return self.position.distance_to(point)

    def viewport_point(self, point: Vector3) -> Vector3:
        """Project a world point into normalised viewport space.

        ``x`` and ``y`` run from 0 to 1 across the view volume (y up) and
        ``z`` is the depth along the view direction; negative depth means
        the point is behind the observer.
        """

        rel = point - self.position
        depth = rel.dot(self.forward)
        if abs(depth) < 1e-9:
            return Vector3(0.5, 0.5, 0.0)
        x = rel.dot(self.right)
        y = rel.dot(self.up)
        ndc_x = (x * self.fov_factor / self.aspect) / depth
        ndc_y = (y * self.fov_factor) / depth
        return Vector3(ndc_x * 0.5 + 0.5, ndc_y * 0.5 + 0.5, depth)

    def in_view_volume(self, viewport: Vector3) -> bool:
        return viewport.z > 0.0 and 0.0 < viewport.x < 1.0 and 0.0 < viewport.y < 1.0


__all__ = ["Observer"]
