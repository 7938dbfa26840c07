"""Spatial pose helpers for scene markers."""
from __future__ import annotations

from dataclasses import dataclass, field
from math import cos, radians, sin
from typing import Sequence

from pygame.math import Vector3


WORLD_UP = Vector3(0.0, 1.0, 0.0)


@dataclass(frozen=True)
class PoseBasis:
    """Local orientation basis derived from a pose rotation."""

    forward: Vector3
    right: Vector3
    up: Vector3


@dataclass
class Pose:
    """Position plus Euler orientation (pitch, yaw, roll in degrees)."""

    position: Vector3 = field(default_factory=Vector3)
    rotation: Vector3 = field(default_factory=Vector3)

    @classmethod
    def from_values(cls, position: Sequence[float], rotation: Sequence[float] | None = None) -> "Pose":
        rot = rotation or (0.0, 0.0, 0.0)
        return cls(
            position=Vector3(float(position[0]), float(position[1]), float(position[2])),
            rotation=Vector3(float(rot[0]), float(rot[1]), float(rot[2])),
        )

    def basis(self) -> PoseBasis:
        pitch, yaw, roll = map(radians, (self.rotation.x, self.rotation.y, self.rotation.z))
        cp = cos(pitch)
        sp = sin(pitch)
        cy = cos(yaw)
        sy = sin(yaw)
        cr = cos(roll)
        sr = sin(roll)

        forward = Vector3(sy * cp, -sp, cy * cp)
        right = Vector3(cy * cr + sy * sp * sr, cp * sr, -sy * cr + cy * sp * sr)
        up = Vector3(-cy * sr + sy * sp * cr, cp * cr, sy * sr + cy * sp * cr)

        # Ensure numerical stability when the pose is aligned with an axis.
        if forward.length_squared() == 0:
            forward = Vector3(0.0, 0.0, 1.0)
        if right.length_squared() == 0:
            right = Vector3(1.0, 0.0, 0.0)
        if up.length_squared() == 0:
            up = Vector3(0.0, 1.0, 0.0)

        return PoseBasis(forward.normalize(), right.normalize(), up.normalize())

    def moved_to(self, position: Vector3) -> "Pose":
        return Pose(position=Vector3(position), rotation=Vector3(self.rotation))


def midpoint(a: Vector3, b: Vector3) -> Vector3:
    return a.lerp(b, 0.5)


__all__ = ["Pose", "PoseBasis", "WORLD_UP", "midpoint"]
