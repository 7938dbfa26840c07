"""Axis-aligned box intersection routines used by the query service."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pygame.math import Vector3

_EPSILON = 1e-9


@dataclass(frozen=True)
class BoxEntry:
    """Entry distance and face normal of a ray against a box."""

    distance: float
    normal: Vector3


def _axis(vector: Vector3, index: int) -> float:
    return (vector.x, vector.y, vector.z)[index]


def ray_box_entry(
    origin: Vector3,
    direction: Vector3,
    box_min: Vector3,
    box_max: Vector3,
    max_distance: float,
) -> Optional[BoxEntry]:
    """Slab test for a normalised ray.

    Returns ``None`` for a miss, for a hit beyond ``max_distance`` and when
    the origin already lies inside the box.
    """

    t_near = float("-inf")
    t_far = float("inf")
    near_axis = -1
    near_sign = 0.0
    for index in range(3):
        o = _axis(origin, index)
        d = _axis(direction, index)
        lo = _axis(box_min, index)
        hi = _axis(box_max, index)
        if abs(d) < _EPSILON:
            if o < lo or o > hi:
                return None
            continue
        t1 = (lo - o) / d
        t2 = (hi - o) / d
        sign = -1.0
        if t1 > t2:
            t1, t2 = t2, t1
            sign = 1.0
        if t1 > t_near:
            t_near = t1
            near_axis = index
            near_sign = sign
        t_far = min(t_far, t2)
        if t_near > t_far:
            return None
    if near_axis < 0 or t_far < 0.0 or t_near < 0.0:
        return None
    if t_near > max_distance:
        return None
    normal = Vector3()
    normal[near_axis] = near_sign
    return BoxEntry(distance=t_near, normal=normal)


def closest_point_on_box(point: Vector3, box_min: Vector3, box_max: Vector3) -> Vector3:
    return Vector3(
        min(max(point.x, box_min.x), box_max.x),
        min(max(point.y, box_min.y), box_max.y),
        min(max(point.z, box_min.z), box_max.z),
    )


def box_contains(point: Vector3, box_min: Vector3, box_max: Vector3) -> bool:
    return (
        box_min.x <= point.x <= box_max.x
        and box_min.y <= point.y <= box_max.y
        and box_min.z <= point.z <= box_max.z
    )


__all__ = ["BoxEntry", "box_contains", "closest_point_on_box", "ray_box_entry"]
