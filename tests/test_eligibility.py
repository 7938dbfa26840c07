from __future__ import annotations

import logging
import random
from pathlib import Path

import pytest
from pygame.math import Vector3

from horde.assets.content import ContentManager
from horde.engine.logger import DEFAULT_CHANNELS, GameLogger, LoggerConfig
from horde.engine.settings import SpawnSettings
from horde.math.pose import Pose
from horde.physics.box_world import BoxWorld, Collider
from horde.physics.queries import Hit
from horde.world.actors import ActorRegistry
from horde.world.director import SpawnDirector
from horde.world.eligibility import (
    EligibilityFilter,
    allowed_active_points,
    should_activate,
)
from horde.world.observer import Observer
from horde.world.spawn_points import SpawnPoint


def _quiet_logger() -> GameLogger:
    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


def _load_content() -> ContentManager:
    root = Path(__file__).resolve().parents[1]
    content = ContentManager(root / "horde" / "assets")
    content.load()
    return content


def _point(point_id: str, x: float, y: float, z: float, valid: bool = True) -> SpawnPoint:
    return SpawnPoint(id=point_id, pose=Pose(Vector3(x, y, z)), valid=valid)


def _filter(world: BoxWorld | None = None) -> EligibilityFilter:
    return EligibilityFilter(world or BoxWorld(), 10.0, 50.0)


@pytest.mark.parametrize(
    "cap, live, expected",
    [(10, 0, 5), (10, 1, 4), (10, 7, 1), (10, 8, 1), (10, 9, 0), (10, 10, 0), (10, 13, -2)],
)
def test_allowed_active_points(cap: int, live: int, expected: int) -> None:
    assert allowed_active_points(cap, live) == expected


def test_activation_rule() -> None:
    assert should_activate(True, 20.0, False, 1, 10.0, 50.0)
    assert not should_activate(False, 20.0, False, 1, 10.0, 50.0)
    assert not should_activate(True, 20.0, True, 1, 10.0, 50.0)
    assert not should_activate(True, 20.0, False, 0, 10.0, 50.0)
    assert not should_activate(True, 10.0, False, 1, 10.0, 50.0)
    assert not should_activate(True, 50.0, False, 1, 10.0, 50.0)


def test_visible_points_are_not_eligible() -> None:
    observer = Observer()
    in_front = _point("front", 0.0, 0.0, 20.0)
    behind = _point("behind", 0.0, 0.0, -20.0)
    off_to_side = _point("side", 30.0, 0.0, 20.0)
    result = _filter().update([in_front, behind, off_to_side], observer, 10, 0)
    assert {point.id for point in result.eligible} == {"behind", "side"}
    assert not in_front.active
    assert behind.active and off_to_side.active


def test_distance_band_is_open_interval() -> None:
    observer = Observer()
    points = [
        _point("too_close", 0.0, 0.0, -5.0),
        _point("at_min", 0.0, 0.0, -10.0),
        _point("inside", 0.0, 0.0, -30.0),
        _point("at_max", 0.0, 0.0, -50.0),
        _point("too_far", 0.0, 0.0, -60.0),
    ]
    result = _filter().update(points, observer, 10, 0)
    assert [point.id for point in result.eligible] == ["inside"]


def test_occluded_point_in_view_is_eligible() -> None:
    wall = Collider.from_bounds("wall", (-10.0, -10.0, 15.0), (10.0, 10.0, 16.0))
    observer = Observer()
    hidden = _point("hidden", 0.0, 0.0, 30.0)
    result = _filter(BoxWorld([wall])).update([hidden], observer, 10, 0)
    assert result.eligible == [hidden]
    assert hidden.active


class _MarkerQueries:
    """Reports every ray as hitting ``target`` at the end of the ray."""

    def __init__(self, target: object) -> None:
        self.target = target

    def ray_cast(self, origin: Vector3, direction: Vector3, max_distance: float) -> Hit:
        end = origin + direction.normalize() * max_distance
        return Hit(point=end, entity=self.target, distance=max_distance)

    def viewport_project(self, observer: Observer, point: Vector3) -> Vector3:
        return observer.viewport_point(point)


def test_ray_stopping_on_the_point_itself_counts_as_seen() -> None:
    observer = Observer()
    point = _point("front", 0.0, 0.0, 20.0)
    eligibility = EligibilityFilter(_MarkerQueries(point), 10.0, 50.0)
    assert eligibility.is_seen(observer, point.position, point)
    result = eligibility.update([point], observer, 10, 0)
    assert result.eligible == []
    assert not point.active


def test_ray_stopping_on_another_entity_counts_as_hidden() -> None:
    observer = Observer()
    point = _point("front", 0.0, 0.0, 20.0)
    eligibility = EligibilityFilter(_MarkerQueries(object()), 10.0, 50.0)
    assert not eligibility.is_seen(observer, point.position, point)
    result = eligibility.update([point], observer, 10, 0)
    assert result.eligible == [point]


def test_invalid_points_never_activate() -> None:
    observer = Observer()
    broken = _point("broken", 0.0, 0.0, -20.0, valid=False)
    broken.active = True
    result = _filter().update([broken], observer, 10, 0)
    assert result.eligible == []
    assert result.evaluated == 0
    assert not broken.active


def test_no_headroom_deactivates_everything() -> None:
    observer = Observer()
    point = _point("behind", 0.0, 0.0, -20.0)
    eligibility = _filter()
    eligibility.update([point], observer, 10, 0)
    assert point.active

    result = eligibility.update([point], observer, 10, 9)
    assert result.allowed == 0
    assert result.eligible == []
    assert not point.active
    assert eligibility.eligible == []


def test_eligible_points_are_ordered_closest_first() -> None:
    observer = Observer()
    points = [
        _point("far", 0.0, 0.0, -40.0),
        _point("near", 0.0, 0.0, -15.0),
        _point("mid", 0.0, 0.0, -25.0),
    ]
    result = _filter().update(points, observer, 10, 0)
    assert [point.id for point in result.eligible] == ["near", "mid", "far"]
    assert result.evaluated == 3


def test_eligible_set_is_rebuilt_each_tick() -> None:
    observer = Observer()
    point = _point("behind", 0.0, 0.0, -20.0)
    eligibility = _filter()
    eligibility.update([point], observer, 10, 0)
    observer.set_pose(Pose(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 180.0, 0.0)))
    result = eligibility.update([point], observer, 10, 0)
    assert result.eligible == []
    assert not point.active


def test_eligible_points_hold_for_random_observer_poses() -> None:
    content = _load_content()
    registry = ActorRegistry()
    settings = SpawnSettings()
    director = SpawnDirector.from_level(
        content.levels.get("sewer"),
        settings,
        census=registry,
        factory=registry,
        logger=_quiet_logger(),
        rng=random.Random(3),
    )
    rng = random.Random(11)
    invalid = [point for point in director.spawn_points if not point.valid]
    assert invalid

    for _ in range(200):
        pose = Pose(
            Vector3(rng.uniform(-3.5, 3.5), rng.uniform(0.5, 5.5), rng.uniform(1.0, 119.0)),
            Vector3(rng.uniform(-30.0, 30.0), rng.uniform(0.0, 360.0), 0.0),
        )
        director.observer.set_pose(pose)
        result = director.refresh_eligibility()
        for point in result.eligible:
            distance = director.observer.distance_to(point.position)
            assert point.valid
            assert settings.min_distance < distance < settings.max_distance
            assert not director.eligibility.is_seen(director.observer, point.position, point)
        for point in invalid:
            assert point not in result.eligible
            assert not point.active
