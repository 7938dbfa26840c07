import json
import logging
from pathlib import Path

import pytest
from pygame.math import Vector3

from horde.assets.content import ContentManager
from horde.engine.logger import DEFAULT_CHANNELS, GameLogger, LoggerConfig
from horde.physics.box_world import Collider
from horde.world.level import LevelDatabase, backfill_colliders


def _load_content() -> ContentManager:
    root = Path(__file__).resolve().parents[1]
    content = ContentManager(root / "horde" / "assets")
    content.load()
    return content


def _quiet_logger() -> GameLogger:
    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


def test_backfill_adds_colliders_to_structural_pieces() -> None:
    pieces = [
        Collider.from_bounds("a", (0, 0, 0), (1, 1, 1), name="Tunnel_Roof_01", collider=False),
        Collider.from_bounds("b", (0, 0, 0), (1, 1, 1), name="pipes_cluster", collider=False),
        Collider.from_bounds("c", (0, 0, 0), (1, 1, 1), name="east_wall", collider=True),
        Collider.from_bounds("d", (0, 0, 0), (1, 1, 1), name="crate", collider=False),
    ]
    added = backfill_colliders(pieces, logger=_quiet_logger().channel("level"))
    assert added == 2
    assert [piece.collider for piece in pieces] == [True, True, True, False]


def test_level_loads_markers_and_geometry(tmp_path) -> None:
    data = {
        "id": "test_room",
        "geometry": [
            {"id": "floor", "min": [-1, -1, -1], "max": [1, 0, 1]},
            {"id": "lamp", "name": "lamp", "min": [0, 2, 0], "max": [0.2, 2.2, 0.2], "collider": False},
        ],
        "spawnPoints": [{"id": "sp1", "position": [0, 1, 0], "rotation": [0, 45, 0]}],
        "waypoints": [{"id": "wp1", "position": [0.5, 1, 0.5]}],
        "observer": {"position": [0, 1.7, -5]},
    }
    path = tmp_path / "test_room.json"
    path.write_text(json.dumps(data))
    database = LevelDatabase()
    level = database.load_file(path)
    assert level is database.get("test_room")
    assert level.name == "Test_Room"
    assert [piece.id for piece in level.pieces] == ["floor", "lamp"]
    assert level.pieces[1].collider is False
    assert level.spawn_markers[0].pose.rotation.y == pytest.approx(45.0)
    assert tuple(level.waypoint_markers[0].pose.position) == pytest.approx((0.5, 1.0, 0.5))
    assert tuple(level.observer_start.position) == pytest.approx((0.0, 1.7, -5.0))
    assert [collider.id for collider in level.build_world().solid_colliders()] == ["floor"]


def test_invalid_level_file_is_skipped(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("[")
    database = LevelDatabase()
    assert database.load_file(path) is None
    database.load_directory(tmp_path)
    assert database.levels == {}


def test_bundled_content_loads() -> None:
    content = _load_content()
    level = content.levels.get("sewer")
    assert len(level.spawn_markers) == 9
    assert content.archetypes.get("walker").prototype == "prefabs/walker"
    assert content.archetypes.get("floater").prototype == "prefabs/floater"
    # Unknown tags fall back to a bare archetype.
    assert content.archetypes.get("crawler").tag == "crawler"
    assert Vector3(level.observer_start.position).y == pytest.approx(1.7)
