"""Level definitions: geometry pieces and scene markers."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from horde.engine.logger import ChannelLogger
from horde.math.pose import Pose
from horde.physics.box_world import BoxWorld, Collider

# Name fragments of pieces that must block actors even when authored without a collider.
COLLIDER_KEYWORDS: tuple[str, ...] = ("roof", "pipes", "floor", "wall")


@dataclass(frozen=True)
class MarkerData:
    id: str
    pose: Pose

    @classmethod
    def from_dict(cls, data: Dict) -> "MarkerData":
        return cls(
            id=data["id"],
            pose=Pose.from_values(data.get("position", (0.0, 0.0, 0.0)), data.get("rotation")),
        )


@dataclass
class LevelDefinition:
    """Raw authored level before any placement correction."""

    id: str
    name: str
    pieces: List[Collider] = field(default_factory=list)
    spawn_markers: List[MarkerData] = field(default_factory=list)
    waypoint_markers: List[MarkerData] = field(default_factory=list)
    observer_start: Pose = field(default_factory=Pose)

    @classmethod
    def from_dict(cls, data: Dict) -> "LevelDefinition":
        pieces = [
            Collider.from_bounds(
                id=entry["id"],
                name=entry.get("name", entry["id"]),
                box_min=entry["min"],
                box_max=entry["max"],
                collider=bool(entry.get("collider", True)),
            )
            for entry in data.get("geometry", [])
        ]
        observer = data.get("observer", {})
        return cls(
            id=data["id"],
            name=data.get("name", data["id"].title()),
            pieces=pieces,
            spawn_markers=[MarkerData.from_dict(entry) for entry in data.get("spawnPoints", [])],
            waypoint_markers=[MarkerData.from_dict(entry) for entry in data.get("waypoints", [])],
            observer_start=Pose.from_values(
                observer.get("position", (0.0, 0.0, 0.0)), observer.get("rotation")
            ),
        )

    def build_world(self) -> BoxWorld:
        return BoxWorld(self.pieces)


def backfill_colliders(
    pieces: Iterable[Collider],
    keywords: Iterable[str] = COLLIDER_KEYWORDS,
    logger: Optional[ChannelLogger] = None,
) -> int:
    """Give structural pieces a collider when the level author forgot one."""

    keywords = tuple(keyword.lower() for keyword in keywords)
    added = 0
    for piece in pieces:
        if piece.collider:
            continue
        name = piece.name.lower()
        if any(keyword in name for keyword in keywords):
            piece.collider = True
            added += 1
            if logger and logger.enabled:
                logger.debug("Added collider to %s", piece.name)
    if added and logger:
        logger.info("Backfilled colliders on %d level pieces", added)
    return added


class LevelDatabase:
    """Loads level definitions from JSON assets."""

    def __init__(self) -> None:
        self.levels: Dict[str, LevelDefinition] = {}

    def load_file(self, path: Path) -> Optional[LevelDefinition]:
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return None
        level = LevelDefinition.from_dict(data)
        self.levels[level.id] = level
        return level

    def load_directory(self, directory: Path) -> None:
        if not directory.exists():
            return
        for path in sorted(directory.glob("*.json")):
            self.load_file(path)

    def get(self, level_id: str) -> LevelDefinition:
        return self.levels[level_id]


__all__ = [
    "COLLIDER_KEYWORDS",
    "LevelDatabase",
    "LevelDefinition",
    "MarkerData",
    "backfill_colliders",
]
