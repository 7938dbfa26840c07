"""Asset loading entry point."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from horde.world.level import LevelDatabase
from horde.world.population import ActorArchetype


class ArchetypeDatabase:
    """Actor archetypes keyed by tag; the prototype is the raw asset entry."""

    def __init__(self) -> None:
        self.archetypes: Dict[str, ActorArchetype] = {}

    def load(self, path: Path) -> None:
        if not path.exists():
            return
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            return
        if isinstance(data, dict):
            data = [data]
        for entry in data:
            archetype = ActorArchetype(tag=entry["tag"], prototype=entry.get("prototype", entry["tag"]))
            self.archetypes[archetype.tag] = archetype

    def get(self, tag: str) -> ActorArchetype:
        # Tags without an asset entry still spawn, with the tag as prototype.
        return self.archetypes.get(tag) or ActorArchetype(tag=tag, prototype=tag)


class ContentManager:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.archetypes = ArchetypeDatabase()
        self.levels = LevelDatabase()

    def load(self) -> None:
        self.archetypes.load(self.root / "archetypes.json")
        self.levels.load_directory(self.root / "levels")


__all__ = ["ArchetypeDatabase", "ContentManager"]
