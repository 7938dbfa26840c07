"""In-memory actor registry used as census and spawn factory."""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from horde.math.pose import Pose
from horde.world.observer import Observer
from horde.world.population import ActorArchetype
from horde.world.routes import PatrolRoute


@dataclass
class SpawnedActor:
    """Handle for an actor created by the spawner.

    Movement is owned by whatever controller consumes the route; the handle
    only records what it was given.
    """

    id: int
    archetype: ActorArchetype
    pose: Pose
    route: Optional[PatrolRoute] = None
    bidirectional: bool = False
    observer: Optional[Observer] = field(default=None, repr=False)
    alive: bool = True

    def set_route(self, route: PatrolRoute, bidirectional: bool) -> None:
        self.route = route
        self.bidirectional = bidirectional

    def set_observer(self, observer: Observer) -> None:
        self.observer = observer


class ActorRegistry:
    """Tracks live actors by archetype tag."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._actors: Dict[int, SpawnedActor] = {}

    def instantiate(self, archetype: ActorArchetype, pose: Pose) -> SpawnedActor:
        actor = SpawnedActor(id=next(self._ids), archetype=archetype, pose=pose.moved_to(pose.position))
        self._actors[actor.id] = actor
        return actor

    def despawn(self, actor: SpawnedActor) -> bool:
        if self._actors.pop(actor.id, None) is None:
            return False
        actor.alive = False
        return True

    def count_by_archetype(self, tag: str) -> int:
        return sum(1 for actor in self._actors.values() if actor.archetype.tag == tag)

    def actors(self) -> List[SpawnedActor]:
        return list(self._actors.values())

    def __len__(self) -> int:
        return len(self._actors)


__all__ = ["ActorRegistry", "SpawnedActor"]
