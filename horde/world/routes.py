"""Randomised patrol routes for freshly spawned actors."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from horde.engine.logger import ChannelLogger
from horde.world.waypoints import Waypoint


@dataclass(frozen=True)
class PatrolRoute:
    """Ordered, duplicate-free waypoint sequence handed to an actor."""

    waypoints: tuple[Waypoint, ...]
    bidirectional: bool

    def __len__(self) -> int:
        return len(self.waypoints)

    def ids(self) -> List[str]:
        return [waypoint.id for waypoint in self.waypoints]


class RouteAssigner:
    """Samples waypoints uniformly without repeats."""

    def __init__(
        self,
        waypoints_per_route: int,
        rng: Optional[random.Random] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.waypoints_per_route = waypoints_per_route
        self.rng = rng or random.Random()
        self.logger = logger

    def sample(self, pool: Sequence[Waypoint]) -> List[Waypoint]:
        target = min(self.waypoints_per_route, len(pool))
        chosen: List[Waypoint] = []
        # Indices not yet visited; every draw yields a new waypoint.
        remaining = list(range(len(pool)))
        while len(chosen) < target:
            index = remaining.pop(self.rng.randrange(len(remaining)))
            chosen.append(pool[index])
        return chosen

    def assign(self, pool: Sequence[Waypoint]) -> PatrolRoute:
        route = PatrolRoute(
            waypoints=tuple(self.sample(pool)),
            bidirectional=self.rng.random() > 0.5,
        )
        if self.logger and self.logger.enabled:
            self.logger.debug(
                "Route %s (%s)",
                " -> ".join(route.ids()) or "<empty>",
                "back and forth" if route.bidirectional else "loop",
            )
        return route


__all__ = ["PatrolRoute", "RouteAssigner"]
