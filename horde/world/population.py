"""Live population tracking and archetype ratio control."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Sequence, TYPE_CHECKING

from horde.engine.logger import ChannelLogger
from horde.math.pose import Pose

if TYPE_CHECKING:  # pragma: no cover - only used for typing
    from horde.world.observer import Observer
    from horde.world.routes import PatrolRoute
    from horde.world.spawn_points import SpawnPoint


@dataclass(frozen=True)
class ActorArchetype:
    """Spawnable actor category and the prototype it instantiates."""

    tag: str
    prototype: Any = None


class PopulationCensus(Protocol):
    def count_by_archetype(self, tag: str) -> int:
        ...


class ActorHandle(Protocol):
    def set_route(self, route: "PatrolRoute", bidirectional: bool) -> None:
        ...

    def set_observer(self, observer: "Observer") -> None:
        ...


class ActorFactory(Protocol):
    def instantiate(self, archetype: ActorArchetype, pose: Pose) -> ActorHandle:
        ...


def archetype_ratio(secondary_count: int, primary_count: int) -> float:
    """Secondary-to-primary ratio; infinite while no primary actor is alive."""

    if primary_count <= 0:
        return math.inf
    return secondary_count / primary_count


@dataclass
class PopulationState:
    primary: ActorArchetype
    secondary: ActorArchetype
    target_ratio: float
    cap: int
    next_spawn_time: float = 0.0
    counts: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.counts.setdefault(self.primary.tag, 0)
        self.counts.setdefault(self.secondary.tag, 0)

    @property
    def live_total(self) -> int:
        return self.counts[self.primary.tag] + self.counts[self.secondary.tag]

    @property
    def ratio(self) -> float:
        return archetype_ratio(self.counts[self.secondary.tag], self.counts[self.primary.tag])


class PopulationBalancer:
    """Decides when to spawn and which archetype keeps the mix on target."""

    def __init__(
        self,
        state: PopulationState,
        spawn_cooldown: float,
        rng: Optional[random.Random] = None,
        logger: Optional[ChannelLogger] = None,
    ) -> None:
        self.state = state
        self.spawn_cooldown = spawn_cooldown
        self.rng = rng or random.Random()
        self.logger = logger

    def refresh(self, census: PopulationCensus) -> None:
        for archetype in (self.state.primary, self.state.secondary):
            self.state.counts[archetype.tag] = max(0, int(census.count_by_archetype(archetype.tag)))

    def next_archetype(self) -> ActorArchetype:
        if self.state.ratio > self.state.target_ratio:
            return self.state.primary
        return self.state.secondary

    def can_spawn(self, now: float, eligible_count: int) -> bool:
        return (
            now >= self.state.next_spawn_time
            and eligible_count > 0
            and self.state.live_total < self.state.cap
        )

    def choose_point(self, eligible: Sequence["SpawnPoint"]) -> "SpawnPoint":
        return self.rng.choice(list(eligible))

    def commit_spawn(self, now: float, archetype: ActorArchetype) -> None:
        """Start the cooldown and count the new actor until the next refresh."""

        self.state.next_spawn_time = now + self.spawn_cooldown
        self.state.counts[archetype.tag] += 1
        if self.logger:
            self.logger.info(
                "Spawned %s (%s/%s now %d/%d of cap %d)",
                archetype.tag,
                self.state.primary.tag,
                self.state.secondary.tag,
                self.state.counts[self.state.primary.tag],
                self.state.counts[self.state.secondary.tag],
                self.state.cap,
            )


__all__ = [
    "ActorArchetype",
    "ActorFactory",
    "ActorHandle",
    "PopulationBalancer",
    "PopulationCensus",
    "PopulationState",
    "archetype_ratio",
]
