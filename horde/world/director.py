"""Tick orchestration for the spawn pipeline."""
from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional

from horde.engine.clock import TickClock
from horde.engine.logger import GameLogger
from horde.engine.settings import SpawnSettings
from horde.engine.telemetry import PlacementSnapshot, SpawnTelemetry
from horde.physics.queries import EnvironmentQueries
from horde.world.eligibility import EligibilityFilter, EligibilityResult
from horde.world.level import LevelDefinition, MarkerData, backfill_colliders
from horde.world.observer import Observer
from horde.world.population import (
    ActorArchetype,
    ActorFactory,
    ActorHandle,
    PopulationBalancer,
    PopulationCensus,
    PopulationState,
)
from horde.world.routes import RouteAssigner
from horde.world.spawn_points import SpawnPoint, SpawnPointCorrector
from horde.world.waypoints import Waypoint, WaypointCorrector, WaypointRegistry


class SpawnDirector:
    """Owns every spawn point, waypoint and population counter for a session.

    ``initialize`` runs the static placement pass once; ``update`` then runs
    the three tick phases in a fixed order: refresh counts, recompute
    eligibility, attempt a spawn.
    """

    def __init__(
        self,
        settings: SpawnSettings,
        queries: EnvironmentQueries,
        observer: Observer,
        census: PopulationCensus,
        factory: ActorFactory,
        logger: GameLogger,
        primary: Optional[ActorArchetype] = None,
        secondary: Optional[ActorArchetype] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.queries = queries
        self.observer = observer
        self.census = census
        self.factory = factory
        self.logger = logger
        self.rng = rng or random.Random()
        self.clock = TickClock()
        self.telemetry = SpawnTelemetry()
        self.spawn_points: List[SpawnPoint] = []
        self.waypoints = WaypointRegistry()
        self._spawn_index: Dict[str, SpawnPoint] = {}
        self._initialized = False

        primary = primary or ActorArchetype(settings.primary_archetype, settings.primary_archetype)
        secondary = secondary or ActorArchetype(settings.secondary_archetype, settings.secondary_archetype)
        self.population = PopulationBalancer(
            PopulationState(
                primary=primary,
                secondary=secondary,
                target_ratio=settings.target_ratio,
                cap=settings.population_cap,
            ),
            spawn_cooldown=settings.spawn_cooldown,
            rng=self.rng,
            logger=logger.channel("population"),
        )
        self.eligibility = EligibilityFilter(
            queries,
            settings.min_distance,
            settings.max_distance,
            logger=logger.channel("eligibility"),
        )
        self.routes = RouteAssigner(
            settings.waypoints_per_route,
            rng=self.rng,
            logger=logger.channel("routes"),
        )
        self._spawn_corrector = SpawnPointCorrector(queries, settings, logger.channel("placement"))
        self._waypoint_corrector = WaypointCorrector(queries, settings, logger.channel("waypoints"))

    @classmethod
    def from_level(
        cls,
        level: LevelDefinition,
        settings: SpawnSettings,
        census: PopulationCensus,
        factory: ActorFactory,
        logger: GameLogger,
        primary: Optional[ActorArchetype] = None,
        secondary: Optional[ActorArchetype] = None,
        observer: Optional[Observer] = None,
        rng: Optional[random.Random] = None,
    ) -> "SpawnDirector":
        """Build the query world for ``level`` and run the placement pass."""

        backfill_colliders(level.pieces, logger=logger.channel("level"))
        director = cls(
            settings,
            level.build_world(),
            observer or Observer.from_pose(level.observer_start),
            census,
            factory,
            logger,
            primary=primary,
            secondary=secondary,
            rng=rng,
        )
        director.initialize(level.spawn_markers, level.waypoint_markers)
        return director

    # ------------------------------------------------------------------
    # Initialisation

    def initialize(
        self,
        spawn_markers: Iterable[MarkerData],
        waypoint_markers: Iterable[MarkerData],
    ) -> PlacementSnapshot:
        if self._initialized:
            raise RuntimeError("SpawnDirector.initialize() may only run once per session")
        self._initialized = True

        for marker in waypoint_markers:
            self.waypoints.add(Waypoint(id=marker.id, pose=marker.pose.moved_to(marker.pose.position)))
        self._waypoint_corrector.correct_all(self.waypoints.all())

        for marker in spawn_markers:
            if marker.id in self._spawn_index:
                raise ValueError(f"Duplicate spawn point id '{marker.id}'")
            point = SpawnPoint(id=marker.id, pose=marker.pose.moved_to(marker.pose.position))
            self.spawn_points.append(point)
            self._spawn_index[point.id] = point
        self._spawn_corrector.correct_all(self.spawn_points)

        placement = self.placement()
        self.logger.channel("level").info(
            "Placement: %d/%d spawn points valid, %d/%d waypoints valid",
            placement.spawn_points_valid,
            placement.spawn_points,
            placement.waypoints_valid,
            placement.waypoints,
        )
        return placement

    def placement(self) -> PlacementSnapshot:
        return PlacementSnapshot(
            spawn_points=len(self.spawn_points),
            spawn_points_valid=sum(1 for point in self.spawn_points if point.valid),
            waypoints=len(self.waypoints),
            waypoints_valid=len(self.waypoints.usable()),
        )

    def spawn_point(self, point_id: str) -> SpawnPoint:
        return self._spawn_index[point_id]

    # ------------------------------------------------------------------
    # Tick phases

    def update(self, dt: float) -> Optional[ActorHandle]:
        tick = self.clock.advance(dt)
        self.telemetry.begin_tick(tick)
        self.refresh_population()
        result = self.refresh_eligibility()
        self.telemetry.record_eligibility(result.allowed, result.evaluated, len(result.eligible))
        actor = self.attempt_spawn(self.clock.time)
        self.telemetry.advance_time(dt, self.logger.channel("population"))
        return actor

    def refresh_population(self) -> None:
        self.population.refresh(self.census)

    def refresh_eligibility(self) -> EligibilityResult:
        return self.eligibility.update(
            self.spawn_points,
            self.observer,
            self.population.state.cap,
            self.population.state.live_total,
        )

    @property
    def eligible(self) -> List[SpawnPoint]:
        return list(self.eligibility.eligible)

    def attempt_spawn(self, now: float) -> Optional[ActorHandle]:
        eligible = self.eligibility.eligible
        if not self.population.can_spawn(now, len(eligible)):
            return None
        point = self.population.choose_point(eligible)
        archetype = self.population.next_archetype()
        actor = self.factory.instantiate(archetype, point.pose)
        route = self.routes.assign(self.waypoints.usable())
        actor.set_route(route, route.bidirectional)
        actor.set_observer(self.observer)
        self.population.commit_spawn(now, archetype)
        self.telemetry.record_spawn(archetype.tag)
        return actor


__all__ = ["SpawnDirector"]
