"""Headless spawner session over a bundled level."""
from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import random
from pathlib import Path

from pygame.math import Vector3

from horde.assets.content import ContentManager
from horde.engine.logger import init_logger, quiet_logger
from horde.engine.loop import FixedTimestepLoop
from horde.engine.settings import SpawnSettings
from horde.math.pose import Pose
from horde.world.actors import ActorRegistry
from horde.world.director import SpawnDirector


SETTINGS_PATH = Path("settings.json")
ASSETS_PATH = Path(__file__).resolve().parent / "horde" / "assets"

WALK_SPEED = 3.0
CULL_INTERVAL = 4.0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a headless spawner session.")
    parser.add_argument("--settings", type=Path, default=SETTINGS_PATH)
    parser.add_argument("--level", default="sewer")
    parser.add_argument("--seconds", type=float, default=60.0)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--profile", action="store_true")
    parser.add_argument("--realtime", action="store_true", help="pace ticks against the wall clock")
    parser.add_argument("--quiet", action="store_true", help="mute every log channel")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logger = quiet_logger() if args.quiet else init_logger(args.settings)
    settings = SpawnSettings.from_settings(args.settings).validate()

    content = ContentManager(ASSETS_PATH)
    content.load()
    level = content.levels.get(args.level)

    registry = ActorRegistry()
    director = SpawnDirector.from_level(
        level,
        settings,
        census=registry,
        factory=registry,
        logger=logger,
        primary=content.archetypes.get(settings.primary_archetype),
        secondary=content.archetypes.get(settings.secondary_archetype),
        rng=random.Random(args.seed),
    )

    start = Vector3(level.observer_start.position)
    state = {"z": start.z, "heading": 1.0, "cull": CULL_INTERVAL}

    def update(dt: float) -> None:
        # Pace the observer up and down the tunnel, facing the way it walks.
        state["z"] += state["heading"] * WALK_SPEED * dt
        if state["z"] > 118.0 or state["z"] < 2.0:
            state["heading"] *= -1.0
            state["z"] = max(2.0, min(118.0, state["z"]))
        yaw = 0.0 if state["heading"] > 0 else 180.0
        director.observer.set_pose(Pose(Vector3(start.x, start.y, state["z"]), Vector3(0.0, yaw, 0.0)))

        state["cull"] -= dt
        if state["cull"] <= 0.0 and len(registry):
            state["cull"] = CULL_INTERVAL
            registry.despawn(registry.actors()[0])

        director.update(dt)
        if director.clock.time >= args.seconds:
            loop.stop()

    loop = FixedTimestepLoop(update, fixed_hz=settings.sim_hz)

    profiler = cProfile.Profile()
    try:
        if args.profile:
            profiler.enable()
        if args.realtime:
            loop.run()
        else:
            loop.run_for(args.seconds)
    finally:
        profiler.disable()

    placement = director.placement()
    snapshot = director.telemetry.snapshot()
    print(f"Level {level.name}: {placement.spawn_points_valid}/{placement.spawn_points} spawn points, "
          f"{placement.waypoints_valid}/{placement.waypoints} waypoints usable")
    print(f"Spawned {snapshot.spawned_total} actors over {snapshot.tick} ticks: {snapshot.spawned_by_archetype}")
    for tag in (settings.primary_archetype, settings.secondary_archetype):
        print(f"  alive {tag}: {registry.count_by_archetype(tag)}")

    if args.profile:
        stats_stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stats_stream)
        stats.strip_dirs().sort_stats("cumulative").print_stats(25)
        print("\nProfiler results (top 25 cumulative):")
        print(stats_stream.getvalue())


if __name__ == "__main__":
    main()
