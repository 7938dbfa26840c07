"""Spawner tuning loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict

# JSON keys follow the camelCase convention used by settings.json.
_JSON_KEYS: Dict[str, str] = {
    "min_distance": "minDistance",
    "max_distance": "maxDistance",
    "population_cap": "maxCreatures",
    "target_ratio": "targetRatio",
    "spawn_cooldown": "spawnCooldown",
    "waypoints_per_route": "waypointsPerRoute",
    "capsule_radius": "capsuleRadius",
    "capsule_half_height": "capsuleHalfHeight",
    "max_cast_length": "maxCastLength",
    "waypoint_ray_distance": "waypointRayDistance",
    "ground_offset_divisor": "groundOffsetDivisor",
    "primary_archetype": "primaryArchetype",
    "secondary_archetype": "secondaryArchetype",
    "sim_hz": "simHz",
}


def _coerce(key: str, raw: Any, default: Any) -> Any:
    """Convert a JSON value to the type of ``default`` or raise naming ``key``."""

    if isinstance(default, str):
        if not isinstance(raw, str):
            raise ValueError(f"{key} must be a string, got {raw!r}")
        return raw
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValueError(f"{key} must be a number, got {raw!r}")
    if isinstance(default, int):
        if not float(raw).is_integer():
            raise ValueError(f"{key} must be a whole number, got {raw!r}")
        return int(raw)
    return float(raw)


@dataclass
class SpawnSettings:
    """Static configuration consumed before the first tick."""

    min_distance: float = 10.0
    max_distance: float = 50.0
    population_cap: int = 10
    target_ratio: float = 0.5
    spawn_cooldown: float = 1.5
    waypoints_per_route: int = 5
    capsule_radius: float = 0.5
    capsule_half_height: float = 1.0
    max_cast_length: float = 500.0
    waypoint_ray_distance: float = 10.0
    ground_offset_divisor: float = 10.0
    primary_archetype: str = "walker"
    secondary_archetype: str = "floater"
    sim_hz: float = 60.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SpawnSettings":
        defaults = cls()
        values: Dict[str, Any] = {}
        for item in fields(cls):
            key = _JSON_KEYS[item.name]
            if key not in data and item.name in data:
                key = item.name
            default = getattr(defaults, item.name)
            raw = data.get(key)
            # null behaves like an absent key.
            values[item.name] = default if raw is None else _coerce(key, raw, default)
        return cls(**values)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "SpawnSettings":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        section = data.get("spawning", {})
        if not isinstance(section, dict):
            return cls()
        return cls.from_dict(section)

    def validate(self) -> "SpawnSettings":
        if self.population_cap <= 0:
            raise ValueError("maxCreatures must be positive")
        if self.min_distance < 0.0 or self.min_distance >= self.max_distance:
            raise ValueError("minDistance must be non-negative and below maxDistance")
        if self.target_ratio < 0.0:
            raise ValueError("targetRatio cannot be negative")
        if self.spawn_cooldown < 0.0:
            raise ValueError("spawnCooldown cannot be negative")
        if self.waypoints_per_route < 0:
            raise ValueError("waypointsPerRoute cannot be negative")
        if self.capsule_radius <= 0.0 or self.capsule_half_height < 0.0:
            raise ValueError("capsule dimensions must be positive")
        if self.max_cast_length <= 0.0 or self.waypoint_ray_distance <= 0.0:
            raise ValueError("query ranges must be positive")
        if self.ground_offset_divisor <= 0.0:
            raise ValueError("groundOffsetDivisor must be positive")
        if self.primary_archetype == self.secondary_archetype:
            raise ValueError("primary and secondary archetypes must differ")
        if self.sim_hz <= 0.0:
            raise ValueError("simHz must be positive")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {_JSON_KEYS[name]: value for name, value in asdict(self).items()}


__all__ = ["SpawnSettings"]
