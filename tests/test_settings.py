import json
import logging

import pytest

from horde.engine.logger import DEFAULT_CHANNELS, GameLogger, LoggerConfig
from horde.engine.settings import SpawnSettings


def test_missing_settings_file_uses_defaults(tmp_path) -> None:
    settings = SpawnSettings.from_settings(tmp_path / "settings.json")
    assert settings == SpawnSettings()
    assert settings.min_distance == 10.0
    assert settings.max_distance == 50.0
    assert settings.target_ratio == 0.5
    assert settings.spawn_cooldown == 1.5
    assert settings.waypoints_per_route == 5


def test_spawning_section_overrides_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "simHz": 30,
                "spawning": {
                    "maxCreatures": 24,
                    "targetRatio": 0.25,
                    "minDistance": 5,
                    "primaryArchetype": "runner",
                },
            }
        )
    )
    settings = SpawnSettings.from_settings(path)
    assert settings.population_cap == 24
    assert isinstance(settings.population_cap, int)
    assert settings.target_ratio == pytest.approx(0.25)
    assert settings.min_distance == pytest.approx(5.0)
    assert settings.primary_archetype == "runner"
    assert settings.secondary_archetype == "floater"
    assert settings.to_dict()["maxCreatures"] == 24


def test_invalid_json_falls_back_to_defaults(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert SpawnSettings.from_settings(path) == SpawnSettings()


@pytest.mark.parametrize(
    "overrides",
    [
        {"population_cap": 0},
        {"min_distance": 60.0},
        {"spawn_cooldown": -1.0},
        {"ground_offset_divisor": 0.0},
        {"secondary_archetype": "walker"},
    ],
)
def test_validate_rejects_inconsistent_values(overrides) -> None:
    with pytest.raises(ValueError):
        SpawnSettings(**overrides).validate()


def test_validate_returns_settings() -> None:
    settings = SpawnSettings()
    assert settings.validate() is settings


def test_logger_config_reads_level_and_channels(tmp_path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"logLevel": "debug", "logChannels": {"eligibility": True}}))
    config = LoggerConfig.from_settings(path)
    assert config.level == logging.DEBUG
    assert config.channels["eligibility"] is True
    assert config.channels["placement"] is DEFAULT_CHANNELS["placement"]


def test_unknown_channel_starts_disabled() -> None:
    logger = GameLogger(LoggerConfig(level=logging.CRITICAL, channels=dict(DEFAULT_CHANNELS)))
    assert not logger.channel("mystery").enabled
    logger.set_enabled("mystery", True)
    assert logger.channel("mystery").enabled
    assert "mystery" in logger.channels()


def test_logger_config_log_file_and_bad_level(tmp_path) -> None:
    config = LoggerConfig.from_dict({"logLevel": "chatty", "logFile": str(tmp_path / "spawn.log")})
    assert config.level == logging.INFO
    assert config.log_file == tmp_path / "spawn.log"
    assert config.channels == DEFAULT_CHANNELS


def test_null_value_keeps_default() -> None:
    settings = SpawnSettings.from_dict({"maxCreatures": None, "targetRatio": 0.75})
    assert settings.population_cap == 10
    assert settings.target_ratio == pytest.approx(0.75)


@pytest.mark.parametrize(
    "key, value",
    [
        ("waypointsPerRoute", 2.7),
        ("maxCreatures", "lots"),
        ("minDistance", "near"),
        ("maxCreatures", True),
        ("primaryArchetype", 3),
    ],
)
def test_malformed_value_names_the_key(key, value) -> None:
    with pytest.raises(ValueError, match=key):
        SpawnSettings.from_dict({key: value})


def test_whole_float_count_is_accepted() -> None:
    settings = SpawnSettings.from_dict({"waypointsPerRoute": 4.0, "population_cap": 12})
    assert settings.waypoints_per_route == 4
    assert isinstance(settings.waypoints_per_route, int)
    assert settings.population_cap == 12
