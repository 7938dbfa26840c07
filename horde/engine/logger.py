"""Spawner logging with per-subsystem channel toggles."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

# Per-tick channels start muted.
DEFAULT_CHANNELS = {
    "placement": True,
    "waypoints": True,
    "eligibility": False,
    "population": True,
    "routes": False,
    "level": True,
}

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class LoggerConfig:
    """Configuration for runtime logging."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())
    log_file: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggerConfig":
        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        channels.update({name: bool(enabled) for name, enabled in data.get("logChannels", {}).items()})
        log_file = data.get("logFile")
        return cls(level=level, channels=channels, log_file=Path(log_file) if log_file else None)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        return cls.from_dict(data)


class ChannelLogger:
    """Wrapper that only emits records when the channel is enabled."""

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled
        self._name = name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def _emit(self, level: int, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.ERROR, msg, *args, **kwargs)


class GameLogger:
    """Registry of spawner channels under the ``horde`` logger namespace."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(level=config.level, format=LOG_FORMAT, stream=sys.stdout)
        self._root = logging.getLogger("horde")
        self._root.setLevel(config.level)
        if config.log_file is not None:
            handler = logging.FileHandler(config.log_file, encoding="utf-8")
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self._root.addHandler(handler)
        self._channels: Dict[str, ChannelLogger] = {}
        for name, enabled in config.channels.items():
            self._channels[name] = self._make_channel(name, enabled)

    def _make_channel(self, name: str, enabled: bool) -> ChannelLogger:
        return ChannelLogger(name, self._root.getChild(name), enabled)

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            # Unknown channels start disabled until explicitly enabled.
            self._channels[name] = self._make_channel(name, False)
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def quiet_logger() -> GameLogger:
    """Logger with every channel muted, for tools and batch runs."""

    channels = {name: False for name in DEFAULT_CHANNELS}
    return GameLogger(LoggerConfig(level=logging.CRITICAL, channels=channels))


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Initialise a logger from settings.json."""

    settings_path = settings_path or Path("settings.json")
    return GameLogger(LoggerConfig.from_settings(settings_path))


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "init_logger",
    "quiet_logger",
]
