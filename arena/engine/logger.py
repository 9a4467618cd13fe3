"""Channelled logging for the rarity engine."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

DEFAULT_CHANNELS = {
    "rarity": True,
    "upgrades": False,
    "content": True,
}


@dataclass
class LoggerConfig:
    """Log level plus the on/off state of each channel."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=lambda: DEFAULT_CHANNELS.copy())

    @classmethod
    def from_dict(cls, data: Dict) -> "LoggerConfig":
        level_name = str(data.get("logLevel", "INFO")).upper()
        level = getattr(logging, level_name, logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
        channels = DEFAULT_CHANNELS.copy()
        for name, enabled in dict(data.get("logChannels", {})).items():
            channels[name] = bool(enabled)
        return cls(level=level, channels=channels)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)


class ChannelLogger:
    """One named channel such as ``rarity``, ``upgrades`` or ``content``.

    Records go to ``arena.<name>`` while the channel is on; a muted
    channel drops them before ``logging`` ever sees them.
    """

    def __init__(self, name: str, logger: logging.Logger, enabled: bool) -> None:
        self._name = name
        self._logger = logger
        self.enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    def _emit(self, level: int, msg: str, *args, **kwargs) -> None:
        if self.enabled:
            self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.ERROR, msg, *args, **kwargs)


def _channel(name: str, enabled: bool) -> ChannelLogger:
    return ChannelLogger(name, logging.getLogger(f"arena.{name}"), enabled)


def disabled_channel(name: str) -> ChannelLogger:
    """Muted channel for controllers and loaders built without a ``GameLogger``."""

    return _channel(name, False)


class GameLogger:
    """Channels handed to controllers (``rarity``, ``upgrades``) and content loading."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        logging.getLogger("arena").setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {
            name: _channel(name, enabled) for name, enabled in config.channels.items()
        }

    def channel(self, name: str) -> ChannelLogger:
        # Channels missing from settings stay muted until switched on.
        return self._channels.setdefault(name, disabled_channel(name))

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def init_logger(settings_path: Optional[Path] = None) -> GameLogger:
    """Build the channel registry from ``settings.json``."""

    settings_path = settings_path or Path("settings.json")
    config = LoggerConfig.from_settings(settings_path)
    return GameLogger(config)


__all__ = [
    "ChannelLogger",
    "DEFAULT_CHANNELS",
    "GameLogger",
    "LoggerConfig",
    "disabled_channel",
    "init_logger",
]
