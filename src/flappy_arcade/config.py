"""
config.py: Typed, immutable game configuration with optional YAML overrides.

Defaults come from constants.py. A YAML file may override any field by name:

    initial_gap: 300
    obstacle_speed: 2.5
    db_file: /tmp/scores.db
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

import yaml

from . import constants as C
from .errors import ConfigError


@dataclass(frozen=True)
class GameConfig:
    """All tunables of a game session. Values never change at runtime."""

    # Play area and entity
    screen_width: float = C.SCREEN_WIDTH
    screen_height: float = C.SCREEN_HEIGHT
    entity_start_x: float = C.ENTITY_START_X
    entity_start_y: float = C.ENTITY_START_Y
    entity_width: float = C.ENTITY_WIDTH
    entity_height: float = C.ENTITY_HEIGHT

    # Physics
    gravity: float = C.GRAVITY
    flap_impulse: float = C.FLAP_IMPULSE

    # Obstacles
    obstacle_width: float = C.OBSTACLE_WIDTH
    obstacle_speed: float = C.OBSTACLE_SPEED
    spawn_interval: float = C.OBSTACLE_SPAWN_INTERVAL
    initial_gap: float = C.INITIAL_GAP
    minimum_gap: float = C.MINIMUM_GAP
    gap_decrease_per_point: float = C.GAP_DECREASE_PER_POINT
    min_top_height: float = C.MIN_TOP_HEIGHT
    bottom_margin: float = C.BOTTOM_MARGIN

    # Timing
    tick_rate: int = C.TICK_RATE
    max_frame_time: float = C.MAX_FRAME_TIME
    countdown_start: int = C.COUNTDOWN_START
    countdown_interval: float = C.COUNTDOWN_INTERVAL

    # Leaderboard
    leaderboard_size: int = C.LEADERBOARD_SIZE
    db_file: str = C.DB_FILE
    leaderboard_key: str = C.LEADERBOARD_KEY

    @property
    def tick_time(self) -> float:
        return 1.0 / self.tick_rate

    @property
    def start_position(self) -> tuple[float, float]:
        return (self.entity_start_x, self.entity_start_y)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not config.initial_gap > config.minimum_gap > 0:
        raise ConfigError(
            f"Gaps must satisfy initial_gap > minimum_gap > 0, "
            f"got {config.initial_gap} and {config.minimum_gap}")

    if config.gap_decrease_per_point < 0:
        raise ConfigError("gap_decrease_per_point must not be negative")

    for name in ("screen_width", "screen_height", "entity_width", "entity_height",
                 "obstacle_width", "spawn_interval", "countdown_interval",
                 "max_frame_time"):
        if getattr(config, name) <= 0:
            raise ConfigError(f"{name} must be positive, got {getattr(config, name)}")

    if config.tick_rate < 1:
        raise ConfigError(f"tick_rate must be at least 1, got {config.tick_rate}")
    if config.countdown_start < 1:
        raise ConfigError(f"countdown_start must be at least 1, got {config.countdown_start}")
    if config.leaderboard_size < 1:
        raise ConfigError(f"leaderboard_size must be at least 1, got {config.leaderboard_size}")
    if not config.leaderboard_key:
        raise ConfigError("leaderboard_key must not be empty")


def _coerce(key: str, field_type: type, value):
    """Converts one override to its field's type without losing information."""
    if value is None or isinstance(value, bool):
        raise ConfigError(f"Bad value for {key}: {value!r}")

    if field_type is str:
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be text, got {value!r}")
        return value

    if field_type is int and isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{key} must be a whole number, got {value!r}")

    try:
        return field_type(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Bad value for {key}: {value!r}") from e


def make_config(**overrides) -> GameConfig:
    """Build a validated config from the defaults plus keyword overrides."""
    known = {f.name: f for f in fields(GameConfig)}
    unknown = sorted(set(overrides) - set(known))
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    coerced = {key: _coerce(key, known[key].type, value) for key, value in overrides.items()}

    config = replace(GameConfig(), **coerced)
    _validate_config(config)
    return config


def load_config(config_path: Optional[Union[str, Path]] = None) -> GameConfig:
    """
    Load game configuration, applying overrides from a YAML file.

    Args:
        config_path: Path to a YAML mapping of overrides. If None, the defaults
            are returned unchanged.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ConfigError: If a key is unknown or a value fails validation.
    """
    if config_path is None:
        return make_config()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must hold a mapping, got {type(raw).__name__}")
    return make_config(**raw)
