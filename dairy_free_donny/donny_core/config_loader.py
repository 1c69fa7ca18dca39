"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

import yaml


RELEASE_MODES = ("staggered", "random")


@dataclass(frozen=True)
class BoardConfig:
    """Play area geometry."""
    width: int                  # Initial play area width in pixels
    height: int                 # Initial play area height in pixels
    status_margin_top: int      # Rows reserved for status text at the top
    status_margin_bottom: int   # Rows reserved for level info at the bottom


@dataclass(frozen=True)
class TimingConfig:
    """Simulation timing."""
    frame_dt: float             # Simulated seconds per environment step


@dataclass(frozen=True)
class PlayerConfig:
    """Player sprite, movement and health parameters."""
    sprite: str
    width: float
    height: float
    spawn_x: float
    spawn_y: float
    speed: float
    hunger_start: int
    hunger_min: int
    full_max: int
    hunger_interval: float
    allergy_tolerance: int
    allergy_duration: float
    reactions: Tuple[str, ...]


@dataclass(frozen=True)
class FoodConfig:
    """Configuration for a single food type."""
    id: int
    name: str
    sprite: str
    width: float
    height: float
    speed: float
    points: int
    weight: int
    allergens: FrozenSet[str]
    color: Tuple[int, int, int]


@dataclass(frozen=True)
class LevelConfig:
    """Configuration for one level of the sequence."""
    name: str
    duration: float
    release_interval: float
    completion_grace: float
    release_mode: str
    avoid: FrozenSet[str]
    pool: Tuple[str, ...]       # Explicit food names; empty when pool_size is used
    pool_size: int              # Random pool length when no explicit pool is given
    food_speed: Optional[float] = None


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    points_per_interval: int
    score_interval: float


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits."""
    max_episode_steps: int
    max_foods: int              # Observation slots for food items


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    timing: TimingConfig
    player: PlayerConfig
    foods: Tuple[FoodConfig, ...]
    levels: Tuple[LevelConfig, ...]
    scoring: ScoringConfig
    caps: CapsConfig

    @property
    def num_food_types(self) -> int:
        """Total number of food types."""
        return len(self.foods)

    @property
    def num_levels(self) -> int:
        """Number of levels in the sequence."""
        return len(self.levels)

    @property
    def allergens(self) -> Tuple[str, ...]:
        """Every allergen tag used by any food, sorted."""
        tags = set()
        for food in self.foods:
            tags.update(food.allergens)
        return tuple(sorted(tags))

    def get_food(self, food_id: int) -> FoodConfig:
        """Get food config by ID."""
        if 0 <= food_id < len(self.foods):
            return self.foods[food_id]
        raise ValueError(f"Invalid food ID: {food_id}")


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_food(food_id: int, food_data: dict, defaults: dict) -> FoodConfig:
    """Parse a single food configuration from YAML."""
    return FoodConfig(
        id=food_id,
        name=str(food_data["name"]),
        sprite=str(food_data.get("sprite", food_data["name"])),
        width=float(food_data.get("width", defaults["width"])),
        height=float(food_data.get("height", defaults["height"])),
        speed=float(food_data.get("speed", defaults["speed"])),
        points=int(food_data.get("points", defaults.get("points", 1))),
        weight=int(food_data.get("weight", 1)),
        allergens=frozenset(str(tag) for tag in food_data.get("allergens", [])),
        color=_parse_color(food_data.get("color", [128, 128, 128]))
    )


def _parse_level(level_data: dict) -> LevelConfig:
    """Parse a single level configuration from YAML."""
    food_speed = level_data.get("food_speed")
    return LevelConfig(
        name=str(level_data["name"]),
        duration=float(level_data["duration"]),
        release_interval=float(level_data["release_interval"]),
        completion_grace=float(level_data.get("completion_grace", 0.0)),
        release_mode=str(level_data.get("release_mode", "staggered")),
        avoid=frozenset(str(tag) for tag in level_data.get("avoid", [])),
        pool=tuple(str(name) for name in level_data.get("pool", [])),
        pool_size=int(level_data.get("pool_size", 0)),
        food_speed=float(food_speed) if food_speed is not None else None
    )


def validate_level_config(level: LevelConfig) -> None:
    """
    Check a single level's timing and pool settings.

    Raises:
        ValueError: If the level could not be scheduled.
    """
    if level.duration <= 0:
        raise ValueError(f"Level '{level.name}': duration must be positive, got {level.duration}")
    if level.release_interval <= 0:
        raise ValueError(
            f"Level '{level.name}': release_interval must be positive, got {level.release_interval}"
        )
    if level.completion_grace < 0:
        raise ValueError(
            f"Level '{level.name}': completion_grace cannot be negative, got {level.completion_grace}"
        )
    if level.release_mode not in RELEASE_MODES:
        raise ValueError(
            f"Level '{level.name}': release_mode must be one of {RELEASE_MODES}, "
            f"got '{level.release_mode}'"
        )
    if not level.pool and level.pool_size <= 0:
        raise ValueError(f"Level '{level.name}': food pool is empty")


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if not config.foods:
        raise ValueError("At least one food must be configured")
    if not config.levels:
        raise ValueError("At least one level must be configured")

    # Food names are used as pool identifiers
    names: Dict[str, int] = {}
    for food in config.foods:
        if food.name in names:
            raise ValueError(f"Duplicate food name: '{food.name}'")
        names[food.name] = food.id
        if food.weight < 0:
            raise ValueError(f"Food '{food.name}': weight cannot be negative")

    player = config.player
    if not player.hunger_min <= player.hunger_start <= player.full_max:
        raise ValueError(
            f"hunger_start ({player.hunger_start}) must lie within "
            f"[{player.hunger_min}, {player.full_max}]"
        )
    if player.hunger_interval <= 0:
        raise ValueError(f"hunger_interval must be positive, got {player.hunger_interval}")
    if player.allergy_tolerance <= 0:
        raise ValueError(f"allergy_tolerance must be positive, got {player.allergy_tolerance}")
    if not player.reactions:
        raise ValueError("At least one allergic reaction text must be configured")

    board = config.board
    band = board.height - board.status_margin_top - board.status_margin_bottom
    if band < player.height:
        raise ValueError(
            f"Play band ({band}px) is shorter than the player ({player.height}px)"
        )

    for level in config.levels:
        validate_level_config(level)
        for name in level.pool:
            if name not in names:
                raise ValueError(f"Level '{level.name}': unknown food '{name}' in pool")
        pool_size = len(level.pool) if level.pool else level.pool_size
        if pool_size > config.caps.max_foods:
            raise ValueError(
                f"Level '{level.name}': pool of {pool_size} exceeds "
                f"caps.max_foods ({config.caps.max_foods})"
            )

    if config.scoring.score_interval <= 0:
        raise ValueError(f"score_interval must be positive, got {config.scoring.score_interval}")
    if config.timing.frame_dt <= 0:
        raise ValueError(f"frame_dt must be positive, got {config.timing.frame_dt}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        status_margin_top=int(board_data.get("status_margin_top", 0)),
        status_margin_bottom=int(board_data.get("status_margin_bottom", 0))
    )

    timing_data = raw.get("timing", {})
    timing = TimingConfig(
        frame_dt=float(timing_data.get("frame_dt", 1.0 / 60.0))
    )

    player_data = raw["player"]
    player = PlayerConfig(
        sprite=str(player_data.get("sprite", "donny")),
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        spawn_x=float(player_data["spawn_x"]),
        spawn_y=float(player_data["spawn_y"]),
        speed=float(player_data.get("speed", 4)),
        hunger_start=int(player_data["hunger_start"]),
        hunger_min=int(player_data.get("hunger_min", 0)),
        full_max=int(player_data["full_max"]),
        hunger_interval=float(player_data["hunger_interval"]),
        allergy_tolerance=int(player_data["allergy_tolerance"]),
        allergy_duration=float(player_data["allergy_duration"]),
        reactions=tuple(str(r) for r in player_data.get("reactions", []))
    )

    # Per-food values fall back to food_defaults
    defaults = raw.get("food_defaults", {"width": 50, "height": 60, "speed": -2})
    foods = tuple(
        _parse_food(i, f, defaults)
        for i, f in enumerate(raw["foods"])
    )

    levels = tuple(_parse_level(l) for l in raw["levels"])

    scoring_data = raw.get("scoring", {})
    scoring = ScoringConfig(
        points_per_interval=int(scoring_data.get("points_per_interval", 1)),
        score_interval=float(scoring_data.get("score_interval", 1.0))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_episode_steps=int(caps_data.get("max_episode_steps", 20000)),
        max_foods=int(caps_data.get("max_foods", 64))
    )

    config = GameConfig(
        board=board,
        timing=timing,
        player=player,
        foods=foods,
        levels=levels,
        scoring=scoring,
        caps=caps
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
