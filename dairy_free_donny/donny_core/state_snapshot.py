"""
State Snapshot
==============

Packs session state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np

from dairy_free_donny.donny_core.config_loader import GameConfig, get_config
from dairy_free_donny.donny_core.interfaces import Bounds

if TYPE_CHECKING:
    from dairy_free_donny.donny_core.session import Session


@dataclass
class GameSnapshot:
    """
    Complete session state snapshot.

    Food arrays are fixed-size with a mask for the items currently in play.
    """
    # Player state
    player_x: float
    player_y: float
    player_width: float
    player_height: float
    hunger: int
    tolerance: int
    allergic_reaction: bool

    # Session state
    level_index: int
    time_remaining: float
    score: int

    # Board info (for normalization)
    board_width: float
    board_height: float

    # Food arrays (fixed size, padded)
    food_x: np.ndarray                # (MAX_FOODS,) float32
    food_y: np.ndarray                # (MAX_FOODS,) float32
    food_width: np.ndarray            # (MAX_FOODS,) float32
    food_height: np.ndarray           # (MAX_FOODS,) float32
    food_speed: np.ndarray            # (MAX_FOODS,) float32
    food_allergic: np.ndarray         # (MAX_FOODS,) bool, carries an avoided allergen
    food_mask: np.ndarray             # (MAX_FOODS,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "player_x": np.array(self.player_x, dtype=np.float32),
            "player_y": np.array(self.player_y, dtype=np.float32),
            "player_width": np.array(self.player_width, dtype=np.float32),
            "player_height": np.array(self.player_height, dtype=np.float32),
            "hunger": np.array(self.hunger, dtype=np.int32),
            "tolerance": np.array(self.tolerance, dtype=np.int32),
            "allergic_reaction": np.array(self.allergic_reaction, dtype=np.int8),
            "level_index": np.array(self.level_index, dtype=np.int32),
            "time_remaining": np.array(self.time_remaining, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "board_width": np.array(self.board_width, dtype=np.float32),
            "board_height": np.array(self.board_height, dtype=np.float32),
            "food_x": self.food_x,
            "food_y": self.food_y,
            "food_width": self.food_width,
            "food_height": self.food_height,
            "food_speed": self.food_speed,
            "food_allergic": self.food_allergic.astype(np.int8),
            "food_mask": self.food_mask.astype(np.int8),
        }


class SnapshotBuilder:
    """Builds session snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_foods = config.caps.max_foods

        self._food_x = np.zeros(self._max_foods, dtype=np.float32)
        self._food_y = np.zeros(self._max_foods, dtype=np.float32)
        self._food_width = np.zeros(self._max_foods, dtype=np.float32)
        self._food_height = np.zeros(self._max_foods, dtype=np.float32)
        self._food_speed = np.zeros(self._max_foods, dtype=np.float32)
        self._food_allergic = np.zeros(self._max_foods, dtype=bool)
        self._food_mask = np.zeros(self._max_foods, dtype=bool)

    @property
    def max_foods(self) -> int:
        return self._max_foods

    def build(self, session: "Session", bounds: Bounds, now: float) -> GameSnapshot:
        """
        Build a snapshot of the session at ``now``.

        Args:
            session: The session to read.
            bounds: Current play area size.
            now: Current time in seconds.

        Returns:
            GameSnapshot with copies of the food arrays.
        """
        self._food_x.fill(0)
        self._food_y.fill(0)
        self._food_width.fill(0)
        self._food_height.fill(0)
        self._food_speed.fill(0)
        self._food_allergic.fill(False)
        self._food_mask.fill(False)

        player = session.player
        level = session.current_level

        if session.in_progress:
            active = level.active_foods(now)[:self._max_foods]
            for i, item in enumerate(active):
                self._food_x[i] = item.x
                self._food_y[i] = item.y
                self._food_width[i] = item.width
                self._food_height[i] = item.height
                self._food_speed[i] = item.speed
                self._food_allergic[i] = item.contains_any(level.avoid)
                self._food_mask[i] = not item.collided

        return GameSnapshot(
            player_x=player.x,
            player_y=player.y,
            player_width=player.width,
            player_height=player.height,
            hunger=player.hunger_level,
            tolerance=player.allergy_tolerance,
            allergic_reaction=player.has_allergic_reaction(now),
            level_index=session.level_index,
            time_remaining=level.time_remaining(now),
            score=session.score,
            board_width=bounds.width,
            board_height=bounds.height,
            food_x=self._food_x.copy(),
            food_y=self._food_y.copy(),
            food_width=self._food_width.copy(),
            food_height=self._food_height.copy(),
            food_speed=self._food_speed.copy(),
            food_allergic=self._food_allergic.copy(),
            food_mask=self._food_mask.copy()
        )
