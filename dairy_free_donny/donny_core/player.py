"""
Player
======

Donny: keyboard-driven movement plus the hunger and allergy state machine.
"""

from __future__ import annotations

import random
from typing import Optional

from dairy_free_donny.donny_core.actors import Rect
from dairy_free_donny.donny_core.config_loader import BoardConfig, GameConfig, get_config
from dairy_free_donny.donny_core.interfaces import Bounds, DOWN, LEFT, RIGHT, UP


class Player:
    """
    The player-controlled actor.

    Hunger is a bounded counter: eating raises it, time lowers it, and the
    game ends at either bound. Allergy tolerance only ever goes down (until
    reset); the game ends once it reaches zero.

    All timed methods take ``now`` in seconds from the caller's clock.
    """

    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        """
        Initialize player at the configured spawn point.

        Args:
            config: Game configuration. Uses default if None.
            seed: Seed for the reaction-text RNG.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._player_cfg = config.player
        self._board: BoardConfig = config.board
        self._rng = random.Random(seed)

        cfg = self._player_cfg
        self.rect = Rect(
            cfg.spawn_x, cfg.spawn_y, cfg.width, cfg.height,
            speed=cfg.speed, sprite=cfg.sprite
        )

        self.hunger_level: int = cfg.hunger_start
        self.allergy_tolerance: int = cfg.allergy_tolerance
        self.allergy_duration: float = cfg.allergy_duration
        self.allergy_start: Optional[float] = None
        self.reaction_text: Optional[str] = None
        self._reaction_updated: bool = False
        self.last_hunger_decay: Optional[float] = None

    # Rect passthroughs so the player reads like an actor
    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def width(self) -> float:
        return self.rect.width

    @property
    def height(self) -> float:
        return self.rect.height

    @property
    def speed(self) -> float:
        return self.rect.speed

    @property
    def sprite(self) -> str:
        return self.rect.sprite

    @property
    def hunger_min(self) -> int:
        return self._player_cfg.hunger_min

    @property
    def full_max(self) -> int:
        return self._player_cfg.full_max

    def reseed(self, seed: Optional[int]) -> None:
        self._rng = random.Random(seed)

    def apply_movement(self, held_keys, bounds: Bounds) -> None:
        """
        Move one step for every held direction, clamped to the play band.

        The band is the bounds minus the status margins at the top and bottom.

        Args:
            held_keys: Key-state provider with ``is_held(key)``.
            bounds: Current play area size.
        """
        rect = self.rect
        step = rect.speed

        if held_keys.is_held(DOWN):
            rect.y += step
        if held_keys.is_held(UP):
            rect.y -= step
        if held_keys.is_held(RIGHT):
            rect.x += step
        if held_keys.is_held(LEFT):
            rect.x -= step

        min_y = self._board.status_margin_top
        max_y = bounds.height - self._board.status_margin_bottom - rect.height
        max_x = bounds.width - rect.width

        # Clamp even without input: the bounds may have shrunk
        rect.x = min(max(rect.x, 0.0), max(max_x, 0.0))
        rect.y = min(max(rect.y, min_y), max(max_y, min_y))

    def reset(self, now: Optional[float] = None) -> None:
        """
        Restore the start-of-level state.

        Args:
            now: Current time; restarts the hunger-decay timer. None leaves the
                timer unstarted until the first decrease_hunger() call.
        """
        cfg = self._player_cfg
        self.hunger_level = cfg.hunger_start
        self.allergy_tolerance = cfg.allergy_tolerance
        self.rect.move_to(cfg.spawn_x, cfg.spawn_y)
        self.last_hunger_decay = now
        self.allergy_start = None
        self.reaction_text = None
        self._reaction_updated = False

    def trigger_allergy(self, now: float) -> None:
        """Start a new allergic reaction window at ``now``."""
        self.allergy_start = now
        self._reaction_updated = False

    def has_allergic_reaction(self, now: float) -> bool:
        """True while ``now`` lies inside the current reaction window."""
        if self.allergy_start is None:
            return False
        return self.allergy_start <= now < self.allergy_start + self.allergy_duration

    def update_allergic_reaction(self) -> Optional[str]:
        """
        Pick the reaction text for the current window.

        Chooses once per trigger; later calls return the same text.
        """
        if self.allergy_start is None:
            return None
        if not self._reaction_updated:
            self.reaction_text = self._rng.choice(self._player_cfg.reactions)
            self._reaction_updated = True
        return self.reaction_text

    def decrease_hunger(self, now: float) -> bool:
        """
        Lose one hunger point if a full interval has passed since the last loss.

        Returns:
            True if hunger was decremented.
        """
        if self.last_hunger_decay is None:
            self.last_hunger_decay = now
            return False
        if now - self.last_hunger_decay < self._player_cfg.hunger_interval:
            return False

        self.hunger_level = max(self.hunger_min, self.hunger_level - 1)
        self.last_hunger_decay = now
        return True

    def increase_hunger(self) -> None:
        self.hunger_level = min(self.full_max, self.hunger_level + 1)

    def decrease_tolerance(self) -> None:
        # Not clamped: zero or below ends the game
        self.allergy_tolerance -= 1

    def too_full(self) -> bool:
        return self.hunger_level >= self.full_max

    def too_hungry(self) -> bool:
        return self.hunger_level <= self.hunger_min

    def check_hunger(self) -> bool:
        """True if hunger is at either bound."""
        return self.too_full() or self.too_hungry()

    def check_allergy_tolerance(self) -> bool:
        """True if tolerance is used up."""
        return self.allergy_tolerance <= 0

    def __repr__(self) -> str:
        return (
            f"Player(at=({self.x:.1f}, {self.y:.1f}), hunger={self.hunger_level}, "
            f"tolerance={self.allergy_tolerance})"
        )
