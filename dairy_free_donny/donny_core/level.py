"""
Level
=====

One timed level: owns the food pool, staggers food release over time,
resolves collisions against the player and reports completion.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from dairy_free_donny.donny_core.config_loader import (
    GameConfig,
    LevelConfig,
    get_config,
    validate_level_config
)
from dairy_free_donny.donny_core.food import RANDOM, STAGGERED, FoodItem
from dairy_free_donny.donny_core.food_catalog import FoodCatalog, FoodType, get_catalog
from dairy_free_donny.donny_core.interfaces import Bounds, DrawSink
from dairy_free_donny.donny_core.player import Player
from dairy_free_donny.donny_core.rng import FoodBag


@dataclass
class CollisionEvent:
    """A food item the player ran into this tick."""
    food_name: str
    allergic: bool
    points: int


class Level:
    """
    A single level of the game.

    Per tick (see update()):
    1. Move the player from the held keys
    2. Release the next food if the release interval has passed
    3. Advance every active food item
    4. Resolve collisions and update the player's hunger and tolerance

    Food release has two modes. "staggered" releases one pool item per
    release interval, cycling through the pool. "random" gives every item a
    random release time within the level duration when the level starts.
    """

    def __init__(
        self,
        level_config: LevelConfig,
        player: Player,
        config: Optional[GameConfig] = None,
        catalog: Optional[FoodCatalog] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize level.

        Args:
            level_config: This level's settings.
            player: The session's player, shared by every level.
            config: Game configuration. Uses default if None.
            catalog: Food catalog. Built from config if None.
            seed: Random seed for pool generation and spawn heights.

        Raises:
            ValueError: If the level's timing or pool settings are unusable.
            KeyError: If the pool names an unknown food.
        """
        if config is None:
            config = get_config()
        validate_level_config(level_config)

        self._config = config
        self._level_cfg = level_config
        self._catalog = catalog if catalog is not None else get_catalog(config)
        self._board = config.board
        self._rng = random.Random(seed)
        self.player = player

        self._pool_types: Tuple[FoodType, ...] = self._resolve_pool(seed)

        self.pool: List[FoodItem] = []
        self.start_time: Optional[float] = None
        self.release_cursor: int = 0
        self.last_release: Optional[float] = None
        self._generated: bool = False

    @property
    def name(self) -> str:
        return self._level_cfg.name

    @property
    def duration(self) -> float:
        return self._level_cfg.duration

    @property
    def release_interval(self) -> float:
        return self._level_cfg.release_interval

    @property
    def completion_grace(self) -> float:
        return self._level_cfg.completion_grace

    @property
    def release_mode(self) -> str:
        return self._level_cfg.release_mode

    @property
    def avoid(self) -> FrozenSet[str]:
        """Allergen tags this level penalizes."""
        return self._level_cfg.avoid

    @property
    def pool_types(self) -> Tuple[FoodType, ...]:
        return self._pool_types

    @property
    def started(self) -> bool:
        return self.start_time is not None

    def _resolve_pool(self, seed: Optional[int]) -> Tuple[FoodType, ...]:
        """Food types for the pool: the named list, or a weighted draw."""
        if self._level_cfg.pool:
            return tuple(self._catalog.by_name(name) for name in self._level_cfg.pool)
        bag = FoodBag(self._config, seed)
        return tuple(self._catalog[food_id] for food_id in bag.draw_many(self._level_cfg.pool_size))

    def time_elapsed(self, now: float) -> Optional[float]:
        """Seconds since the level started, or None before the first start."""
        if self.start_time is None:
            return None
        return now - self.start_time

    def time_remaining(self, now: float) -> float:
        elapsed = self.time_elapsed(now)
        if elapsed is None:
            return self.duration
        return max(0.0, self.duration - elapsed)

    def is_completed(self, now: float) -> bool:
        """True once elapsed time passes the duration plus the grace period."""
        elapsed = self.time_elapsed(now)
        if elapsed is None:
            return False
        return elapsed > self.duration + self.completion_grace

    def is_in_progress(self, now: float) -> bool:
        return self.started and not self.is_completed(now)

    def _random_y(self, bounds: Bounds, height: float) -> float:
        """Random top edge that keeps an item of ``height`` inside the play band."""
        min_y = self._board.status_margin_top
        max_y = bounds.height - self._board.status_margin_bottom - height
        if max_y <= min_y:
            return float(min_y)
        return self._rng.uniform(min_y, max_y)

    def _random_release_time(self) -> Optional[float]:
        if self.release_mode == RANDOM:
            return self._rng.uniform(0.0, self.duration)
        return None

    def _generate_pool(self, bounds: Bounds) -> None:
        """Create one FoodItem per pool entry, waiting at the right edge."""
        speed = self._level_cfg.food_speed
        self.pool = [
            FoodItem(
                food_type,
                spawn_x=bounds.width,
                y=self._random_y(bounds, food_type.height),
                speed=speed,
                release_time=self._random_release_time(),
                release_mode=self.release_mode
            )
            for food_type in self._pool_types
        ]
        self._generated = True

    def start_level(self, now: float, bounds: Bounds) -> None:
        """
        Start, or restart, the level at ``now``.

        The first start generates the food pool; later starts reset every
        item instead. The release schedule and the player are reset either way.
        """
        if not self._generated:
            self._generate_pool(bounds)
        else:
            for item in self.pool:
                item.spawn_x = float(bounds.width)
                item.reset(self._random_y(bounds, item.height))
                item.release_time = self._random_release_time()

        self.release_cursor = 0
        self.last_release = None
        self.player.reset(now)
        self.start_time = now

    def reset(self) -> None:
        """Forget the start time and release schedule; the pool is kept."""
        self.start_time = None
        self.release_cursor = 0
        self.last_release = None

    def reseed(self, seed: Optional[int]) -> None:
        """
        Reseed spawn heights and release times.

        A randomly drawn pool is redrawn from the new seed and regenerated on
        the next start; a named pool keeps its foods.
        """
        self._rng = random.Random(seed)
        if not self._level_cfg.pool:
            self._pool_types = self._resolve_pool(seed)
            self.pool = []
            self._generated = False

    def release_next_food(self, now: float, bounds: Bounds) -> Optional[FoodItem]:
        """
        Release the pool item under the cursor if the release interval has passed.

        Only used in staggered mode. The cursor wraps so a small pool keeps
        supplying food for the whole level.

        Returns:
            The released item, or None if nothing was due.
        """
        if self.release_mode != STAGGERED or self.start_time is None or not self.pool:
            return None
        if self.last_release is not None and now - self.last_release < self.release_interval:
            return None

        item = self.pool[self.release_cursor]
        item.spawn_x = float(bounds.width)
        item.reset(self._random_y(bounds, item.height))
        item.release_time = self.time_elapsed(now)

        self.release_cursor = (self.release_cursor + 1) % len(self.pool)
        self.last_release = now
        return item

    def active_foods(self, now: float) -> List[FoodItem]:
        elapsed = self.time_elapsed(now)
        return [item for item in self.pool if item.is_active(elapsed)]

    def update(self, held_keys, bounds: Bounds, now: float) -> List[CollisionEvent]:
        """
        Advance the level by one tick.

        Args:
            held_keys: Key-state provider with ``is_held(key)``.
            bounds: Current play area size.
            now: Current time in seconds.

        Returns:
            Collisions resolved this tick.
        """
        if self.start_time is None:
            return []

        self.player.apply_movement(held_keys, bounds)
        self.release_next_food(now, bounds)

        for item in self.active_foods(now):
            item.update()

        return self.update_player_status(now)

    def update_player_status(self, now: float) -> List[CollisionEvent]:
        """
        Apply this tick's collisions to the player, then hunger decay.

        A collision with food carrying an avoided allergen costs one point of
        tolerance and starts a reaction; any other collision counts as eating.
        Items already latched as collided are skipped.
        """
        events: List[CollisionEvent] = []
        for item in self.active_foods(now):
            already_collided = item.collided
            if not item.is_colliding(self.player) or already_collided:
                continue

            allergic = item.contains_any(self.avoid)
            if allergic:
                self.player.decrease_tolerance()
                self.player.trigger_allergy(now)
            else:
                self.player.increase_hunger()
            events.append(CollisionEvent(item.name, allergic, item.points))

        self.player.decrease_hunger(now)
        return events

    def draw(self, sink: DrawSink, bounds: Bounds, now: float) -> None:
        """Draw the player, visible food and status lines."""
        player = self.player
        sink.draw_sprite(player.sprite, player.x, player.y, player.width, player.height)

        for item in self.active_foods(now):
            if item.is_off_screen():
                continue
            sink.draw_sprite(item.sprite, item.x, item.y, item.width, item.height)

        sink.draw_text(f"Hunger: {player.hunger_level}/{player.full_max}", 10, 25)
        sink.draw_text(f"Tolerance: {player.allergy_tolerance}", 10, 50)
        sink.draw_text(f"Time: {self.time_remaining(now):.0f}s", bounds.width - 10, 25, "right")

        avoid = ", ".join(sorted(self.avoid)) or "nothing"
        sink.draw_text(f"{self.name} - avoid {avoid}", 10, bounds.height - 10)

        if player.has_allergic_reaction(now):
            text = player.update_allergic_reaction()
            sink.draw_text(text, player.x + player.width / 2, player.y - 10, "center")

    def __repr__(self) -> str:
        return f"Level({self.name!r}, pool={len(self._pool_types)}, mode={self.release_mode})"
