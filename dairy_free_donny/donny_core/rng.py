"""
RNG - Weighted Shuffle-Bag
==========================

Deterministic food selection for levels that ask for a random pool, with
reduced variance through a weighted shuffle-bag.
"""

from __future__ import annotations

import random
from typing import List, Optional

from dairy_free_donny.donny_core.config_loader import GameConfig, get_config


class FoodBag:
    """
    Weighted shuffle-bag of food IDs.

    The bag holds every food ID repeated by its weight. When the bag is
    exhausted it is refilled and reshuffled, so over one bag every food
    appears exactly as often as its weight says.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize food bag.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)

        self._bag_template: List[int] = []
        for food in config.foods:
            self._bag_template.extend([food.id] * food.weight)
        if not self._bag_template:
            raise ValueError("Food bag is empty: every food has weight 0")

        self._bag: List[int] = []
        self._index: int = 0
        self._refill_bag()

    def _refill_bag(self) -> None:
        """Refill and shuffle the bag."""
        self._bag = self._bag_template.copy()
        self._rng.shuffle(self._bag)
        self._index = 0

    @property
    def bag_size(self) -> int:
        return len(self._bag_template)

    def draw(self) -> int:
        """Take the next food ID from the bag."""
        if self._index >= len(self._bag):
            self._refill_bag()
        food_id = self._bag[self._index]
        self._index += 1
        return food_id

    def draw_many(self, count: int) -> List[int]:
        return [self.draw() for _ in range(count)]

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the bag with optional new seed.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
        self._refill_bag()
