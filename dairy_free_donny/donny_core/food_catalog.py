"""
Food Catalog
============

Provides convenient access to food type definitions loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from dairy_free_donny.donny_core.config_loader import (
    FoodConfig,
    GameConfig,
    get_config
)


@dataclass
class FoodType:
    """
    Runtime representation of a food type.

    Wraps FoodConfig with allergen helpers.
    """
    config: FoodConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def sprite(self) -> str:
        return self.config.sprite

    @property
    def width(self) -> float:
        return self.config.width

    @property
    def height(self) -> float:
        return self.config.height

    @property
    def speed(self) -> float:
        return self.config.speed

    @property
    def points(self) -> int:
        return self.config.points

    @property
    def allergens(self) -> FrozenSet[str]:
        return self.config.allergens

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.config.color

    @property
    def is_allergen_free(self) -> bool:
        return not self.config.allergens

    def contains_any(self, tags: Iterable[str]) -> bool:
        """True if this food carries any of the given allergen tags."""
        return not self.config.allergens.isdisjoint(tags)

    def __repr__(self) -> str:
        return f"FoodType({self.id}: {self.name})"


class FoodCatalog:
    """All configured food types, indexed by id and by name."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._types: Tuple[FoodType, ...] = tuple(
            FoodType(food_config) for food_config in config.foods
        )
        self._by_name = {t.name: t for t in self._types}

    def __len__(self) -> int:
        return len(self._types)

    def __getitem__(self, food_id: int) -> FoodType:
        """Get food type by ID."""
        if 0 <= food_id < len(self._types):
            return self._types[food_id]
        raise IndexError(f"Food ID {food_id} out of range [0, {len(self._types)})")

    def __iter__(self):
        return iter(self._types)

    def by_name(self, name: str) -> FoodType:
        """
        Get food type by its config name.

        Raises:
            KeyError: If no food has that name.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown food: '{name}'") from None

    def safe_for(self, avoid: Iterable[str]) -> Tuple[FoodType, ...]:
        """Food types that carry none of the given allergens."""
        avoid = frozenset(avoid)
        return tuple(t for t in self._types if not t.contains_any(avoid))

    def sprite_colors(self) -> Dict[str, Tuple[int, int, int]]:
        """Map of sprite handle to RGB color, for renderers without images."""
        return {t.sprite: t.color for t in self._types}


# Module-level singleton
_cached_catalog: Optional[FoodCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> FoodCatalog:
    """
    Get the food catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        FoodCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = FoodCatalog(config)
    return _cached_catalog
