"""
Food Items
==========

Food actors drifting across the play area: release gating, collision with
the player, and recycling for reuse within a level.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional

from dairy_free_donny.donny_core.actors import Rect
from dairy_free_donny.donny_core.food_catalog import FoodType

STAGGERED = "staggered"
RANDOM = "random"

# Where eaten or departed food is parked in random-release mode
PARKED_POSITION = (-100.0, -100.0)


class FoodItem:
    """
    One food actor in a level's pool.

    Inert until the level's elapsed time passes ``release_time``, and again
    once parked. The ``collided`` flag latches on the first overlap with the
    player so one pass-through is counted once.
    """

    def __init__(
        self,
        food_type: FoodType,
        spawn_x: float,
        y: float,
        speed: Optional[float] = None,
        release_time: Optional[float] = None,
        release_mode: str = STAGGERED
    ):
        self.food_type = food_type
        self.rect = Rect(
            spawn_x, y, food_type.width, food_type.height,
            speed=food_type.speed if speed is None else speed,
            sprite=food_type.sprite
        )
        self.spawn_x = float(spawn_x)
        self.release_time = release_time
        self.release_mode = release_mode
        self.collided = False
        self.parked = False

    @property
    def name(self) -> str:
        return self.food_type.name

    @property
    def allergens(self) -> FrozenSet[str]:
        return self.food_type.allergens

    @property
    def points(self) -> int:
        return self.food_type.points

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

    def contains_any(self, tags: Iterable[str]) -> bool:
        return self.food_type.contains_any(tags)

    def is_active(self, elapsed: Optional[float]) -> bool:
        """True once the level's elapsed time has passed the release time."""
        if self.parked or elapsed is None or self.release_time is None:
            return False
        return elapsed > self.release_time

    def is_colliding(self, player) -> bool:
        """
        Axis-aligned overlap test against the player.

        Latches ``collided`` on the first overlap; it stays set until reset()
        even after the rectangles separate.
        """
        colliding = self.rect.overlaps(player.rect)
        if colliding and not self.collided:
            self.collided = True
        return colliding

    def is_off_screen(self) -> bool:
        """True once the item has drifted fully past the left edge."""
        return self.rect.right < 0

    def update(self) -> None:
        """Advance one tick: recycle if eaten or gone, else drift."""
        if self.collided or self.is_off_screen():
            self.recycle()
        else:
            self.rect.x += self.rect.speed

    def recycle(self) -> None:
        """
        Take the item out of play.

        Staggered items go back to the spawn edge, inert until the scheduler
        picks them again. Random-release items are parked off the play area.
        """
        if self.release_mode == STAGGERED:
            self.collided = False
            self.release_time = None
            self.rect.x = self.spawn_x
        else:
            self.rect.move_to(*PARKED_POSITION)
            self.parked = True

    def reset(self, y: float) -> None:
        """Clear the collision latch and return to the spawn edge at height ``y``."""
        self.collided = False
        self.parked = False
        self.rect.move_to(self.spawn_x, y)

    def __repr__(self) -> str:
        return (
            f"FoodItem({self.name} at ({self.x:.1f}, {self.y:.1f}), "
            f"release={self.release_time}, collided={self.collided})"
        )
