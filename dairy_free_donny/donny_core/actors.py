"""
Actors
======

The positioned rectangle shared by the player and every food item.
"""

from __future__ import annotations


def _spans_overlap(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    """
    One-axis overlap test.

    True when b's near edge or far edge falls inside a's span, or b's span
    covers a's span entirely (the case where b is larger than a).
    """
    return (
        (a_start <= b_start <= a_end)
        or (a_start <= b_end <= a_end)
        or (b_start <= a_start and b_end >= a_end)
    )


class Rect:
    """
    Axis-aligned rectangle with a horizontal speed and a sprite handle.

    Position is mutable; width and height are fixed at construction.
    """

    __slots__ = ("x", "y", "_width", "_height", "speed", "sprite")

    def __init__(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        speed: float = 0.0,
        sprite: str = ""
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Rect size must be positive, got {width}x{height}")
        self.x = float(x)
        self.y = float(y)
        self._width = float(width)
        self._height = float(height)
        self.speed = float(speed)
        self.sprite = sprite

    @property
    def width(self) -> float:
        return self._width

    @property
    def height(self) -> float:
        return self._height

    @property
    def right(self) -> float:
        return self.x + self._width

    @property
    def bottom(self) -> float:
        return self.y + self._height

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def overlaps(self, other: "Rect") -> bool:
        """True when both axes overlap. Touching edges count as overlap."""
        x_overlap = _spans_overlap(self.x, self.right, other.x, other.right)
        y_overlap = _spans_overlap(self.y, self.bottom, other.y, other.bottom)
        return x_overlap and y_overlap

    def __repr__(self) -> str:
        return (
            f"Rect({self.sprite!r} at ({self.x:.1f}, {self.y:.1f}) "
            f"{self._width:.0f}x{self._height:.0f})"
        )
