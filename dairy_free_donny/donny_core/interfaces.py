"""
Collaborator Interfaces
=======================

The boundary between the simulation core and the outside world:

- key state: anything with ``is_held(key) -> bool`` for the four directions
- draw sink: ``draw_sprite(sprite, x, y, width, height)`` and
  ``draw_text(content, x, y, align)``
- bounds: the current play area size, passed into every tick
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Tuple

UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"

# Order matters: it is also the layout of the environment's action vector
DIRECTIONS: Tuple[str, ...] = (UP, DOWN, LEFT, RIGHT)


@dataclass(frozen=True)
class HeldKeys:
    """Immutable snapshot of the directional keys held during one tick."""
    keys: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, *keys: str) -> "HeldKeys":
        unknown = set(keys) - set(DIRECTIONS)
        if unknown:
            raise ValueError(f"Unknown direction(s): {sorted(unknown)}")
        return cls(frozenset(keys))

    @classmethod
    def from_flags(cls, flags: Iterable) -> "HeldKeys":
        """Build from a sequence of truthy values ordered like DIRECTIONS."""
        flags = list(flags)
        if len(flags) != len(DIRECTIONS):
            raise ValueError(f"Expected {len(DIRECTIONS)} key flags, got {len(flags)}")
        return cls(frozenset(d for d, held in zip(DIRECTIONS, flags) if held))

    def is_held(self, key: str) -> bool:
        return key in self.keys


NO_KEYS = HeldKeys()


@dataclass(frozen=True)
class Bounds:
    """Current play area size in pixels."""
    width: float
    height: float


class DrawSink:
    """
    Receiver for draw calls.

    The core supplies positions and text only; fonts, images and the canvas
    belong to the implementation.
    """

    def draw_sprite(self, sprite: str, x: float, y: float, width: float, height: float) -> None:
        raise NotImplementedError

    def draw_text(self, content: str, x: float, y: float, align: str = "left") -> None:
        raise NotImplementedError


class RecordingDrawSink(DrawSink):
    """Draw sink that keeps every call, for headless runs and tests."""

    def __init__(self):
        self.sprites: List[Tuple[str, float, float, float, float]] = []
        self.texts: List[Tuple[str, float, float, str]] = []

    def draw_sprite(self, sprite: str, x: float, y: float, width: float, height: float) -> None:
        self.sprites.append((sprite, x, y, width, height))

    def draw_text(self, content: str, x: float, y: float, align: str = "left") -> None:
        self.texts.append((content, x, y, align))

    def clear(self) -> None:
        self.sprites.clear()
        self.texts.clear()
