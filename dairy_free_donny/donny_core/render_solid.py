"""
Solid Renderer
==============

Fast numpy-based draw sink that paints every sprite as a solid-color
rectangle. Text calls are collected rather than rasterized.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from dairy_free_donny.donny_core.config_loader import GameConfig, get_config
from dairy_free_donny.donny_core.food_catalog import FoodCatalog
from dairy_free_donny.donny_core.interfaces import DrawSink

# The player has no food entry, so its colour lives here
PLAYER_COLOR = (60, 120, 220)


class ArrayDrawSink(DrawSink):
    """
    Draw sink backed by an (height, width, 3) uint8 array.

    Uses numpy for fast CPU-based rendering without pygame.
    """

    def __init__(
        self,
        width: int,
        height: int,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize renderer.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            config: Game configuration, for sprite colors. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._width = int(width)
        self._height = int(height)

        self._bg_color = np.array([235, 245, 255], dtype=np.uint8)
        self._status_color = np.array([210, 220, 235], dtype=np.uint8)
        self._unknown_color = (255, 0, 255)

        self._colors = FoodCatalog(config).sprite_colors()
        self._colors[config.player.sprite] = PLAYER_COLOR

        self.image = np.zeros((self._height, self._width, 3), dtype=np.uint8)
        self.texts: List[Tuple[str, float, float, str]] = []
        self.clear()

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.image.shape

    def clear(self) -> None:
        """Paint the background and status bands, drop collected text."""
        board = self._config.board
        self.image[:] = self._bg_color
        self.image[:board.status_margin_top] = self._status_color
        if board.status_margin_bottom > 0:
            self.image[self._height - board.status_margin_bottom:] = self._status_color
        self.texts = []

    def draw_sprite(self, sprite: str, x: float, y: float, width: float, height: float) -> None:
        # Clip to the image; fully off-screen sprites draw nothing
        x0 = max(0, int(round(x)))
        y0 = max(0, int(round(y)))
        x1 = min(self._width, int(round(x + width)))
        y1 = min(self._height, int(round(y + height)))
        if x0 >= x1 or y0 >= y1:
            return
        color = self._colors.get(sprite, self._unknown_color)
        self.image[y0:y1, x0:x1] = np.array(color, dtype=np.uint8)

    def draw_text(self, content: str, x: float, y: float, align: str = "left") -> None:
        self.texts.append((content, x, y, align))

    def to_array(self) -> np.ndarray:
        """Copy of the current image."""
        return self.image.copy()
