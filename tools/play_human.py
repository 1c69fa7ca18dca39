"""
Human Play Mode
================

Play Dairy-Free Donny interactively with the keyboard.

Controls:
    - Arrow keys: Move Donny
    - Click/Space: Advance (start, next level, restart after game over)
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--width WIDTH] [--height HEIGHT]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from dairy_free_donny.donny_core.clock import MonotonicClock
from dairy_free_donny.donny_core.config_loader import GameConfig, load_config
from dairy_free_donny.donny_core.food_catalog import FoodCatalog
from dairy_free_donny.donny_core.interfaces import Bounds, DrawSink, HeldKeys, DOWN, LEFT, RIGHT, UP
from dairy_free_donny.donny_core.render_solid import PLAYER_COLOR
from dairy_free_donny.donny_core.session import Session

SPRITES_DIR = Path(__file__).parent.parent / "assets" / "images"


class PygameKeyState:
    """Key-state provider reading pygame's pressed-key table."""

    KEYMAP = {
        UP: "K_UP",
        DOWN: "K_DOWN",
        LEFT: "K_LEFT",
        RIGHT: "K_RIGHT",
    }

    def snapshot(self) -> HeldKeys:
        pressed = pygame.key.get_pressed()
        return HeldKeys(frozenset(
            direction for direction, key_name in self.KEYMAP.items()
            if pressed[getattr(pygame, key_name)]
        ))


class PygameDrawSink(DrawSink):
    """
    Draw sink onto a pygame surface.

    Sprites are loaded from assets/images/<name>.png when present; otherwise
    a colored rectangle stands in for the sprite.
    """

    def __init__(self, config: GameConfig, screen: "pygame.Surface"):
        self._config = config
        self._screen = screen

        self._bg_color = (235, 245, 255)
        self._status_color = (210, 220, 235)
        self._text_color = (50, 50, 70)

        self._colors = FoodCatalog(config).sprite_colors()
        self._colors[config.player.sprite] = PLAYER_COLOR

        pygame.font.init()
        self._font = pygame.font.Font(None, 28)
        self._images: Dict[str, Optional["pygame.Surface"]] = {}
        self._scaled: Dict[Tuple[str, int, int], "pygame.Surface"] = {}

    def clear(self) -> None:
        board = self._config.board
        width, height = self._screen.get_size()
        self._screen.fill(self._bg_color)
        pygame.draw.rect(self._screen, self._status_color, (0, 0, width, board.status_margin_top))
        pygame.draw.rect(
            self._screen, self._status_color,
            (0, height - board.status_margin_bottom, width, board.status_margin_bottom)
        )

    def _load(self, sprite: str) -> Optional["pygame.Surface"]:
        if sprite not in self._images:
            path = SPRITES_DIR / f"{sprite}.png"
            image = None
            if path.exists():
                try:
                    image = pygame.image.load(str(path)).convert_alpha()
                except pygame.error as e:
                    print(f"Could not load sprite {path}: {e}")
            self._images[sprite] = image
        return self._images[sprite]

    def draw_sprite(self, sprite: str, x: float, y: float, width: float, height: float) -> None:
        w, h = int(width), int(height)
        image = self._load(sprite)
        if image is None:
            color = self._colors.get(sprite, (255, 0, 255))
            pygame.draw.rect(self._screen, color, (int(x), int(y), w, h), border_radius=8)
            return
        key = (sprite, w, h)
        if key not in self._scaled:
            self._scaled[key] = pygame.transform.smoothscale(image, (w, h))
        self._screen.blit(self._scaled[key], (int(x), int(y)))

    def draw_text(self, content: str, x: float, y: float, align: str = "left") -> None:
        surface = self._font.render(content, True, self._text_color)
        rect = surface.get_rect()
        # y is the text baseline, as on an HTML canvas
        if align == "center":
            rect.midbottom = (int(x), int(y))
        elif align == "right":
            rect.bottomright = (int(x), int(y))
        else:
            rect.bottomleft = (int(x), int(y))
        self._screen.blit(surface, rect)


class HumanPlayer:
    """Interactive game loop."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        window_width: Optional[int] = None,
        window_height: Optional[int] = None,
        target_fps: int = 60,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for human play mode")

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        width = window_width or config.board.width
        height = window_height or config.board.height

        pygame.init()
        self._screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("Dairy-Free Donny")
        self._pg_clock = pygame.time.Clock()

        self._clock = MonotonicClock()
        self._session = Session(config=config, seed=seed, debug=debug)
        self._keys = PygameKeyState()
        self._sink = PygameDrawSink(config, self._screen)
        self._running = True
        self._last_state = self._session.state

    def _bounds(self) -> Bounds:
        width, height = self._screen.get_size()
        return Bounds(width, height)

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Dairy-Free Donny ===")
        print("Arrow keys to move, click or Space to continue")
        print("R to restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()

            bounds = self._bounds()
            result = self._session.tick(self._keys.snapshot(), bounds, self._clock.now())
            for event in result.collisions:
                if event.allergic:
                    print(f"  Ate {event.food_name}! Tolerance: {self._session.player.allergy_tolerance}")
            self._report_state_change()

            self._sink.clear()
            self._session.draw(self._sink, bounds, self._clock.now())
            pygame.display.flip()
            self._pg_clock.tick(self._target_fps)

        pygame.quit()
        return self._session.score

    def _report_state_change(self) -> None:
        state = self._session.state
        if state is self._last_state:
            return
        self._last_state = state
        if self._session.game_over:
            print(f"\nGAME OVER ({self._session.termination_reason}) - Score: {self._session.score}")
        elif self._session.finished:
            print(f"\nALL LEVELS CLEARED - Score: {self._session.score}")

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_SPACE:
                    self._session.advance(self._clock.now(), self._bounds())

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._session.advance(self._clock.now(), self._bounds())

    def _restart(self) -> None:
        """Restart the game."""
        self._session.reset(seed=self._seed)
        self._last_state = self._session.state
        print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Dairy-Free Donny interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--width", type=int, default=None, help="Window width (default: board width)")
    parser.add_argument("--height", type=int, default=None, help="Window height (default: board height)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game config YAML")
    parser.add_argument("--debug", action="store_true", help="Print state transitions")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            window_width=args.width,
            window_height=args.height,
            target_fps=args.fps,
            debug=args.debug
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
