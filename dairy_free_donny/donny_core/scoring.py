"""
Scoring System
==============

Time-based score: a fixed number of points per interval of in-progress
simulation time, independent of how often the game is ticked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from dairy_free_donny.donny_core.config_loader import GameConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    source: str     # "time" or the name of the food eaten

    def __repr__(self) -> str:
        return f"ScoreEvent({self.source}={self.points})"


class ScoreTracker:
    """
    Tracks the session score.

    Time only counts between start() and pause(); ticks while paused, or the
    first tick after a start, add nothing.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._points_per_interval = config.scoring.points_per_interval
        self._interval = config.scoring.score_interval
        self._score: int = 0
        self._foods_eaten: int = 0
        self._last_time: Optional[float] = None
        self._carry: float = 0.0
        self._running: bool = False

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def foods_eaten(self) -> int:
        """Number of safe foods eaten this session."""
        return self._foods_eaten

    @property
    def running(self) -> bool:
        return self._running

    def start(self, now: float) -> None:
        """Begin accruing time from ``now``."""
        self._running = True
        self._last_time = now

    def pause(self) -> None:
        """Stop accruing time; the partial interval is kept."""
        self._running = False
        self._last_time = None

    def update(self, now: float) -> int:
        """
        Accrue points for the time since the previous update.

        Returns:
            Points added by this call.
        """
        if not self._running:
            return 0
        if self._last_time is None:
            self._last_time = now
            return 0

        self._carry += max(0.0, now - self._last_time)
        self._last_time = now

        intervals = int(self._carry // self._interval)
        if intervals <= 0:
            return 0
        self._carry -= intervals * self._interval
        points = intervals * self._points_per_interval
        self._score += points
        return points

    def apply_food(self, food_name: str, points: int) -> ScoreEvent:
        """Add the bonus for eating a safe food."""
        self._score += points
        self._foods_eaten += 1
        return ScoreEvent(points=points, source=food_name)

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._foods_eaten = 0
        self._last_time = None
        self._carry = 0.0
        self._running = False
