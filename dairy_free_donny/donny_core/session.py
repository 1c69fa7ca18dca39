"""
Session
=======

Main game orchestrator: the level sequence, score and the screen-flow state
machine driven by an external advance signal and per-frame ticks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from dairy_free_donny.donny_core.config_loader import GameConfig, get_config
from dairy_free_donny.donny_core.food_catalog import FoodCatalog, get_catalog
from dairy_free_donny.donny_core.interfaces import Bounds, DrawSink
from dairy_free_donny.donny_core.level import CollisionEvent, Level
from dairy_free_donny.donny_core.player import Player
from dairy_free_donny.donny_core.rules import GameOverRules, TerminationResult
from dairy_free_donny.donny_core.scoring import ScoreTracker


class SessionState(Enum):
    """Coarse screen-flow state."""
    NOT_STARTED = auto()
    LEVEL_INTRO = auto()
    IN_PROGRESS = auto()
    GAME_OVER = auto()
    FINISHED = auto()


@dataclass
class TickResult:
    """Result of a single session tick."""
    state: SessionState
    delta_score: int
    collisions: List[CollisionEvent] = field(default_factory=list)
    termination_reason: str = ""
    level_completed: bool = False


class Session:
    """
    Main game session.

    Orchestrates:
    - Player (shared by all levels)
    - Level sequence and the current-level cursor
    - Scoring
    - Game-over rules

    State flow:
        NOT_STARTED -> LEVEL_INTRO -> IN_PROGRESS -> LEVEL_INTRO (next level)
                                                  -> FINISHED (after the last level)
                                                  -> GAME_OVER
        GAME_OVER / FINISHED -> NOT_STARTED on the next advance signal

    Usage:
        session = Session(seed=42)
        session.advance(now)    # show first level intro
        session.advance(now)    # start playing
        while session.in_progress:
            session.tick(held_keys, bounds, clock.now())
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        debug: bool = False
    ):
        """
        Initialize session.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for pools, spawn heights and reaction text.
            debug: If True, print state transitions.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._debug = debug

        self._catalog = get_catalog(config)
        self._player = Player(config, seed=seed)
        self._scorer = ScoreTracker(config)
        self._rules = GameOverRules()
        self._levels: Tuple[Level, ...] = tuple(
            Level(
                level_cfg,
                self._player,
                config=config,
                catalog=self._catalog,
                seed=None if seed is None else seed + i
            )
            for i, level_cfg in enumerate(config.levels)
        )

        self._state = SessionState.NOT_STARTED
        self._level_index: int = 0
        self._termination_reason: str = ""
        self._bounds = Bounds(config.board.width, config.board.height)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def catalog(self) -> FoodCatalog:
        return self._catalog

    @property
    def player(self) -> Player:
        return self._player

    @property
    def levels(self) -> Tuple[Level, ...]:
        return self._levels

    @property
    def level_index(self) -> int:
        return self._level_index

    @property
    def current_level(self) -> Level:
        return self._levels[self._level_index]

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def in_progress(self) -> bool:
        return self._state is SessionState.IN_PROGRESS

    @property
    def game_over(self) -> bool:
        return self._state is SessionState.GAME_OVER

    @property
    def finished(self) -> bool:
        return self._state is SessionState.FINISHED

    @property
    def is_over(self) -> bool:
        """True if the session has ended, won or lost."""
        return self._state in (SessionState.GAME_OVER, SessionState.FINISHED)

    @property
    def termination_reason(self) -> str:
        """Reason for game over, or empty string."""
        return self._termination_reason

    def _set_state(self, state: SessionState) -> None:
        if self._debug and state is not self._state:
            print(f"[DEBUG] Session: {self._state.name} -> {state.name} "
                  f"(level {self._level_index + 1}/{len(self._levels)})")
        self._state = state

    def advance(self, now: float, bounds: Optional[Bounds] = None) -> SessionState:
        """
        Handle the external advance signal (a click).

        Args:
            now: Current time in seconds.
            bounds: Play area size, used when a level starts.

        Returns:
            The state after the transition.
        """
        if bounds is not None:
            self._bounds = bounds

        if self._state is SessionState.NOT_STARTED:
            self._set_state(SessionState.LEVEL_INTRO)
        elif self._state is SessionState.LEVEL_INTRO:
            self.current_level.start_level(now, self._bounds)
            self._scorer.start(now)
            self._set_state(SessionState.IN_PROGRESS)
        elif self._state in (SessionState.GAME_OVER, SessionState.FINISHED):
            self.reset()
        return self._state

    def tick(self, held_keys, bounds: Bounds, now: float) -> TickResult:
        """
        Advance the simulation by one frame.

        Does nothing unless a level is in progress. Within one tick the level
        update (movement, release, collisions) runs before the game-over check,
        and the game-over check runs before level completion.

        Args:
            held_keys: Key-state provider with ``is_held(key)``.
            bounds: Current play area size.
            now: Current time in seconds.

        Returns:
            TickResult describing what happened.
        """
        self._bounds = bounds
        if self._state is not SessionState.IN_PROGRESS:
            return TickResult(state=self._state, delta_score=0,
                              termination_reason=self._termination_reason)

        score_before = self._scorer.score
        level = self.current_level

        collisions = level.update(held_keys, bounds, now)
        for event in collisions:
            if not event.allergic:
                self._scorer.apply_food(event.food_name, event.points)

        term_result = self.check_game_over()
        if term_result.game_over:
            self._termination_reason = term_result.reason
            self._scorer.pause()
            self._set_state(SessionState.GAME_OVER)
            return TickResult(
                state=self._state,
                delta_score=self._scorer.score - score_before,
                collisions=collisions,
                termination_reason=self._termination_reason
            )

        self._scorer.update(now)

        level_completed = level.is_completed(now)
        if level_completed:
            self._scorer.pause()
            self.next_level()

        return TickResult(
            state=self._state,
            delta_score=self._scorer.score - score_before,
            collisions=collisions,
            level_completed=level_completed
        )

    def check_game_over(self) -> TerminationResult:
        """Check the player's hunger and allergy state."""
        return self._rules.check(self._player)

    def next_level(self) -> SessionState:
        """Move to the next level's intro, or finish after the last level."""
        if self._level_index + 1 < len(self._levels):
            self._level_index += 1
            self._set_state(SessionState.LEVEL_INTRO)
        else:
            self._set_state(SessionState.FINISHED)
        return self._state

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Return to the not-started state.

        Levels are kept (their pools are reused on the next start).

        Args:
            seed: New seed for the player's reaction RNG. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
            self._player.reseed(seed)
            for i, level in enumerate(self._levels):
                level.reseed(seed + i)
        self._player.reset()
        for level in self._levels:
            level.reset()
        self._scorer.reset()
        self._level_index = 0
        self._termination_reason = ""
        self._set_state(SessionState.NOT_STARTED)

    def get_info(self) -> Dict[str, Any]:
        """Summary of the session for agents and tools."""
        return {
            "score": self._scorer.score,
            "foods_eaten": self._scorer.foods_eaten,
            "level_index": self._level_index,
            "level_name": self.current_level.name,
            "state": self._state.name,
            "hunger": self._player.hunger_level,
            "tolerance": self._player.allergy_tolerance,
            "terminated_reason": self._termination_reason,
        }

    def draw(self, sink: DrawSink, bounds: Bounds, now: float) -> None:
        """Draw the current screen: intro, level, or end text."""
        cx = bounds.width / 2
        cy = bounds.height / 2

        if self._state is SessionState.NOT_STARTED:
            sink.draw_text("Dairy-Free Donny", cx, cy - 20, "center")
            sink.draw_text("Click to start", cx, cy + 20, "center")
        elif self._state is SessionState.LEVEL_INTRO:
            level = self.current_level
            avoid = ", ".join(sorted(level.avoid)) or "nothing"
            sink.draw_text(f"Level {self._level_index + 1}: {level.name}", cx, cy - 40, "center")
            sink.draw_text(f"Avoid: {avoid}", cx, cy, "center")
            sink.draw_text("Click to play", cx, cy + 40, "center")
        elif self._state is SessionState.IN_PROGRESS:
            self.current_level.draw(sink, bounds, now)
            sink.draw_text(f"Score: {self._scorer.score}", bounds.width - 10, 50, "right")
        elif self._state is SessionState.GAME_OVER:
            sink.draw_text("Game Over", cx, cy - 20, "center")
            sink.draw_text(_REASON_TEXT.get(self._termination_reason, ""), cx, cy + 10, "center")
            sink.draw_text(f"Score: {self._scorer.score} - click to restart", cx, cy + 40, "center")
        else:
            sink.draw_text("You made it through every level!", cx, cy - 20, "center")
            sink.draw_text(f"Score: {self._scorer.score} - click to play again", cx, cy + 20, "center")


_REASON_TEXT = {
    "allergy": "Too many allergic reactions",
    "too_full": "Donny ate too much",
    "too_hungry": "Donny got too hungry",
}
