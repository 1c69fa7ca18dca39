"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Dairy-Free Donny session.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from dairy_free_donny.donny_core.clock import SimClock
from dairy_free_donny.donny_core.config_loader import GameConfig, load_config
from dairy_free_donny.donny_core.interfaces import Bounds, DIRECTIONS, HeldKeys
from dairy_free_donny.donny_core.render_solid import ArrayDrawSink
from dairy_free_donny.donny_core.session import Session, SessionState
from dairy_free_donny.donny_core.state_snapshot import SnapshotBuilder


class DonnyEnv(gym.Env):
    """
    Dairy-Free Donny as a Gymnasium environment.

    Action Space:
        MultiBinary(4): held flags for (up, down, left, right).

    Observation Space:
        Dict of player, level and masked food arrays.

    Each step advances a simulated clock by ``timing.frame_dt`` and ticks the
    session once. Level intros are skipped automatically, so one episode runs
    the whole level sequence until game over or the last level finishes.

    Reward:
        Always 0.0. Agents compute their own from the info dict.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        max_episode_steps: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            max_episode_steps: Override caps.max_episode_steps.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        self._config = load_config(config_path)
        self.render_mode = render_mode
        self._debug = debug
        self._max_steps = max_episode_steps or self._config.caps.max_episode_steps
        self._dt = self._config.timing.frame_dt

        self._bounds = Bounds(self._config.board.width, self._config.board.height)
        self._clock = SimClock()
        self._session = Session(config=self._config, debug=debug)
        self._snapshot_builder = SnapshotBuilder(self._config)
        self._sink: Optional[ArrayDrawSink] = None
        self._steps = 0

        self.action_space = spaces.MultiBinary(len(DIRECTIONS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] DonnyEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Levels: {self._config.num_levels}, frame dt: {self._dt:.4f}s")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_foods = self._config.caps.max_foods
        board = self._config.board
        player = self._config.player

        return spaces.Dict({
            "player_x": spaces.Box(low=0, high=board.width, shape=(), dtype=np.float32),
            "player_y": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "player_width": spaces.Box(low=0, high=board.width, shape=(), dtype=np.float32),
            "player_height": spaces.Box(low=0, high=board.height, shape=(), dtype=np.float32),
            "hunger": spaces.Box(low=player.hunger_min, high=player.full_max, shape=(), dtype=np.int32),
            "tolerance": spaces.Box(low=-np.iinfo(np.int32).max, high=player.allergy_tolerance,
                                    shape=(), dtype=np.int32),
            "allergic_reaction": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "level_index": spaces.Box(low=0, high=self._config.num_levels - 1, shape=(), dtype=np.int32),
            "time_remaining": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "board_width": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),
            "board_height": spaces.Box(low=0, high=10000, shape=(), dtype=np.float32),
            "food_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_foods,), dtype=np.float32),
            "food_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_foods,), dtype=np.float32),
            "food_width": spaces.Box(low=0, high=np.inf, shape=(max_foods,), dtype=np.float32),
            "food_height": spaces.Box(low=0, high=np.inf, shape=(max_foods,), dtype=np.float32),
            "food_speed": spaces.Box(low=-np.inf, high=np.inf, shape=(max_foods,), dtype=np.float32),
            "food_allergic": spaces.MultiBinary(max_foods),
            "food_mask": spaces.MultiBinary(max_foods),
        })

    def _start_pending_level(self) -> None:
        """Click through a level intro so play continues."""
        if self._session.state in (SessionState.NOT_STARTED, SessionState.LEVEL_INTRO):
            self._session.advance(self._clock.now(), self._bounds)
        if self._session.state is SessionState.LEVEL_INTRO:
            self._session.advance(self._clock.now(), self._bounds)

    def _get_obs(self) -> Dict[str, np.ndarray]:
        snapshot = self._snapshot_builder.build(self._session, self._bounds, self._clock.now())
        return snapshot.to_obs_dict()

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start the first level.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._clock.reset()
        self._session.reset(seed=seed)
        self._steps = 0
        self._start_pending_level()

        info = self._session.get_info()
        info["delta_score"] = 0
        return self._get_obs(), info

    def step(
        self,
        action
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: Four held flags ordered (up, down, left, right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        held = HeldKeys.from_flags(np.asarray(action).reshape(-1).tolist())

        now = self._clock.advance(self._dt)
        result = self._session.tick(held, self._bounds, now)
        self._steps += 1

        if result.level_completed and self._session.state is SessionState.LEVEL_INTRO:
            self._start_pending_level()

        terminated = self._session.is_over
        truncated = not terminated and self._steps >= self._max_steps

        info = self._session.get_info()
        info["delta_score"] = result.delta_score
        info["collisions"] = len(result.collisions)
        info["allergic_hits"] = sum(1 for c in result.collisions if c.allergic)
        info["finished"] = self._session.finished

        if self._debug and result.collisions:
            print(f"[DEBUG] Step {self._steps}: " + ", ".join(
                f"{c.food_name}{' (allergic)' if c.allergic else ''}" for c in result.collisions
            ))
        if self._debug and terminated:
            print(f"[DEBUG] TERMINATED: {info.get('terminated_reason') or 'finished'}")

        return self._get_obs(), 0.0, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current frame.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode != "rgb_array":
            return None
        if self._sink is None:
            self._sink = ArrayDrawSink(int(self._bounds.width), int(self._bounds.height), self._config)
        self._sink.clear()
        self._session.draw(self._sink, self._bounds, self._clock.now())
        return self._sink.to_array()

    def close(self) -> None:
        """Clean up resources."""
        self._sink = None

    @property
    def session(self) -> Session:
        """Access to underlying session (for debugging/tools)."""
        return self._session

    @property
    def clock(self) -> SimClock:
        return self._clock

    @property
    def config(self) -> GameConfig:
        return self._config
