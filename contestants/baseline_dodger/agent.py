"""
Baseline Dodger Agent - Dodges allergens, eats when hungry.

A simple heuristic agent that reads the food arrays of the observation:

- Any allergen food heading for Donny's row is dodged vertically
- When hunger is low, Donny lines up with the nearest safe food
- When hunger is high, Donny dodges safe food too

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark to compare against
3. A verification that the environment API works correctly
"""

import numpy as np
from typing import Any, Dict, Optional

# Horizontal look-ahead in pixels for incoming food
LOOKAHEAD = 220.0
# Hunger thresholds relative to the configured bounds
HUNGRY_AT = 4
FULL_AT = 8

UP, DOWN, LEFT, RIGHT = 0, 1, 2, 3


class DonnyAgent:
    """Heuristic agent that steers up and down only."""

    def __init__(self, debug: bool = False):
        """
        Initialize the agent.

        Args:
            debug: If True, print decisions to stdout.
        """
        self.debug = debug

    def reset(self, seed: Optional[int] = None) -> None:
        """Nothing to reset; the agent is stateless."""

    def _threats(self, obs: Dict[str, Any], want_food: bool) -> np.ndarray:
        """Mask of incoming food that should be dodged."""
        px = float(obs["player_x"])
        pw = float(obs["player_width"])
        mask = obs["food_mask"].astype(bool)
        allergic = obs["food_allergic"].astype(bool)

        incoming = (
            (obs["food_x"] + obs["food_width"] >= px)
            & (obs["food_x"] <= px + pw + LOOKAHEAD)
        )
        avoid = allergic if want_food else np.ones_like(allergic)
        return mask & incoming & avoid

    def act(self, observation: Dict[str, Any]) -> np.ndarray:
        """
        Choose which keys to hold this frame.

        Args:
            observation: Observation dict from DonnyEnv.

        Returns:
            int8 array of held flags (up, down, left, right).
        """
        action = np.zeros(4, dtype=np.int8)

        py = float(observation["player_y"])
        ph = float(observation["player_height"])
        center = py + ph / 2
        hunger = int(observation["hunger"])
        want_food = hunger < FULL_AT

        food_top = observation["food_y"]
        food_bottom = food_top + observation["food_height"]

        threats = self._threats(observation, want_food)
        blocking = threats & (food_bottom >= py - 10) & (food_top <= py + ph + 10)
        if np.any(blocking):
            # Step away from the nearest blocking item
            idx = int(np.argmin(np.where(blocking, observation["food_x"], np.inf)))
            food_center = (food_top[idx] + food_bottom[idx]) / 2
            action[UP if food_center >= center else DOWN] = 1
            if self.debug:
                print(f"dodge food {idx} ({'up' if action[UP] else 'down'})")
            return action

        if hunger <= HUNGRY_AT:
            px = float(observation["player_x"])
            mask = (
                observation["food_mask"].astype(bool)
                & ~observation["food_allergic"].astype(bool)
                # Skip food already behind Donny
                & (observation["food_x"] + observation["food_width"] >= px)
            )
            if np.any(mask):
                idx = int(np.argmin(np.where(mask, observation["food_x"], np.inf)))
                food_center = (food_top[idx] + food_bottom[idx]) / 2
                if food_center < center - 4:
                    action[UP] = 1
                elif food_center > center + 4:
                    action[DOWN] = 1
        return action


def act(observation: Dict[str, Any]) -> np.ndarray:
    """Standalone act function (alternative to class-based agent)."""
    return _DEFAULT_AGENT.act(observation)


_DEFAULT_AGENT = DonnyAgent()
