"""
Game Rules
==========

Game-over conditions evaluated against the player after every tick.
"""

from __future__ import annotations

from dataclasses import dataclass

ALLERGY = "allergy"
TOO_FULL = "too_full"
TOO_HUNGRY = "too_hungry"


@dataclass
class TerminationResult:
    """Result of a game-over check."""
    game_over: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def lost(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class GameOverRules:
    """
    Handles game termination conditions.

    - Allergy: tolerance used up
    - Too full: hunger reached its maximum
    - Too hungry: hunger reached its minimum

    Allergy is reported first when several conditions hold at once.
    """

    def check(self, player) -> TerminationResult:
        """
        Evaluate every condition against the player's current state.

        Args:
            player: The Player to inspect.

        Returns:
            TerminationResult indicating game state.
        """
        if player.check_allergy_tolerance():
            return TerminationResult.lost(ALLERGY)
        if player.too_full():
            return TerminationResult.lost(TOO_FULL)
        if player.too_hungry():
            return TerminationResult.lost(TOO_HUNGRY)
        return TerminationResult.none()
