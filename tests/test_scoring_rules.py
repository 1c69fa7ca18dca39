"""
Tests for the score tracker and game-over rules.
"""

import pytest

from dairy_free_donny.donny_core.config_loader import load_config
from dairy_free_donny.donny_core.player import Player
from dairy_free_donny.donny_core.rules import ALLERGY, TOO_FULL, TOO_HUNGRY, GameOverRules
from dairy_free_donny.donny_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def tracker(config):
    return ScoreTracker(config)


class TestScoreTracker:
    """Test time-based scoring."""

    def test_nothing_while_paused(self, tracker):
        assert tracker.update(10.0) == 0
        assert tracker.score == 0

    def test_points_per_interval(self, tracker, config):
        tracker.start(0.0)
        interval = config.scoring.score_interval
        assert tracker.update(interval * 3) == 3 * config.scoring.points_per_interval
        assert tracker.score == 3 * config.scoring.points_per_interval

    def test_fine_and_coarse_ticks_agree(self, config):
        fine = ScoreTracker(config)
        coarse = ScoreTracker(config)
        fine.start(0.0)
        coarse.start(0.0)

        for i in range(1, 41):
            fine.update(i * 0.125)
        coarse.update(5.0)

        assert fine.score == coarse.score == 5

    def test_partial_interval_carried(self, tracker):
        tracker.start(0.0)
        tracker.update(0.75)
        assert tracker.score == 0
        tracker.update(1.5)
        assert tracker.score == 1

    def test_pause_excludes_gap(self, tracker):
        tracker.start(0.0)
        tracker.update(2.0)
        tracker.pause()
        tracker.update(50.0)
        tracker.start(100.0)
        tracker.update(101.0)
        assert tracker.score == 3

    def test_food_bonus(self, tracker):
        event = tracker.apply_food("pizza", 2)
        assert event.points == 2
        assert event.source == "pizza"
        assert tracker.score == 2
        assert tracker.foods_eaten == 1

    def test_reset(self, tracker):
        tracker.start(0.0)
        tracker.update(3.0)
        tracker.apply_food("apple", 1)
        tracker.reset()
        assert tracker.score == 0
        assert tracker.foods_eaten == 0
        assert not tracker.running


class TestGameOverRules:
    """Test termination conditions and their priority."""

    @pytest.fixture
    def player(self, config):
        return Player(config, seed=0)

    def test_healthy_player(self, player):
        result = GameOverRules().check(player)
        assert not result.game_over
        assert result.reason == ""

    def test_allergy(self, player):
        player.allergy_tolerance = 0
        assert GameOverRules().check(player).reason == ALLERGY

    def test_too_full(self, player):
        player.hunger_level = player.full_max
        assert GameOverRules().check(player).reason == TOO_FULL

    def test_too_hungry(self, player):
        player.hunger_level = player.hunger_min
        assert GameOverRules().check(player).reason == TOO_HUNGRY

    def test_allergy_reported_first(self, player):
        player.allergy_tolerance = 0
        player.hunger_level = player.full_max
        result = GameOverRules().check(player)
        assert result.game_over
        assert result.reason == ALLERGY
