"""
Tests for Gymnasium environment API.
"""

import dataclasses

import pytest
import numpy as np

from dairy_free_donny.donny_core.config_loader import load_config
from dairy_free_donny.donny_core.env_gym import DonnyEnv
from dairy_free_donny.donny_core.food import PARKED_POSITION
from dairy_free_donny.donny_core.interfaces import Bounds, NO_KEYS
from dairy_free_donny.donny_core.render_solid import ArrayDrawSink
from dairy_free_donny.donny_core.session import Session, SessionState
from dairy_free_donny.donny_core.state_snapshot import SnapshotBuilder


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = DonnyEnv()
    yield env
    env.close()


class TestDonnyEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2

        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)

    def test_reset_starts_first_level(self, env):
        """Intros are skipped so the agent plays right away."""
        env.reset(seed=42)
        assert env.session.state is SessionState.IN_PROGRESS
        assert env.session.level_index == 0

    def test_observation_structure(self, env):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)

        # Check scalar fields
        for key in ("player_x", "player_y", "hunger", "tolerance",
                    "allergic_reaction", "level_index", "time_remaining", "score"):
            assert key in obs
            assert obs[key].shape == ()

        # Check array fields
        max_foods = env.config.caps.max_foods
        for key in ("food_x", "food_y", "food_width", "food_height",
                    "food_speed", "food_allergic", "food_mask"):
            assert obs[key].shape == (max_foods,)

    def test_observation_in_space(self, env):
        """Observations should lie inside the declared space."""
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

        for _ in range(50):
            obs, _, terminated, truncated, _ = env.step(env.action_space.sample())
            assert env.observation_space.contains(obs)
            if terminated or truncated:
                break

    def test_initial_values(self, env, config):
        obs, _ = env.reset(seed=42)
        assert float(obs["player_x"]) == config.player.spawn_x
        assert int(obs["hunger"]) == config.player.hunger_start
        assert int(obs["tolerance"]) == config.player.allergy_tolerance
        assert int(obs["score"]) == 0
        assert obs["food_mask"].sum() == 0

    def test_step_returns_five_values(self, env):
        """Step should return (obs, reward, terminated, truncated, info)."""
        env.reset(seed=42)

        result = env.step(np.zeros(4, dtype=np.int8))

        assert isinstance(result, tuple)
        assert len(result) == 5

        obs, reward, terminated, truncated, info = result
        assert isinstance(obs, dict)
        assert isinstance(reward, (int, float))
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert isinstance(info, dict)

    def test_reward_is_always_zero(self, env):
        """Environment reward should always be 0.0."""
        env.reset(seed=42)
        rng = np.random.default_rng(0)

        for _ in range(100):
            _, reward, terminated, truncated, _ = env.step(rng.integers(0, 2, size=4))
            assert reward == 0.0

            if terminated or truncated:
                env.reset()

    def test_info_contents(self, env):
        """Info dict should contain score and collision counts."""
        env.reset(seed=42)

        _, _, _, _, info = env.step([0, 0, 0, 0])

        for key in ("score", "delta_score", "collisions", "allergic_hits",
                    "finished", "hunger", "tolerance", "level_index"):
            assert key in info

    def test_action_moves_player(self, env, config):
        """Holding down should move Donny down by one step per frame."""
        obs, _ = env.reset(seed=42)
        y = float(obs["player_y"])

        obs, _, _, _, _ = env.step([0, 1, 0, 0])
        assert float(obs["player_y"]) == y + config.player.speed

    def test_action_formats(self, env):
        """Lists, bool arrays and int arrays are all accepted."""
        env.reset(seed=42)
        env.step([1, 0, 0, 0])
        env.step(np.array([True, False, True, False]))
        env.step(np.ones(4, dtype=np.int8))

    def test_wrong_action_length(self, env):
        env.reset(seed=42)
        with pytest.raises(ValueError):
            env.step([1, 0])

    def test_food_appears(self, env):
        """Released food shows up in the masked arrays."""
        env.reset(seed=42)
        for _ in range(3):
            obs, _, _, _, _ = env.step([0, 0, 0, 0])
        assert obs["food_mask"].sum() >= 1
        i = int(np.argmax(obs["food_mask"]))
        assert obs["food_speed"][i] < 0

    def test_deterministic_with_seed(self):
        """Same seed and actions should produce identical episodes."""
        env1 = DonnyEnv()
        env2 = DonnyEnv()

        obs1, _ = env1.reset(seed=123)
        obs2, _ = env2.reset(seed=123)

        rng = np.random.default_rng(7)
        for _ in range(300):
            action = rng.integers(0, 2, size=4)
            obs1, _, t1, tr1, _ = env1.step(action)
            obs2, _, t2, tr2, _ = env2.step(action)

            for key in obs1:
                np.testing.assert_array_equal(obs1[key], obs2[key])
            assert t1 == t2

            if t1 or tr1:
                break

        env1.close()
        env2.close()

    def test_episode_terminates(self):
        """Episode should eventually terminate or truncate."""
        env = DonnyEnv(max_episode_steps=3000)
        env.reset(seed=42)

        terminated = False
        truncated = False
        steps = 0

        while not (terminated or truncated) and steps < 3001:
            _, _, terminated, truncated, _ = env.step([0, 0, 0, 0])
            steps += 1

        # Should have ended
        assert terminated or truncated
        env.close()

    def test_truncation(self):
        """The step cap truncates the episode."""
        env = DonnyEnv(max_episode_steps=5)
        env.reset(seed=42)
        for _ in range(4):
            _, _, terminated, truncated, _ = env.step([0, 0, 0, 0])
            assert not truncated
        _, _, terminated, truncated, _ = env.step([0, 0, 0, 0])
        assert truncated and not terminated
        env.close()


class TestRender:
    """Test headless rendering."""

    def test_rgb_array(self, config):
        env = DonnyEnv(render_mode="rgb_array")
        env.reset(seed=42)
        frame = env.render()

        assert frame.shape == (config.board.height, config.board.width, 3)
        assert frame.dtype == np.uint8
        env.close()

    def test_no_render_mode(self, env):
        env.reset(seed=42)
        assert env.render() is None

    def test_player_painted(self, config):
        sink = ArrayDrawSink(config.board.width, config.board.height, config)
        sink.draw_sprite(config.player.sprite, 100, 100, 10, 10)
        assert tuple(sink.image[105, 105]) == (60, 120, 220)

    def test_food_painted_in_catalog_color(self, config):
        sink = ArrayDrawSink(config.board.width, config.board.height, config)
        sink.draw_sprite("carrot", 200, 200, 50, 60)
        assert tuple(sink.image[230, 225]) == (240, 130, 30)

    def test_off_screen_sprite_ignored(self, config):
        sink = ArrayDrawSink(config.board.width, config.board.height, config)
        before = sink.to_array()
        sink.draw_sprite("apple", -100, -100, 50, 60)
        np.testing.assert_array_equal(sink.to_array(), before)


class TestRandomReleaseObservation:
    """Food that has left play must not appear in the observation."""

    def test_departed_food_not_masked(self, config):
        single = dataclasses.replace(config, levels=(config.levels[2],))
        session = Session(config=single, seed=5)
        bounds = Bounds(config.board.width, config.board.height)
        session.advance(0.0, bounds)
        session.advance(0.0, bounds)

        item = session.current_level.pool[0]
        item.release_time = 0.0
        item.rect.x = -item.width - 10
        session.tick(NO_KEYS, bounds, 0.1)
        assert item.parked

        obs = SnapshotBuilder(single).build(session, bounds, 0.1).to_obs_dict()
        mask = obs["food_mask"].astype(bool)
        assert not np.any(mask & (obs["food_x"] == PARKED_POSITION[0]))
        assert item not in session.current_level.active_foods(0.1)
