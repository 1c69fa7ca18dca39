"""
Performance Benchmark
=====================

Measures simulation throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--seed SEED]
"""

from __future__ import annotations

import argparse
import sys
import time

import numpy as np

from dairy_free_donny.donny_core.clock import SimClock
from dairy_free_donny.donny_core.config_loader import load_config
from dairy_free_donny.donny_core.env_gym import DonnyEnv
from dairy_free_donny.donny_core.interfaces import Bounds, HeldKeys
from dairy_free_donny.donny_core.session import Session


def benchmark_session(num_steps: int = 10000, seed: int = 42) -> dict:
    """
    Benchmark raw session ticks, without observation building.

    Args:
        num_steps: Number of ticks to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    session = Session(config=config, seed=seed)
    clock = SimClock()
    bounds = Bounds(config.board.width, config.board.height)
    rng = np.random.default_rng(seed)
    actions = [HeldKeys.from_flags(flags) for flags in rng.integers(0, 2, size=(num_steps, 4))]

    session.advance(clock.now(), bounds)
    session.advance(clock.now(), bounds)

    start = time.perf_counter()
    for held in actions:
        session.tick(held, bounds, clock.advance(config.timing.frame_dt))
        if not session.in_progress:
            # Click through intros and restarts
            session.advance(clock.now(), bounds)
    elapsed = time.perf_counter() - start

    return {
        "mode": "session",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_env(num_steps: int = 10000, seed: int = 42) -> dict:
    """
    Benchmark environment steps, including observation building.

    Args:
        num_steps: Number of steps to run.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    env = DonnyEnv()
    rng = np.random.default_rng(seed)

    obs, _ = env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        obs, _, terminated, truncated, _ = env.step(rng.integers(0, 2, size=4))
        if terminated or truncated:
            obs, _ = env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env",
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def print_results(results: dict) -> None:
    """Pretty print benchmark results."""
    print(f"  Mode:            {results['mode']}")
    print(f"  Steps:           {results['num_steps']}")
    print(f"  Elapsed:         {results['elapsed_seconds']:.3f}s")
    print(f"  Steps/second:    {results['steps_per_second']:.0f}")
    print(f"  ms/step:         {results['ms_per_step']:.4f}")


def main():
    parser = argparse.ArgumentParser(description="Benchmark Dairy-Free Donny simulation speed")
    parser.add_argument("--steps", type=int, default=10000, help="Steps per benchmark")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args()

    print("=" * 50)
    print("SESSION TICKS")
    print("=" * 50)
    print_results(benchmark_session(args.steps, args.seed))
    print()
    print("=" * 50)
    print("GYMNASIUM ENV")
    print("=" * 50)
    print_results(benchmark_env(args.steps, args.seed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
