"""
Evaluation Harness
==================

Plays an agent through the whole level sequence once per seed in the seed
bank and reports how far it got, what it ate and what ended each run.

Usage:
    python -m dairy_free_donny.evaluation.run_eval --agent contestants/baseline_dodger
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from dairy_free_donny.donny_core.env_gym import DonnyEnv

DEFAULT_SEED_BANK = Path(__file__).parent / "seed_bank.json"

# Reported when the run hit the step cap without a game-over
TRUNCATED = "truncated"
FINISHED = "finished"


@dataclass
class EvalResult:
    """One run of the level sequence."""
    seed: int
    final_score: int
    levels_cleared: int
    finished: bool
    termination_reason: str
    foods_eaten: int
    allergic_hits: int
    level_scores: List[int]
    steps: int
    elapsed_time: float


@dataclass
class EvalSummary:
    """Aggregate over a batch of runs."""
    mean_score: float
    std_score: float
    min_score: int
    max_score: int
    median_score: float
    finish_rate: float
    mean_levels_cleared: float
    mean_foods_eaten: float
    mean_allergic_hits: float
    endings: Dict[str, int]
    # How many runs reached each level
    level_reach: List[int]
    total_time: float
    results: List[EvalResult] = field(default_factory=list)


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """Seeds to evaluate on, from ``seed_bank.json`` unless a path is given."""
    with open(path or DEFAULT_SEED_BANK, "r") as f:
        return [int(seed) for seed in json.load(f)["seeds"]]


def _agent_file(agent_path: str) -> Path:
    path = Path(agent_path)
    if path.is_dir():
        path = path / "agent.py"
    if not path.exists():
        raise FileNotFoundError(f"Agent file not found: {path}")
    return path


def load_agent(agent_path: str) -> Callable:
    """
    Import a contestant and return its act callable.

    The module may define a ``DonnyAgent`` class (instantiated with no
    arguments, its ``act`` method is used) or a module-level ``act``.

    Args:
        agent_path: Contestant directory or its agent.py.

    Raises:
        FileNotFoundError: No agent.py at the path.
        ImportError: The file could not be loaded as a module.
        AttributeError: The module has neither entry point.
    """
    agent_file = _agent_file(agent_path)
    module_spec = importlib.util.spec_from_file_location("agent_module", agent_file)
    if module_spec is None or module_spec.loader is None:
        raise ImportError(f"Failed to load agent module from {agent_file}")

    module = importlib.util.module_from_spec(module_spec)
    sys.modules["agent_module"] = module
    module_spec.loader.exec_module(module)

    agent_cls = getattr(module, "DonnyAgent", None)
    if agent_cls is not None:
        act = getattr(agent_cls(), "act", None)
        if act is None:
            raise AttributeError("DonnyAgent class must have an 'act' method")
        return act
    if hasattr(module, "act"):
        return module.act
    raise AttributeError(
        f"{agent_file} defines neither a DonnyAgent class nor an act function"
    )


def evaluate_single_seed(
    agent_fn: Callable,
    seed: int,
    config_path: Optional[str] = None,
    max_steps: Optional[int] = None,
    verbose: bool = False
) -> EvalResult:
    """
    Play one seed until game over, the end of the last level, or the step cap.

    Points are credited to the level that was running when they were earned,
    so ``level_scores`` sums to ``final_score``.
    """
    env = DonnyEnv(config_path=config_path, max_episode_steps=max_steps)
    level_scores = [0] * env.config.num_levels
    allergic_hits = 0
    steps = 0

    obs, info = env.reset(seed=seed)
    start = time.time()
    try:
        done = False
        while not done:
            level = int(obs["level_index"])
            obs, _, terminated, truncated, info = env.step(agent_fn(obs))
            level_scores[level] += int(info["delta_score"])
            allergic_hits += int(info["allergic_hits"])
            steps += 1
            done = terminated or truncated
    finally:
        env.close()
    elapsed = time.time() - start

    finished = bool(info["finished"])
    if finished:
        ending = FINISHED
    else:
        ending = info["terminated_reason"] or TRUNCATED

    result = EvalResult(
        seed=seed,
        final_score=int(info["score"]),
        levels_cleared=len(level_scores) if finished else int(info["level_index"]),
        finished=finished,
        termination_reason=ending,
        foods_eaten=int(info["foods_eaten"]),
        allergic_hits=allergic_hits,
        level_scores=level_scores,
        steps=steps,
        elapsed_time=elapsed
    )

    if verbose:
        print(f"  Seed {seed}: score={result.final_score} "
              f"cleared={result.levels_cleared} ate={result.foods_eaten} "
              f"allergens={result.allergic_hits} ({ending}, {elapsed:.2f}s)")
    return result


def summarize(results: List[EvalResult], total_time: float = 0.0) -> EvalSummary:
    """Aggregate per-seed results. Raises ValueError for an empty batch."""
    if not results:
        raise ValueError("Cannot summarize an empty set of results")

    scores = np.array([r.final_score for r in results])
    num_levels = len(results[0].level_scores)
    level_reach = [
        sum(1 for r in results if r.levels_cleared >= i)
        for i in range(num_levels)
    ]

    return EvalSummary(
        mean_score=float(scores.mean()),
        std_score=float(scores.std()),
        min_score=int(scores.min()),
        max_score=int(scores.max()),
        median_score=float(np.median(scores)),
        finish_rate=float(np.mean([r.finished for r in results])),
        mean_levels_cleared=float(np.mean([r.levels_cleared for r in results])),
        mean_foods_eaten=float(np.mean([r.foods_eaten for r in results])),
        mean_allergic_hits=float(np.mean([r.allergic_hits for r in results])),
        endings=dict(Counter(r.termination_reason for r in results)),
        level_reach=level_reach,
        total_time=total_time,
        results=list(results)
    )


def format_summary(summary: EvalSummary) -> str:
    """Human-readable report of a summary."""
    runs = len(summary.results)
    lines = [
        f"Runs:            {runs}",
        f"Score:           {summary.mean_score:.2f} +/- {summary.std_score:.2f} "
        f"(median {summary.median_score:.1f}, range {summary.min_score}..{summary.max_score})",
        f"Levels cleared:  {summary.mean_levels_cleared:.2f} avg, "
        f"{summary.finish_rate:.0%} finished",
        f"Foods eaten:     {summary.mean_foods_eaten:.2f} avg",
        f"Allergen hits:   {summary.mean_allergic_hits:.2f} avg",
        "Reached level:   " + ", ".join(
            f"{i + 1}: {count}/{runs}" for i, count in enumerate(summary.level_reach)
        ),
        "Endings:         " + ", ".join(
            f"{reason} x{count}" for reason, count in sorted(summary.endings.items())
        ),
        f"Wall time:       {summary.total_time:.2f}s",
    ]
    return "\n".join(lines)


def evaluate_agent(
    agent_fn: Callable,
    seeds: Optional[List[int]] = None,
    config_path: Optional[str] = None,
    max_steps: Optional[int] = None,
    verbose: bool = True
) -> EvalSummary:
    """
    Evaluate an agent on every seed.

    Args:
        agent_fn: Agent's act function (obs) -> four held-key flags.
        seeds: Seeds to run. Uses seed_bank.json if None.
        config_path: Game config to evaluate with. Uses default if None.
        max_steps: Override the episode step cap.
        verbose: If True, print each run and the final report.
    """
    if seeds is None:
        seeds = load_seed_bank()

    start = time.time()
    results = []
    for i, seed in enumerate(seeds):
        if verbose:
            print(f"[{i + 1}/{len(seeds)}] seed {seed}")
        results.append(evaluate_single_seed(
            agent_fn, seed, config_path=config_path, max_steps=max_steps, verbose=verbose
        ))

    summary = summarize(results, total_time=time.time() - start)
    if verbose:
        print()
        print(format_summary(summary))
    return summary


def save_results(summary: EvalSummary, agent_name: str, output_path: str) -> None:
    """Write the summary and every per-seed result to a JSON file."""
    data = {"agent": agent_name, "timestamp": time.strftime("%Y-%m-%d %H:%M:%S")}
    data.update(asdict(summary))

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)
    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a Dairy-Free Donny agent")
    parser.add_argument("--agent", required=True,
                        help="Path to agent directory or agent.py file")
    parser.add_argument("--seeds", default=None,
                        help="Seed bank JSON (default: the bundled seed_bank.json)")
    parser.add_argument("--config", default=None,
                        help="Game config YAML (default: the bundled game_config.yaml)")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Override the per-run step cap")
    parser.add_argument("--output", default=None, help="Path to save results JSON")
    parser.add_argument("--quiet", action="store_true", help="Only print the final report")
    args = parser.parse_args()

    try:
        agent_fn = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    seeds = load_seed_bank(args.seeds) if args.seeds else None
    summary = evaluate_agent(
        agent_fn,
        seeds=seeds,
        config_path=args.config,
        max_steps=args.max_steps,
        verbose=not args.quiet
    )
    if args.quiet:
        print(format_summary(summary))

    if args.output:
        save_results(summary, Path(args.agent).name, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
