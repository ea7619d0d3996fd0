# /experiments/sanity_rollout.py
"""
Sanity rollouts for BoxRunnerEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis

Usage examples (from repo root):
  # Both policies over 20 default seeds:
  python -m experiments.sanity_rollout --policies both

  # Only heuristic, custom seeds:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333

  # Quick random-only smoke into a temp folder:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from src.env.runner_env import BoxRunnerEnv, NOOP, JUMP, FAST_FALL
from src.game.config import OBSTACLE_H, GROUND_Y


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        # jumping most of the time is a quick way to die in the air, bias to NOOP
        return int(rng.choice([NOOP, JUMP, FAST_FALL], p=[0.8, 0.15, 0.05]))
    return act

def tiny_heuristic_policy_init(jump_dx: float = 0.15):
    """
    Very small rule:
      - If the nearest obstacle would hit a grounded player and is within `jump_dx`
        (fraction of screen width), jump.
      - If airborne and that obstacle is already behind us, fast-fall to land sooner.
    """
    # obstacle y (normalised) at or below which it clears a grounded player
    safe_y = (GROUND_Y - OBSTACLE_H) / GROUND_Y

    def act(obs: np.ndarray) -> int:
        jumping = obs[2] > 0.5
        dx1, y1 = obs[3], obs[4]
        blocks_ground = y1 > safe_y
        if not jumping and blocks_ground and 0.0 <= dx1 < jump_dx:
            return JUMP
        if jumping and dx1 > 0.5:
            return FAST_FALL
        return NOOP
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int) -> Tuple[int, float, int, bool, bool, float]:
    """
    Returns: (ep_len, ret_sum, score, terminated, truncated, airborne_ratio)
    """
    env = BoxRunnerEnv(frame_skip=frame_skip)

    if policy_name == "random":
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    ret_sum = 0.0
    airborne = 0
    ep_len = 0
    score = 0
    term = trunc = False

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs)
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            airborne += int(bool(info.get("jumping", False)))
            score = int(info.get("score", 0))
            if term or trunc:
                break
    finally:
        env.close()

    return ep_len, ret_sum, score, bool(term), bool(trunc), airborne / max(1, ep_len)


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=2,
                    help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "score",
        "terminated", "truncated", "airborne_ratio",
    ]

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, score, terminated, truncated, air = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
            )
            row = [
                "BoxRunnerEnv", policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.1f}", score,
                int(terminated), int(truncated), f"{air:.3f}",
            ]
            write_episode_row(episodes_csv, header, row)
            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
