from __future__ import annotations

import argparse
import logging
import random
from typing import Optional

import gymnasium as gym

import word_tris.env  # noqa: F401


def run_random(steps: int = 200, seed: Optional[int] = None, dictionary_dir: Optional[str] = None) -> float:
    env = gym.make("WordTris-10x10-v0", dictionary_dir=dictionary_dir)
    rng = random.Random(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    words = 0
    for _ in range(steps):
        # Prefer valid actions if available
        valid = info.get("valid_actions", [])
        if valid:
            action = rng.choice(valid)
        else:
            action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        words += len(info.get("words", []))
        if terminated or truncated:
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f} ({words} words formed)")
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run a uniformly random placement agent")
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--dict-dir", type=str, default=None, help="Directory holding the korean_words_*.json assets")
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run_random(args.steps, args.seed, args.dict_dir)


if __name__ == "__main__":  # pragma: no cover
    main()
