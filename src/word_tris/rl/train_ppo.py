"""Train a PPO agent on the placement env.

``maskable`` uses sb3-contrib's MaskablePPO with the env's action mask;
``ppo`` is vanilla PPO, with invalid picks resampled among valid ones.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Callable, List, Optional

import gymnasium as gym

import word_tris.env  # noqa: F401
from word_tris.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper

ENV_ID = "WordTris-10x10-v0"

log = logging.getLogger("word_tris.rl")


def make_env(seed: Optional[int] = None, dictionary_dir: Optional[str] = None,
             episode_steps: Optional[int] = None, invalid_penalty: float = -0.1,
             resample_invalid: bool = True) -> gym.Env:
    """Discrete-action env; ``episode_steps`` adds a TimeLimit on top of the env's own cap."""
    env = gym.make(ENV_ID, max_episode_steps=episode_steps, dictionary_dir=dictionary_dir,
                   invalid_action_penalty=invalid_penalty)
    env = FlattenDiscreteActionWrapper(env)
    if resample_invalid:
        env = ResampleInvalidActionWrapper(env)
    if seed is not None:
        env.reset(seed=seed)
    return env


def env_factories(args: argparse.Namespace, masked: bool) -> List[Callable[[], gym.Env]]:
    def factory(rank: int) -> Callable[[], gym.Env]:
        def build() -> gym.Env:
            seed = None if args.seed is None else args.seed + rank
            env = make_env(seed, args.dict_dir, args.episode_steps, args.invalid_penalty,
                           resample_invalid=not masked)
            if masked:
                from sb3_contrib.common.wrappers import ActionMasker

                env = ActionMasker(env, lambda e: e.get_action_mask())
            return env
        return build

    return [factory(rank) for rank in range(args.n_envs)]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Train PPO on Word Tris placements")
    p.add_argument("--algo", choices=["ppo", "maskable"], default="maskable")
    p.add_argument("--timesteps", type=int, default=200_000)
    p.add_argument("--logdir", type=str, default="./logs/ppo")
    p.add_argument("--save_path", type=str, default="./models/ppo_wordtris.zip")
    p.add_argument("--n_envs", type=int, default=4)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--dict-dir", type=str, default=None, help="Directory holding the korean_words_*.json assets")
    p.add_argument("--episode-steps", type=int, default=None, help="Truncate episodes after this many placements")
    p.add_argument("--invalid-penalty", type=float, default=-0.1)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    from stable_baselines3.common.vec_env import SubprocVecEnv, VecMonitor

    masked = args.algo == "maskable"
    if masked:
        from sb3_contrib import MaskablePPO as Algorithm
    else:
        from stable_baselines3 import PPO as Algorithm

    vec_env = VecMonitor(SubprocVecEnv(env_factories(args, masked)))
    model = Algorithm(
        policy="MultiInputPolicy",
        env=vec_env,
        verbose=1,
        seed=args.seed,
        tensorboard_log=args.logdir,
    )
    log.info("Training %s for %d steps over %d envs", Algorithm.__name__, args.timesteps, args.n_envs)
    try:
        model.learn(total_timesteps=args.timesteps)
    finally:
        vec_env.close()
    os.makedirs(os.path.dirname(args.save_path) or ".", exist_ok=True)
    model.save(args.save_path)
    log.info("Saved model to %s", args.save_path)


if __name__ == "__main__":  # pragma: no cover
    main()
