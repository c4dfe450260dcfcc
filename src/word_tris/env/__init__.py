"""Gymnasium environments for Word Tris."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="WordTris-10x10-v0",
    entry_point="word_tris.env.word_tris_env:WordTrisEnv",
)

__all__ = ["WordTris-10x10-v0"]
