from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from word_tris.constants import MAX_LEVEL
from word_tris.game import GameConfig, GameStatus, Piece, WordTrisGame
from word_tris.lexicon import JsonAssetLoader, Lexicon

MAX_CODEPOINT = 0x10FFFF
PIECE_BOX = 4  # every piece fits a 4x4 box in any rotation

EMPTY_RGB = (30, 30, 36)


def _hex_to_rgb(tag: str) -> Tuple[int, int, int]:
    tag = tag.lstrip("#")
    if len(tag) != 6:
        return (200, 200, 200)
    return int(tag[0:2], 16), int(tag[2:4], 16), int(tag[4:6], 16)


def valid_actions(game: WordTrisGame) -> List[Tuple[int, int, int, int]]:
    """Every accepted (piece_idx, x, y, rotation) for the current tray."""
    board = game.state.board
    actions = []
    for idx, piece in enumerate(game.state.tray):
        for r in range(4):
            turned = piece.rotated(r)
            for y in range(board.height - turned.height + 1):
                for x in range(board.width - turned.width + 1):
                    if board.is_valid_placement(turned.cells_at(x, y)):
                        actions.append((idx, x, y, r))
    return actions


def _compute_action_mask(game: WordTrisGame) -> np.ndarray:
    k = game.config.tray_capacity
    mask = np.zeros((k, game.config.height, game.config.width, 4), dtype=np.bool_)
    for piece_idx, x, y, r in valid_actions(game):
        if piece_idx < k:
            mask[piece_idx, y, x, r] = True
    return mask


def _piece_codes(piece: Piece) -> np.ndarray:
    codes = np.zeros((PIECE_BOX, PIECE_BOX), dtype=np.int32)
    matrix = piece.matrix()
    for (row, col), letter in np.ndenumerate(matrix):
        if letter is not None:
            codes[row, col] = ord(letter[0])
    return codes


class WordTrisEnv(gym.Env):
    """Placement-level environment: one action places one tray piece.

    Letters are observed as Unicode code points (0 = empty). The env owns a
    private event loop on which the game's coroutines run.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 dictionary_dir: Optional[str] = None,
                 reward_weights: Optional[Dict[str, float]] = None,
                 invalid_action_penalty: float = -0.1,
                 step_penalty: float = 0.0,
                 terminal_penalty: float = 0.0,
                 max_episode_steps: int = 500) -> None:
        super().__init__()
        loader = JsonAssetLoader(dictionary_dir) if dictionary_dir else None
        self.game = WordTrisGame(config, lexicon=Lexicon(loader))
        self.render_mode = render_mode
        self._loop = asyncio.new_event_loop()

        self.invalid_action_penalty = float(invalid_action_penalty)
        self.step_penalty = float(step_penalty)
        self.terminal_penalty = float(terminal_penalty)
        self.max_episode_steps = int(max_episode_steps)
        self.reward_weights: Dict[str, float] = {
            "cells": 0.05,   # per cell placed
            "words": 1.0,    # per word formed
            "score": 0.05,   # per engine point
            "cleared": 0.02,  # per cell removed by words or bombs
        }
        if reward_weights:
            self.reward_weights.update({k: float(v) for k, v in reward_weights.items()})

        cfg = self.game.config
        k = cfg.tray_capacity
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=MAX_CODEPOINT, shape=(cfg.height, cfg.width), dtype=np.int32),
                "tray": spaces.Box(low=0, high=MAX_CODEPOINT, shape=(k, PIECE_BOX, PIECE_BOX), dtype=np.int32),
                "specials": spaces.Box(low=0, high=1, shape=(k, 2), dtype=np.int8),
                "pieces_remaining": spaces.Discrete(k + 1),
                "level": spaces.Discrete(MAX_LEVEL + 1),
            }
        )
        # Action: (piece_idx, x, y, rotation)
        self.action_space = spaces.MultiDiscrete((k, cfg.width, cfg.height, 4))

        self._steps = 0

    def _run(self, coro):
        return self._loop.run_until_complete(coro)

    def _get_obs(self) -> Dict[str, Any]:
        state = self.game.state
        k = self.game.config.tray_capacity
        grid = np.zeros((state.board.height, state.board.width), dtype=np.int32)
        for (y, x), letter in np.ndenumerate(state.board.letters):
            if letter is not None:
                grid[y, x] = ord(letter[0])
        tray = np.zeros((k, PIECE_BOX, PIECE_BOX), dtype=np.int32)
        specials = np.zeros((k, 2), dtype=np.int8)
        for i, piece in enumerate(state.tray[:k]):
            tray[i] = _piece_codes(piece)
            specials[i] = (int(piece.is_bomb), int(piece.is_wildcard))
        return {
            "grid": grid,
            "tray": tray,
            "specials": specials,
            "pieces_remaining": len(state.tray),
            "level": state.level,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.game),
            "valid_actions": valid_actions(self.game),
            "score": self.game.state.score,
            "level": self.game.state.level,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return _compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self._run(self.game.restart(seed))
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int, int]):
        piece_idx, x, y, r = map(int, action)
        tray = self.game.state.tray

        outcome = None
        cells_in_piece = 0
        if 0 <= piece_idx < len(tray):
            piece = tray[piece_idx]
            turned = piece.rotated(r)
            targets = turned.cells_at(x, y)
            if self.game.state.board.is_valid_placement(targets):
                for _ in range(r % 4 if piece.rotatable else 0):
                    self.game.rotate_piece(piece.id)
                cells_in_piece = len(targets)
                outcome = self._run(self.game.place_piece(piece.id, targets))

        reward_components: Dict[str, float] = {}
        if outcome is not None and outcome.ok:
            reward_components["cells"] = self.reward_weights["cells"] * float(cells_in_piece)
            reward_components["words"] = self.reward_weights["words"] * float(len(outcome.words))
            reward_components["score"] = self.reward_weights["score"] * float(outcome.gained)
            reward_components["cleared"] = self.reward_weights["cleared"] * float(len(outcome.removed))
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        reward_components["step"] = self.step_penalty
        self._steps += 1
        terminated = self.game.state.status is GameStatus.GAME_OVER
        # a tray that fits nowhere never ends the game on its own
        stuck = not terminated and not self.game.has_valid_move()
        truncated = stuck or self._steps >= self.max_episode_steps
        if terminated or stuck:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        obs = self._get_obs()
        info = self._get_info()
        info["reward_components"] = reward_components
        info["engine_score_delta"] = float(outcome.gained if outcome is not None and outcome.ok else 0.0)
        info["words"] = [w.text for w in outcome.words] if outcome is not None else []
        info["stuck"] = stuck
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            board = self.game.state.board
            cell = 12
            img = np.zeros((board.height * cell, board.width * cell, 3), dtype=np.uint8)
            for y in range(board.height):
                for x in range(board.width):
                    color = EMPTY_RGB if board.is_empty(x, y) else _hex_to_rgb(board.tags[y, x])
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        # human rendering lives in word_tris.visualization.play
        return None

    def close(self) -> None:
        if not self._loop.is_closed():
            self._loop.close()
