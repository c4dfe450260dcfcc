from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping, Tuple

from .board import Board
from .pieces import Piece


class GameStatus(Enum):
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameState:
    board: Board
    tray: List[Piece] = field(default_factory=list)
    score: int = 0
    level: int = 1
    clear_streak: int = 0
    bomb_armed: bool = False
    status: GameStatus = GameStatus.LOADING
    pieces_generated: int = 0
    words_cleared: int = 0
    formed_words: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of the game handed across the UI boundary."""

    rows: Tuple[str, ...]
    tray: Tuple[Piece, ...]
    score: int
    level: int
    status: GameStatus
    clear_streak: int
    bomb_armed: bool
    active_words: Tuple[str, ...]
    usage_counts: Mapping[str, int]
    formed_words: Tuple[str, ...]

    @property
    def game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER
