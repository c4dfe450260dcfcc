"""Game module for Word Tris.

Exports the core game engine and supporting classes:
- Board: letter grid, placement and word scanning
- Piece / PieceShape: lettered polyominoes with rotation
- WordSetCurator: rotating target words that bias letter draws
- PieceFactory: random, bomb and wildcard pieces
- MatchEngine / ScoringRules: word validation, scoring and leveling
- WordTrisGame: state machine the UI and agents talk to
"""

from .board import Board, Candidate, RemovedCell
from .pieces import Piece, PieceShape
from .curator import CuratorConfig, WordSetCurator
from .factory import PieceFactory
from .matching import FoundWord, MatchEngine
from .rules import ScoringRules
from .state import GameSnapshot, GameState, GameStatus
from .core import (
    CellsRemoved,
    GameConfig,
    PlacementOutcome,
    RotationOutcome,
    StateChanged,
    WordsFormed,
    WordTrisGame,
)

__all__ = [
    "Board",
    "Candidate",
    "RemovedCell",
    "Piece",
    "PieceShape",
    "CuratorConfig",
    "WordSetCurator",
    "PieceFactory",
    "FoundWord",
    "MatchEngine",
    "ScoringRules",
    "GameSnapshot",
    "GameState",
    "GameStatus",
    "GameConfig",
    "PlacementOutcome",
    "RotationOutcome",
    "StateChanged",
    "CellsRemoved",
    "WordsFormed",
    "WordTrisGame",
]
