from __future__ import annotations

import itertools
import random
from typing import Optional, Sequence

from word_tris.constants import BOMB_SYMBOL, WILDCARD

from .curator import WordSetCurator
from .pieces import Piece, PieceShape, cell_count, get_random_shape_for_size

PIECE_COLORS = ("#FFC107", "#4CAF50", "#2196F3", "#E91E63", "#9C27B0", "#FF5722")
BOMB_COLOR = "#F44336"
WILDCARD_COLOR = "#9C27B0"

DEFAULT_SIZE_WEIGHTS = (0.25, 0.25, 0.25, 0.25)


class PieceFactory:
    """Builds tray pieces; letters come from the curator's pool."""

    def __init__(self, curator: WordSetCurator, rng: Optional[random.Random] = None,
                 size_weights: Sequence[float] = DEFAULT_SIZE_WEIGHTS) -> None:
        if len(size_weights) != 4:
            raise ValueError("size_weights needs one weight per size 1..4")
        self.curator = curator
        self.rng = rng or random.Random()
        self.size_weights = tuple(float(w) for w in size_weights)
        self._ids = itertools.count(1)

    def reset(self) -> None:
        self._ids = itertools.count(1)

    def _next_id(self) -> int:
        return next(self._ids)

    def create_random_piece(self) -> Piece:
        size = self.rng.choices((1, 2, 3, 4), weights=self.size_weights)[0]
        shape = get_random_shape_for_size(size, self.rng)
        letters = [self.curator.sample_letter() for _ in range(cell_count(shape))]
        return Piece.build(self._next_id(), shape, letters, tag=self.rng.choice(PIECE_COLORS))

    def create_bomb_piece(self) -> Piece:
        return Piece.build(self._next_id(), PieceShape.BOMB, [BOMB_SYMBOL], tag=BOMB_COLOR, is_bomb=True)

    def create_wildcard_piece(self) -> Piece:
        return Piece.build(self._next_id(), PieceShape.SINGLE, [WILDCARD], tag=WILDCARD_COLOR, is_wildcard=True)
