from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from word_tris.errors import MalformedPiece

log = logging.getLogger("word_tris.pieces")


Coordinate = Tuple[int, int]
LetterMatrix = Tuple[Tuple[Optional[str], ...], ...]


class PieceShape(IntEnum):
    SINGLE = 1
    HORIZONTAL2 = 2
    VERTICAL2 = 3
    HORIZONTAL3 = 4
    VERTICAL3 = 5
    L_SHAPE = 6
    REVERSE_L = 7
    CORNER = 8
    SQUARE = 9
    HORIZONTAL4 = 10
    VERTICAL4 = 11
    BOMB = 12


BASE_SHAPES = {
    PieceShape.SINGLE: np.array([[1]], dtype=np.int8),
    PieceShape.HORIZONTAL2: np.array([[1, 1]], dtype=np.int8),
    PieceShape.VERTICAL2: np.array([[1], [1]], dtype=np.int8),
    PieceShape.HORIZONTAL3: np.array([[1, 1, 1]], dtype=np.int8),
    PieceShape.VERTICAL3: np.array([[1], [1], [1]], dtype=np.int8),
    PieceShape.L_SHAPE: np.array([[1, 1], [1, 0]], dtype=np.int8),
    PieceShape.REVERSE_L: np.array([[1, 0], [1, 1]], dtype=np.int8),
    PieceShape.CORNER: np.array([[1, 1], [0, 1]], dtype=np.int8),
    PieceShape.SQUARE: np.array([[1, 1], [1, 1]], dtype=np.int8),
    PieceShape.HORIZONTAL4: np.array([[1, 1, 1, 1]], dtype=np.int8),
    PieceShape.VERTICAL4: np.array([[1], [1], [1], [1]], dtype=np.int8),
    PieceShape.BOMB: np.array([[1]], dtype=np.int8),
}

# Rectangular shapes whose reported tag flips on odd rotation states.
_ORIENTATION_PAIRS: Dict[PieceShape, PieceShape] = {
    PieceShape.HORIZONTAL2: PieceShape.VERTICAL2,
    PieceShape.VERTICAL2: PieceShape.HORIZONTAL2,
    PieceShape.HORIZONTAL3: PieceShape.VERTICAL3,
    PieceShape.VERTICAL3: PieceShape.HORIZONTAL3,
    PieceShape.HORIZONTAL4: PieceShape.VERTICAL4,
    PieceShape.VERTICAL4: PieceShape.HORIZONTAL4,
}


def _rot90(matrix: np.ndarray, k: int) -> np.ndarray:
    k = k % 4
    if k == 0:
        return matrix
    return np.rot90(matrix, k, axes=(1, 0))  # rotate clockwise when k>0


def cell_count(shape: PieceShape) -> int:
    return int(BASE_SHAPES[shape].sum())


def _fill_letters(shape: PieceShape, letters: Sequence[str], strict: bool) -> LetterMatrix:
    mask = BASE_SHAPES[shape]
    needed = int(mask.sum())
    if len(letters) != needed:
        if strict:
            raise MalformedPiece(f"{shape.name} needs {needed} letters, got {len(letters)}")
        log.warning("Clamping %d letters onto %s (%d cells)", len(letters), shape.name, needed)
    queue = list(letters[:needed])
    rows: List[Tuple[Optional[str], ...]] = []
    for r in range(mask.shape[0]):
        row: List[Optional[str]] = []
        for c in range(mask.shape[1]):
            if mask[r, c] and queue:
                row.append(queue.pop(0))
            else:
                row.append(None)
        rows.append(tuple(row))
    return tuple(rows)


@dataclass(frozen=True)
class Piece:
    """A placeable group of lettered cells.

    ``letters`` holds the base-orientation layout; the visible matrix is
    derived from it and ``rotation`` so that four rotations always return
    the same value.
    """

    id: int
    base: PieceShape
    letters: LetterMatrix
    rotation: int = 0  # 0..3
    is_bomb: bool = False
    is_wildcard: bool = False
    tag: str = ""

    @classmethod
    def build(
        cls,
        piece_id: int,
        shape: PieceShape,
        letters: Sequence[str],
        tag: str = "",
        is_bomb: bool = False,
        is_wildcard: bool = False,
        strict: bool = __debug__,
    ) -> "Piece":
        if (is_bomb or is_wildcard) and cell_count(shape) != 1:
            raise MalformedPiece("special pieces must be single-cell")
        return cls(
            id=piece_id,
            base=shape,
            letters=_fill_letters(shape, letters, strict),
            is_bomb=is_bomb,
            is_wildcard=is_wildcard,
            tag=tag,
        )

    @property
    def shape(self) -> PieceShape:
        if self.rotation % 2 == 1 and self.base in _ORIENTATION_PAIRS:
            return _ORIENTATION_PAIRS[self.base]
        return self.base

    def matrix(self) -> np.ndarray:
        base = np.empty((len(self.letters), len(self.letters[0])), dtype=object)
        for r, row in enumerate(self.letters):
            for c, letter in enumerate(row):
                base[r, c] = letter
        return _rot90(base, self.rotation)

    @property
    def size(self) -> int:
        return sum(1 for row in self.letters for letter in row if letter is not None)

    @property
    def width(self) -> int:
        return int(self.matrix().shape[1])

    @property
    def height(self) -> int:
        return int(self.matrix().shape[0])

    @property
    def characters(self) -> List[str]:
        return [letter for row in self.letters for letter in row if letter is not None]

    @property
    def rotatable(self) -> bool:
        return not (self.is_bomb or self.is_wildcard or self.size <= 1)

    def rotate(self) -> "Piece":
        if not self.rotatable:
            return self
        return replace(self, rotation=(self.rotation + 1) % 4)

    def rotated(self, delta: int) -> "Piece":
        piece = self
        for _ in range(delta % 4):
            piece = piece.rotate()
        return piece

    def relative_cells(self) -> List[Coordinate]:
        m = self.matrix()
        h, w = m.shape
        return [(c, r) for r in range(h) for c in range(w) if m[r, c] is not None]

    def letter_at(self, col: int, row: int) -> Optional[str]:
        m = self.matrix()
        h, w = m.shape
        if not (0 <= row < h and 0 <= col < w):
            return None
        return m[row, col]

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.relative_cells()]


def get_random_shape_for_size(size: int, rng: random.Random) -> PieceShape:
    if size == 1:
        return PieceShape.SINGLE
    if size == 2:
        return PieceShape.HORIZONTAL2 if rng.random() < 0.5 else PieceShape.VERTICAL2
    if size == 3:
        roll = rng.random()
        if roll < 0.4:
            return PieceShape.HORIZONTAL3
        if roll < 0.8:
            return PieceShape.VERTICAL3
        return rng.choice([PieceShape.L_SHAPE, PieceShape.REVERSE_L, PieceShape.CORNER])
    if size == 4:
        roll = rng.random()
        if roll < 0.4:
            return PieceShape.HORIZONTAL4
        if roll < 0.8:
            return PieceShape.VERTICAL4
        return PieceShape.SQUARE
    return PieceShape.SINGLE
