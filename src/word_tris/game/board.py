from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from word_tris.constants import MIN_WORD_LEN, WILDCARD
from word_tris.errors import InvalidPlacement
from .pieces import Piece


Coordinate = Tuple[int, int]

EMPTY_MARK = "."


@dataclass(frozen=True)
class RemovedCell:
    position: Coordinate
    letter: str
    tag: str


@dataclass(frozen=True)
class Candidate:
    """A scanned window of letters; ``fuzzy`` when it contains a wildcard."""

    text: str
    cells: Tuple[Coordinate, ...]
    axis: str
    fuzzy: bool = False


class Board:
    """Discrete 2D letter grid.

    Cells are ``None`` when empty and hold a single letter otherwise. The
    owner array keeps the id of the piece that wrote each cell (0 = none) and
    the tag array its cosmetic tag, so removals can be replayed by a UI.
    Coordinates are ``(x, y)`` = ``(col, row)``.
    """

    def __init__(self, width: int = 10, height: int = 10) -> None:
        self.width = int(width)
        self.height = int(height)
        self.letters = np.full((self.height, self.width), None, dtype=object)
        self.owners = np.zeros((self.height, self.width), dtype=np.int64)
        self.tags = np.full((self.height, self.width), "", dtype=object)

    @classmethod
    def from_rows(cls, rows: Sequence[str]) -> "Board":
        height = len(rows)
        width = max((len(r) for r in rows), default=0)
        board = cls(width, height)
        for y, row in enumerate(rows):
            for x, ch in enumerate(row):
                if ch != EMPTY_MARK:
                    board.letters[y, x] = ch
        return board

    def reset(self) -> None:
        self.letters.fill(None)
        self.owners.fill(0)
        self.tags.fill("")

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_empty(self, x: int, y: int) -> bool:
        return self.letters[y, x] is None

    def letter_at(self, x: int, y: int) -> Optional[str]:
        if not self.is_inside(x, y):
            return None
        return self.letters[y, x]

    def owner_at(self, x: int, y: int) -> int:
        if not self.is_inside(x, y):
            return 0
        return int(self.owners[y, x])

    def is_valid_placement(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if not self.is_inside(x, y):
                return False
            if self.letters[y, x] is not None:
                return False
        return True

    def _mapped_cells(self, piece: Piece, target_cells: Sequence[Coordinate]) -> List[Tuple[Coordinate, Coordinate]]:
        relative = piece.relative_cells()
        if len(target_cells) != len(relative):
            raise InvalidPlacement(
                f"piece {piece.id} covers {len(relative)} cells, got {len(target_cells)} targets"
            )
        base_x, base_y = target_cells[0]
        origin_x, origin_y = relative[0]
        mapped = [((base_x - origin_x + dx, base_y - origin_y + dy), (dx, dy)) for dx, dy in relative]
        if {cell for cell, _ in mapped} != {tuple(c) for c in target_cells}:
            raise InvalidPlacement(f"target cells do not match the shape of piece {piece.id}")
        return mapped

    def check_placement(self, piece: Piece, target_cells: Sequence[Coordinate]) -> List[Tuple[Coordinate, Coordinate]]:
        """Validate a placement without committing it; raises InvalidPlacement."""
        if not target_cells:
            raise InvalidPlacement("no target cells")
        mapped = self._mapped_cells(piece, target_cells)
        if not self.is_valid_placement(cell for cell, _ in mapped):
            raise InvalidPlacement(f"piece {piece.id} is out of bounds or overlaps")
        return mapped

    def place(self, piece: Piece, target_cells: Sequence[Coordinate]) -> List[Coordinate]:
        """Write the piece's letters onto the grid, all or nothing."""
        mapped = self.check_placement(piece, target_cells)
        written: List[Coordinate] = []
        for (x, y), (dx, dy) in mapped:
            self.letters[y, x] = piece.letter_at(dx, dy)
            self.owners[y, x] = piece.id
            self.tags[y, x] = piece.tag
            written.append((x, y))
        return written

    def _runs(self, line: np.ndarray) -> List[Tuple[int, int]]:
        runs: List[Tuple[int, int]] = []
        start = None
        for i, letter in enumerate(line):
            if letter is not None and start is None:
                start = i
            elif letter is None and start is not None:
                runs.append((start, i))
                start = None
        if start is not None:
            runs.append((start, len(line)))
        return runs

    def scan_words(self, min_len: int = MIN_WORD_LEN) -> List[Candidate]:
        """Every window of length >= min_len inside every row/column run.

        Overlapping windows are all reported; deduplication is up to the
        caller.
        """
        found: List[Candidate] = []
        for y in range(self.height):
            line = self.letters[y, :]
            for start, end in self._runs(line):
                found.extend(self._windows(line, start, end, min_len, lambda i: (i, y), "row"))
        for x in range(self.width):
            line = self.letters[:, x]
            for start, end in self._runs(line):
                found.extend(self._windows(line, start, end, min_len, lambda i: (x, i), "col"))
        return found

    @staticmethod
    def _windows(line, start, end, min_len, to_cell, axis) -> List[Candidate]:
        out: List[Candidate] = []
        for i in range(start, end):
            for j in range(i + min_len, end + 1):
                letters = [line[k] for k in range(i, j)]
                out.append(
                    Candidate(
                        text="".join(letters),
                        cells=tuple(to_cell(k) for k in range(i, j)),
                        axis=axis,
                        fuzzy=WILDCARD in letters,
                    )
                )
        return out

    def remove_cells(self, cells: Iterable[Coordinate]) -> List[RemovedCell]:
        removed: List[RemovedCell] = []
        for x, y in dict.fromkeys(cells):
            if not self.is_inside(x, y) or self.letters[y, x] is None:
                continue
            removed.append(RemovedCell(position=(x, y), letter=self.letters[y, x], tag=self.tags[y, x]))
            self.letters[y, x] = None
            self.owners[y, x] = 0
            self.tags[y, x] = ""
        return removed

    def explode(self, center: Coordinate) -> List[RemovedCell]:
        cx, cy = center
        area = [
            (x, y)
            for y in range(cy - 1, cy + 2)
            for x in range(cx - 1, cx + 2)
            if self.is_inside(x, y)
        ]
        return self.remove_cells(area)

    def is_full(self) -> bool:
        return not any(letter is None for letter in self.letters.flat)

    def filled_count(self) -> int:
        return sum(1 for letter in self.letters.flat if letter is not None)

    def rows(self) -> List[str]:
        return [
            "".join(EMPTY_MARK if letter is None else letter for letter in self.letters[y, :])
            for y in range(self.height)
        ]

    def copy(self) -> "Board":
        new_board = Board(self.width, self.height)
        new_board.letters = self.letters.copy()
        new_board.owners = self.owners.copy()
        new_board.tags = self.tags.copy()
        return new_board

    def __str__(self) -> str:
        return "\n".join(self.rows())
