from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from word_tris.lexicon import Lexicon

from .board import Board, Candidate, Coordinate, RemovedCell
from .curator import WordSetCurator
from .rules import ScoringRules
from .state import GameState

log = logging.getLogger("word_tris.matching")


@dataclass(frozen=True)
class FoundWord:
    text: str
    cells: Tuple[Coordinate, ...]
    pattern: str
    axis: str
    score: int = 0

    @property
    def used_wildcard(self) -> bool:
        return self.text != self.pattern


@dataclass(frozen=True)
class Resolution:
    words: Tuple[FoundWord, ...] = ()
    gained: int = 0
    removed: Tuple[RemovedCell, ...] = ()


class MatchEngine:
    """Turns board scans into validated, scored words and clears them."""

    def __init__(self, lexicon: Lexicon, curator: WordSetCurator, rules: Optional[ScoringRules] = None) -> None:
        self.lexicon = lexicon
        self.curator = curator
        self.rules = rules or ScoringRules()

    @staticmethod
    def dedupe(candidates: Sequence[Candidate]) -> List[Candidate]:
        seen: Dict[Tuple[str, FrozenSet[Coordinate]], Candidate] = {}
        for cand in candidates:
            seen.setdefault((cand.text, frozenset(cand.cells)), cand)
        return list(seen.values())

    async def _resolve(self, cand: Candidate) -> Optional[str]:
        if cand.fuzzy:
            return await self.lexicon.is_valid_fuzzy(cand.text)
        return cand.text if await self.lexicon.is_valid(cand.text) else None

    async def find_words(self, board: Board) -> List[FoundWord]:
        """Validate every scanned window; nothing on the board changes here."""
        candidates = self.dedupe(board.scan_words(self.lexicon.min_word_len))
        resolved = await asyncio.gather(*(self._resolve(c) for c in candidates))
        return [
            FoundWord(text=text, cells=cand.cells, pattern=cand.text, axis=cand.axis)
            for cand, text in zip(candidates, resolved)
            if text is not None
        ]

    def score(self, text: str, level: int) -> int:
        return self.rules.score_word(text, level, self.lexicon.is_rare)

    def on_words_found(self, state: GameState, words: Sequence[FoundWord]) -> Resolution:
        if not words:
            return Resolution()
        state.clear_streak += 1
        # a bomb stays armed until it is placed, so only the tray can clear the flag
        state.bomb_armed = any(p.is_bomb for p in state.tray)
        scored = tuple(replace(w, score=self.score(w.text, state.level)) for w in words)
        for word in scored:
            self.curator.record_usage(word.text)
            if word.text not in state.formed_words:
                state.formed_words.append(word.text)
        state.words_cleared += len(scored)
        removed = state.board.remove_cells(cell for word in scored for cell in word.cells)
        gained = sum(w.score for w in scored)
        log.debug("Cleared %s for %d points", [w.text for w in scored], gained)
        return Resolution(words=scored, gained=gained, removed=tuple(removed))
