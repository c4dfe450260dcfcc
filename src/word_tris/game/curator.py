from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from word_tris.lexicon import Lexicon
from word_tris.lexicon.fallback import COMMON_SYLLABLES, DEMO_WORDS

log = logging.getLogger("word_tris.curator")


@dataclass
class CuratorConfig:
    min_word_len: int = 2
    max_word_len: int = 5
    initial_words: int = 10
    words_per_batch: int = 10
    max_active_words: int = 20
    min_distinct_letters: int = 10
    refill_threshold: int = 5
    usage_ratio: float = 0.7


class WordSetCurator:
    """Keeps a small rotating set of target words and the letters they need.

    Letters handed to new pieces are drawn from the union of the active
    words' syllables, so the player is more likely to be able to complete
    one of them. Once most active words have been formed on the board, a
    fresh batch is appended and the oldest words fall off.
    """

    def __init__(self, lexicon: Lexicon, rng: Optional[random.Random] = None,
                 config: Optional[CuratorConfig] = None) -> None:
        self.lexicon = lexicon
        self.rng = rng or random.Random()
        self.config = config or CuratorConfig()
        self._active: List[str] = []
        self._usage: Dict[str, int] = {}
        self._letters: Set[str] = set()

    @property
    def active_words(self) -> List[str]:
        return list(self._active)

    @property
    def usage_counts(self) -> Dict[str, int]:
        return dict(self._usage)

    @property
    def available_letters(self) -> Set[str]:
        return set(self._letters)

    def reset(self) -> None:
        self._active.clear()
        self._usage.clear()
        self._letters.clear()

    def _candidates(self, exclude: Set[str]) -> List[str]:
        cfg = self.config
        words = sorted(
            w for w in self.lexicon.vocabulary()
            if cfg.min_word_len <= len(w) <= cfg.max_word_len and w not in exclude
        )
        self.rng.shuffle(words)
        return words

    def _add(self, words: List[str]) -> None:
        for word in words:
            self._active.append(word)
            self._usage[word] = 0

    def select_initial(self) -> List[str]:
        self.reset()
        words = self._candidates(set())[: self.config.initial_words]
        if not words:
            log.warning("Lexicon offered no candidate words, using demonstration list")
            words = list(DEMO_WORDS)
        self._add(words)
        self._derive_letters()
        log.debug("Active words: %s", self._active)
        return self.active_words

    def _derive_letters(self) -> None:
        if not self._active:
            self._add(list(DEMO_WORDS))
        letters = {ch for word in self._active for ch in word}
        if len(letters) < self.config.min_distinct_letters:
            letters.update(COMMON_SYLLABLES[: self.config.min_distinct_letters])
        self._letters = letters

    def sample_letter(self) -> str:
        if not self._letters:
            self._derive_letters()
        letter = self.rng.choice(sorted(self._letters))
        self._letters.discard(letter)
        if len(self._letters) < self.config.refill_threshold:
            self._derive_letters()
        return letter

    def record_usage(self, word: str) -> bool:
        """Count a word formed on the board; returns True if the set grew."""
        if word not in self._usage:
            return False
        self._usage[word] += 1
        used = sum(1 for w in self._active if self._usage.get(w, 0) > 0)
        if used / len(self._active) >= self.config.usage_ratio:
            return self._replenish()
        return False

    def _replenish(self) -> bool:
        batch = self._candidates(set(self._active))[: self.config.words_per_batch]
        if not batch:
            log.debug("No new words available to replenish the active set")
            return False
        self._add(batch)
        evicted: List[str] = []
        while len(self._active) > self.config.max_active_words:
            old = self._active.pop(0)
            self._usage.pop(old, None)
            evicted.append(old)
        if evicted:
            log.debug("Evicted %d old words: %s", len(evicted), evicted)
        self._derive_letters()
        log.info("Active word set replenished with %d words (%d active)", len(batch), len(self._active))
        return True
