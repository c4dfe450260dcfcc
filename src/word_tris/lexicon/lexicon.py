from __future__ import annotations

import asyncio
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set

from word_tris.constants import BOMB_SYMBOL, MIN_WORD_LEN, WILDCARD
from word_tris.errors import AssetUnavailable

from .fallback import COMMON_SYLLABLES, FALLBACK_WORDS, TOP_FREQUENCY_SIZE
from .hangul import BUCKET_KEYS, OTHER_BUCKET, bucket_for, has_tense_initial
from .loaders import AssetLoader

log = logging.getLogger("word_tris.lexicon")


def matches_pattern(word: str, pattern: str) -> bool:
    if len(word) != len(pattern):
        return False
    return all(p == WILDCARD or p == c for p, c in zip(pattern, word))


class Lexicon:
    """Partitioned word corpus for one game session.

    Buckets are keyed by the initial consonant of a word's first syllable
    and are pulled from ``loader`` on first use. When a bucket has no data
    the bootstrap list is consulted, and when that is missing too the
    built-in fallback words keep the game playable.

    Lookups are coroutines because a lookup may trigger a bucket load;
    results are memoized for the lifetime of the instance.
    """

    def __init__(
        self,
        loader: Optional[AssetLoader] = None,
        fallback_words: Iterable[str] = FALLBACK_WORDS,
        min_word_len: int = MIN_WORD_LEN,
    ) -> None:
        self.loader = loader
        self.min_word_len = int(min_word_len)
        self._fallback: FrozenSet[str] = frozenset(fallback_words)
        self._buckets: Dict[str, FrozenSet[str]] = {}
        self._failed: Set[str] = set()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._bootstrap: Optional[FrozenSet[str]] = None
        self._top_chars: FrozenSet[str] = frozenset(COMMON_SYLLABLES[:TOP_FREQUENCY_SIZE])
        self._valid_cache: Dict[str, bool] = {}
        self._fuzzy_cache: Dict[str, Optional[str]] = {}

    # ------------------------------------------------------------------ loading

    def bucket_keys(self) -> List[str]:
        if self.loader is None:
            return []
        return list(self.loader.bucket_keys())

    @property
    def loaded_buckets(self) -> List[str]:
        return sorted(self._buckets)

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def load_bucket(self, key: str) -> bool:
        """Load one bucket once; concurrent callers share the same load."""
        if key in self._buckets:
            return True
        if key in self._failed or self.loader is None:
            return False
        async with self._lock_for(key):
            if key in self._buckets:
                return True
            if key in self._failed:
                return False
            try:
                words = await self.loader.load_bucket(key)
            except AssetUnavailable as exc:
                log.warning("Bucket %s unavailable, using fallback words: %s", key, exc)
                self._failed.add(key)
                return False
            self._buckets[key] = frozenset(w for w in words if w)
            log.debug("Loaded bucket %s (%d words)", key, len(self._buckets[key]))
            return True

    async def _load_bootstrap(self) -> None:
        if self.loader is None or self._bootstrap is not None:
            return
        try:
            self._bootstrap = frozenset(w for w in await self.loader.load_bootstrap() if w)
        except AssetUnavailable as exc:
            log.info("No bootstrap word list: %s", exc)

    async def _load_frequency(self) -> None:
        if self.loader is None:
            return
        try:
            chars = await self.loader.load_frequency_table()
        except AssetUnavailable as exc:
            log.info("No frequency table, using built-in syllables: %s", exc)
            return
        if chars:
            self._top_chars = frozenset(chars[:TOP_FREQUENCY_SIZE])

    async def warm(self, buckets: Optional[Sequence[str]] = None) -> None:
        """Load the bootstrap list, frequency table and the given buckets.

        ``buckets=None`` preloads every bucket the loader advertises.
        """
        if self.loader is None:
            log.info("No dictionary loader, playing with %d built-in words", len(self._fallback))
            return
        await asyncio.gather(self._load_bootstrap(), self._load_frequency())
        keys = self.bucket_keys() if buckets is None else list(buckets)
        await asyncio.gather(*(self.load_bucket(k) for k in keys))
        log.info(
            "Lexicon ready: %d/%d buckets, %s words resident",
            len(self._buckets), len(keys), f"{len(self.vocabulary()):,}",
        )

    # ------------------------------------------------------------------ lookups

    def _fallback_pool(self) -> FrozenSet[str]:
        if self._bootstrap:
            return self._bootstrap
        return self._fallback

    async def _pool_for(self, key: str) -> FrozenSet[str]:
        await self.load_bucket(key)
        words = self._buckets.get(key)
        if words:
            return words
        return self._fallback_pool()

    async def _pools_for(self, word: str) -> List[FrozenSet[str]]:
        pools = [await self._pool_for(bucket_for(word))]
        if has_tense_initial(word) and await self.load_bucket(OTHER_BUCKET):
            pools.append(self._buckets[OTHER_BUCKET])
        return pools

    def _rejects(self, word: str) -> bool:
        return len(word) < self.min_word_len or BOMB_SYMBOL in word

    async def is_valid(self, word: str) -> bool:
        if word in self._valid_cache:
            return self._valid_cache[word]
        if self._rejects(word) or WILDCARD in word:
            valid = False
        else:
            valid = any(word in pool for pool in await self._pools_for(word))
        self._valid_cache[word] = valid
        return valid

    async def is_valid_fuzzy(self, pattern: str) -> Optional[str]:
        """Resolve a pattern with ``?`` placeholders to a concrete word.

        Returns the first matching word in sorted order, or ``None``.
        """
        if WILDCARD not in pattern:
            return pattern if await self.is_valid(pattern) else None
        if pattern in self._fuzzy_cache:
            return self._fuzzy_cache[pattern]
        resolved: Optional[str] = None
        if not self._rejects(pattern):
            if pattern[0] != WILDCARD:
                pools = await self._pools_for(pattern)
                pool: Iterable[str] = set().union(*pools)
            else:
                keys = self.bucket_keys() or list(BUCKET_KEYS)
                await asyncio.gather(*(self.load_bucket(k) for k in keys))
                pool = self.vocabulary()
            hits = sorted(w for w in pool if matches_pattern(w, pattern))
            resolved = hits[0] if hits else None
        self._fuzzy_cache[pattern] = resolved
        return resolved

    def prefix_search(self, prefix: str, limit: int = 20) -> List[str]:
        """Best-effort hints drawn only from data that is already resident."""
        if not prefix or limit <= 0:
            return []
        pool = self._buckets.get(bucket_for(prefix)) or self._fallback_pool()
        if has_tense_initial(prefix) and OTHER_BUCKET in self._buckets:
            pool = pool | self._buckets[OTHER_BUCKET]
        return sorted(w for w in pool if w.startswith(prefix))[:limit]

    def vocabulary(self) -> Set[str]:
        words: Set[str] = set()
        for bucket in self._buckets.values():
            words.update(bucket)
        if self._bootstrap:
            words.update(self._bootstrap)
        if not words:
            words.update(self._fallback)
        return words

    def is_rare(self, char: str) -> bool:
        return char not in self._top_chars

    @property
    def top_characters(self) -> FrozenSet[str]:
        return self._top_chars
