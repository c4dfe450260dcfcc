"""Asset loaders feeding the Lexicon.

A loader is any object with the four coroutine/method members of
:class:`AssetLoader`. Loaders signal failure by raising
:class:`~word_tris.errors.AssetUnavailable`; the Lexicon absorbs it.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from word_tris.errors import AssetUnavailable

from .hangul import BUCKET_KEYS, bucket_for

log = logging.getLogger("word_tris.lexicon")

INDEX_FILE = "korean_words_index.json"
BOOTSTRAP_FILE = "korean_words.json"
BUCKET_FILE_PATTERN = "korean_words_{key}.json"
FREQUENCY_FILES = ("korean_chars_top100.txt", "korean_chars_top101_200.txt")


class AssetLoader(Protocol):
    def bucket_keys(self) -> Sequence[str]: ...

    async def load_bucket(self, key: str) -> List[str]: ...

    async def load_bootstrap(self) -> List[str]: ...

    async def load_frequency_table(self) -> List[str]: ...


class MemoryAssetLoader:
    """Serves an in-process word list, partitioned on the fly."""

    def __init__(self, words: Iterable[str], frequency: Optional[Sequence[str]] = None,
                 bootstrap: Optional[Sequence[str]] = None) -> None:
        self._buckets: Dict[str, List[str]] = {}
        for word in words:
            word = word.strip()
            if word:
                self._buckets.setdefault(bucket_for(word), []).append(word)
        self._frequency = list(frequency) if frequency is not None else None
        self._bootstrap = list(bootstrap) if bootstrap is not None else None
        self.load_calls: Dict[str, int] = {}

    def bucket_keys(self) -> Sequence[str]:
        return [key for key in BUCKET_KEYS if key in self._buckets]

    async def load_bucket(self, key: str) -> List[str]:
        self.load_calls[key] = self.load_calls.get(key, 0) + 1
        await asyncio.sleep(0)
        if key not in self._buckets:
            raise AssetUnavailable(f"no bucket {key!r}")
        return list(self._buckets[key])

    async def load_bootstrap(self) -> List[str]:
        if self._bootstrap is None:
            raise AssetUnavailable("no bootstrap list")
        return list(self._bootstrap)

    async def load_frequency_table(self) -> List[str]:
        if self._frequency is None:
            raise AssetUnavailable("no frequency table")
        return list(self._frequency)


class JsonAssetLoader:
    """Reads the dictionary asset directory.

    Layout: ``korean_words_index.json`` maps bucket keys to word counts,
    ``korean_words_<key>.json`` holds a JSON array per bucket,
    ``korean_words.json`` is the bootstrap list and the two
    ``korean_chars_top*.txt`` files list frequent syllables one per line.

    Words with a tense initial (까, 따, 빠, 싸, 짜) may sit either in their
    plain consonant's file or in ``korean_words_기타.json``.
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self._index: Optional[Dict[str, int]] = None

    def _path(self, name: str) -> str:
        return os.path.join(self.directory, name)

    def _read_json(self, name: str):
        path = self._path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise AssetUnavailable(f"{path}: {exc}") from exc

    def _read_lines(self, name: str) -> List[str]:
        path = self._path(name)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return [line.strip() for line in f if line.strip()]
        except OSError as exc:
            raise AssetUnavailable(f"{path}: {exc}") from exc

    def bucket_keys(self) -> Sequence[str]:
        if self._index is None:
            try:
                raw = self._read_json(INDEX_FILE)
            except AssetUnavailable as exc:
                log.warning("No bucket index: %s", exc)
                raw = {}
            self._index = dict(raw) if isinstance(raw, dict) else {}
        return list(self._index)

    async def load_bucket(self, key: str) -> List[str]:
        data = await asyncio.to_thread(self._read_json, BUCKET_FILE_PATTERN.format(key=key))
        if not isinstance(data, list):
            raise AssetUnavailable(f"bucket {key!r} is not a list")
        return [str(w) for w in data]

    async def load_bootstrap(self) -> List[str]:
        data = await asyncio.to_thread(self._read_json, BOOTSTRAP_FILE)
        if not isinstance(data, list):
            raise AssetUnavailable("bootstrap list is not a list")
        return [str(w) for w in data]

    async def load_frequency_table(self) -> List[str]:
        chars: List[str] = []
        for name in FREQUENCY_FILES:
            chars.extend(await asyncio.to_thread(self._read_lines, name))
        return chars
