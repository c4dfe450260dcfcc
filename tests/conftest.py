from __future__ import annotations

from typing import Iterable

import pytest

from word_tris.game import GameConfig, WordTrisGame
from word_tris.lexicon import Lexicon, MemoryAssetLoader


def make_game(words: Iterable[str] = ("가나다",), **config) -> WordTrisGame:
    config.setdefault("random_seed", 7)
    return WordTrisGame(GameConfig(**config), lexicon=Lexicon(MemoryAssetLoader(words)))


@pytest.fixture
def game_factory():
    return make_game
