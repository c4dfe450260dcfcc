import random

import pytest

from word_tris.constants import BOMB_SYMBOL, WILDCARD
from word_tris.game.curator import WordSetCurator
from word_tris.game.factory import BOMB_COLOR, PIECE_COLORS, PieceFactory
from word_tris.game.pieces import PieceShape
from word_tris.lexicon import Lexicon
from word_tris.lexicon.fallback import COMMON_SYLLABLES


def _factory(**kwargs) -> PieceFactory:
    rng = random.Random(5)
    curator = WordSetCurator(Lexicon(), rng)
    curator.select_initial()
    return PieceFactory(curator, rng, **kwargs)


def test_ids_increase_from_one():
    factory = _factory()
    ids = [factory.create_random_piece().id, factory.create_bomb_piece().id, factory.create_wildcard_piece().id]
    assert ids == [1, 2, 3]
    factory.reset()
    assert factory.create_random_piece().id == 1


def test_random_piece_letters_come_from_curator():
    factory = _factory()
    active = factory.curator.active_words
    allowed = {ch for word in active for ch in word} | set(COMMON_SYLLABLES[:10])
    for _ in range(30):
        piece = factory.create_random_piece()
        assert 1 <= piece.size <= 4
        assert len(piece.characters) == piece.size
        assert set(piece.characters) <= allowed
        assert piece.tag in PIECE_COLORS


def test_size_weights_select_piece_size():
    factory = _factory(size_weights=(0, 0, 0, 1))
    assert all(factory.create_random_piece().size == 4 for _ in range(20))


def test_size_weights_need_four_entries():
    with pytest.raises(ValueError):
        _factory(size_weights=(1, 1))


def test_special_pieces():
    factory = _factory()
    bomb = factory.create_bomb_piece()
    assert bomb.is_bomb and not bomb.is_wildcard
    assert bomb.shape is PieceShape.BOMB
    assert bomb.characters == [BOMB_SYMBOL]
    assert bomb.tag == BOMB_COLOR
    assert bomb.rotate() is bomb
    wild = factory.create_wildcard_piece()
    assert wild.is_wildcard and not wild.is_bomb
    assert wild.characters == [WILDCARD]
    assert wild.rotate() is wild
