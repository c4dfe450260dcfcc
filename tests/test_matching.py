import asyncio

from word_tris.game.board import Board, Candidate
from word_tris.game.curator import WordSetCurator
from word_tris.game.matching import MatchEngine
from word_tris.game.state import GameState
from word_tris.lexicon import Lexicon, MemoryAssetLoader


def _engine(words):
    lexicon = Lexicon(MemoryAssetLoader(words))
    return MatchEngine(lexicon, WordSetCurator(lexicon))


def test_dedupe_by_text_and_cells():
    cells = ((0, 0), (1, 0), (2, 0))
    unique = MatchEngine.dedupe([
        Candidate("ABC", cells, "row"),
        Candidate("ABC", tuple(reversed(cells)), "row"),
        Candidate("ABC", ((0, 1), (1, 1), (2, 1)), "row"),
    ])
    assert len(unique) == 2


def test_overlapping_words_are_all_found_and_cleared_together():
    engine = _engine(["가나다", "나다라"])
    board = Board.from_rows(["가나다라", "....", "....", "...."])
    state = GameState(board=board)

    async def scenario():
        await engine.lexicon.warm()
        engine.curator.select_initial()
        return await engine.find_words(board)

    words = asyncio.run(scenario())
    assert sorted(w.text for w in words) == ["가나다", "나다라"]
    assert board.filled_count() == 4  # scanning never mutates

    result = engine.on_words_found(state, words)
    assert result.gained == 60
    assert len(result.removed) == 4
    assert board.filled_count() == 0
    assert state.clear_streak == 1
    assert sorted(state.formed_words) == ["가나다", "나다라"]
    assert engine.curator.usage_counts["가나다"] == 1


def test_wildcard_word_reports_resolved_text():
    engine = _engine(["가나다"])
    board = Board.from_rows(["가?다", "...", "..."])
    (word,) = asyncio.run(engine.find_words(board))
    assert word.text == "가나다"
    assert word.pattern == "가?다"
    assert word.used_wildcard


def test_no_words_leaves_state_alone():
    engine = _engine(["가나다"])
    state = GameState(board=Board.from_rows(["라마바", "...", "..."]))
    words = asyncio.run(engine.find_words(state.board))
    assert words == []
    result = engine.on_words_found(state, words)
    assert result.gained == 0
    assert state.clear_streak == 0
    assert state.board.filled_count() == 3


def test_bomb_flag_follows_tray():
    engine = _engine(["가나다"])
    state = GameState(board=Board.from_rows(["가나다", "...", "..."]), bomb_armed=True)
    words = asyncio.run(engine.find_words(state.board))
    engine.on_words_found(state, words)
    assert state.bomb_armed is False
