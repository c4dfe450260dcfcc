import asyncio

import pytest

from word_tris.errors import AssetUnavailable
from word_tris.game import (
    Board,
    CellsRemoved,
    GameConfig,
    GameStatus,
    Piece,
    PieceShape,
    StateChanged,
    WordsFormed,
    WordTrisGame,
)
from word_tris.lexicon import Lexicon

from conftest import make_game


def test_start_fills_tray_and_plays():
    game = make_game()
    asyncio.run(game.start())
    snap = game.snapshot()
    assert snap.status is GameStatus.PLAYING
    assert len(snap.tray) == 4
    assert [p.id for p in snap.tray] == [1, 2, 3, 4]
    assert snap.score == 0 and snap.level == 1
    assert snap.active_words == ("가나다",)
    assert all(row == "." * 10 for row in snap.rows)


def test_every_third_generated_piece_is_a_wildcard():
    game = make_game()
    asyncio.run(game.start())
    flags = [p.is_wildcard for p in game.state.tray]
    assert flags == [False, False, True, False]


def test_same_seed_same_tray():
    first, second = make_game(random_seed=11), make_game(random_seed=11)
    asyncio.run(first.start())
    asyncio.run(second.start())
    assert [p.characters for p in first.state.tray] == [p.characters for p in second.state.tray]


def test_two_letters_form_no_word():
    game = make_game()

    async def scenario():
        await game.start()
        piece = Piece.build(100, PieceShape.HORIZONTAL2, ["가", "나"])
        game.state.tray = [piece]
        return await game.place_piece(100, [(0, 0), (1, 0)])

    outcome = asyncio.run(scenario())
    assert outcome.ok
    assert outcome.words == ()
    assert game.state.score == 0
    assert game.state.board.letter_at(0, 0) == "가"
    assert game.state.board.letter_at(1, 0) == "나"
    assert len(game.state.tray) == 1
    assert game.state.tray[0].id != 100


def test_completing_a_word_clears_and_scores():
    game = make_game()
    events = []
    game.subscribe(events.append)

    async def scenario():
        await game.start()
        game.state.board.place(Piece.build(50, PieceShape.HORIZONTAL2, ["가", "나"]), [(0, 0), (1, 0)])
        game.state.tray = [Piece.build(101, PieceShape.SINGLE, ["다"])]
        return await game.place_piece(101, [(2, 0)])

    outcome = asyncio.run(scenario())
    assert [w.text for w in outcome.words] == ["가나다"]
    assert outcome.gained == 30
    assert all(game.state.board.is_empty(x, 0) for x in range(3))
    assert game.state.score == 30
    assert game.state.clear_streak == 1
    assert game.snapshot().formed_words == ("가나다",)
    assert game.snapshot().usage_counts == {"가나다": 1}

    formed = [e for e in events if isinstance(e, WordsFormed)]
    removed = [e for e in events if isinstance(e, CellsRemoved)]
    assert len(formed) == 1 and formed[0].gained == 30
    assert removed[0].cause == "words"
    assert sorted(c.position for c in removed[0].cells) == [(0, 0), (1, 0), (2, 0)]
    assert isinstance(events[-1], StateChanged)
    assert events[-1].snapshot.score == 30


def test_wildcard_completes_a_word():
    game = make_game()

    async def scenario():
        await game.start()
        wild = game.state.tray[2]
        game.state.board.place(Piece.build(50, PieceShape.SINGLE, ["가"]), [(0, 0)])
        game.state.board.place(Piece.build(51, PieceShape.SINGLE, ["다"]), [(2, 0)])
        game.state.tray = [wild]
        return await game.place_piece(wild.id, [(1, 0)])

    outcome = asyncio.run(scenario())
    (word,) = outcome.words
    assert word.text == "가나다"
    assert word.pattern == "가?다"
    assert game.state.score == 30


def test_bomb_after_three_clears_and_explosion():
    game = make_game()
    rows = [
        "..........",
        "..........",
        "..........",
        "...쿄......",
        "....쿄쿄....",
        ".......쿄..",
        "....쿄.쿄...",
        "..........",
        "..........",
        "..........",
    ]

    async def scenario():
        await game.start()
        game.state.clear_streak = 3
        game.state.tray = [Piece.build(102, PieceShape.SINGLE, ["라"])]
        await game.place_piece(102, [(9, 9)])
        bomb = game.state.tray[0]
        assert bomb.is_bomb
        assert game.state.bomb_armed
        game.state.board = Board.from_rows(rows)
        return await game.place_piece(bomb.id, [(5, 5)])

    outcome = asyncio.run(scenario())
    assert outcome.ok and outcome.exploded
    assert sorted(c.position for c in outcome.removed) == [(4, 4), (4, 6), (5, 4), (6, 6)]
    assert game.state.board.letter_at(3, 3) == "쿄"
    assert game.state.board.letter_at(7, 5) == "쿄"
    assert game.state.clear_streak == 0
    assert game.state.bomb_armed is False
    assert not any(p.is_bomb for p in game.state.tray)


def test_invalid_placement_is_a_result_not_an_exception():
    game = make_game()

    async def scenario():
        await game.start()
        game.state.board.place(Piece.build(50, PieceShape.SINGLE, ["가"]), [(0, 0)])
        game.state.tray = [Piece.build(103, PieceShape.HORIZONTAL2, ["나", "다"])]
        overlapping = await game.place_piece(103, [(0, 0), (1, 0)])
        unknown = await game.place_piece(999, [(5, 5)])
        return overlapping, unknown

    overlapping, unknown = asyncio.run(scenario())
    assert not overlapping.ok and overlapping.reason
    assert not unknown.ok
    assert [p.id for p in game.state.tray] == [103]
    assert game.state.board.filled_count() == 1


def test_rotate_piece():
    game = make_game()
    asyncio.run(game.start())
    game.state.tray = [Piece.build(104, PieceShape.HORIZONTAL2, ["가", "나"])]
    outcome = game.rotate_piece(104)
    assert outcome.ok
    assert outcome.piece.shape is PieceShape.VERTICAL2
    assert game.state.tray[0].rotation == 1
    assert not game.rotate_piece(12345).ok


def test_pause_blocks_moves_until_resumed():
    game = make_game()

    async def scenario():
        await game.start()
        piece = game.state.tray[0]
        assert game.pause()
        assert not game.pause()
        refused = await game.place_piece(piece.id, piece.cells_at(0, 0))
        assert not game.rotate_piece(piece.id).ok
        assert game.resume()
        assert not game.resume()
        accepted = await game.place_piece(piece.id, piece.cells_at(0, 0))
        return refused, accepted

    refused, accepted = asyncio.run(scenario())
    assert not refused.ok and "paused" in refused.reason
    assert accepted.ok


def test_empty_tray_ends_the_game():
    game = make_game(tray_capacity=0, initial_tray_size=1)

    async def scenario():
        await game.start()
        piece = game.state.tray[0]
        first = await game.place_piece(piece.id, piece.cells_at(0, 0))
        second = await game.place_piece(piece.id, piece.cells_at(5, 5))
        return first, second

    first, second = asyncio.run(scenario())
    assert first.ok and first.game_over
    assert game.snapshot().game_over
    assert not second.ok


def test_full_board_ends_the_game():
    game = make_game()

    async def scenario():
        await game.start()
        game.state.board = Board.from_rows(["쿄" * 10] * 9 + ["쿄" * 9 + "."])
        game.state.tray = [Piece.build(200, PieceShape.SINGLE, ["쿄"])]
        return await game.place_piece(200, [(9, 9)])

    outcome = asyncio.run(scenario())
    assert outcome.game_over
    assert game.state.status is GameStatus.GAME_OVER
    assert not game.has_valid_move()


def test_has_valid_move_never_changes_status():
    game = make_game()
    asyncio.run(game.start())
    assert game.has_valid_move()
    game.state.board = Board.from_rows(["쿄" * 10] * 10)
    assert not game.has_valid_move()
    assert game.state.status is GameStatus.PLAYING


def test_restart_resets_everything():
    game = make_game()

    async def scenario():
        await game.start()
        game.state.board.place(Piece.build(50, PieceShape.HORIZONTAL2, ["가", "나"]), [(0, 0), (1, 0)])
        game.state.tray = [Piece.build(101, PieceShape.SINGLE, ["다"])]
        await game.place_piece(101, [(2, 0)])
        game.pause()
        await game.restart(seed=5)

    asyncio.run(scenario())
    snap = game.snapshot()
    assert snap.status is GameStatus.PLAYING
    assert snap.score == 0 and snap.level == 1 and snap.clear_streak == 0
    assert snap.formed_words == ()
    assert len(snap.tray) == 4 and snap.tray[0].id == 1
    assert game.state.board.filled_count() == 0


def test_unsubscribe_stops_events():
    game = make_game()
    events = []
    unsubscribe = game.subscribe(events.append)
    asyncio.run(game.start())
    seen = len(events)
    assert seen > 0
    unsubscribe()
    game.pause()
    assert len(events) == seen


def test_hints_and_definitions():
    game = make_game(["가나다", "가나라", "나비야"], random_seed=1)
    game.definition_lookup = lambda word: f"definition of {word}"
    asyncio.run(game.start())
    assert game.suggest_words("가나") == ["가나다", "가나라"]
    assert game.lookup_word("가나다") == "definition of 가나다"
    game.definition_lookup = None
    assert game.lookup_word("가나다") is None


def test_placement_leaves_no_second_bomb_while_one_is_armed():
    game = make_game()

    async def scenario():
        await game.start()
        game.state.clear_streak = 3
        game.state.tray = [Piece.build(102, PieceShape.SINGLE, ["라"])]
        await game.place_piece(102, [(9, 9)])
        assert game.state.tray[0].is_bomb
        game.state.board.place(Piece.build(50, PieceShape.HORIZONTAL2, ["가", "나"]), [(0, 0), (1, 0)])
        game.state.tray.append(Piece.build(101, PieceShape.SINGLE, ["다"]))
        return await game.place_piece(101, [(2, 0)])

    outcome = asyncio.run(scenario())
    assert [w.text for w in outcome.words] == ["가나다"]
    assert game.state.clear_streak == 4
    assert sum(p.is_bomb for p in game.state.tray) == 1
    assert game.state.bomb_armed


def test_bomb_on_occupied_cell_is_refused():
    game = make_game()

    async def scenario():
        await game.start()
        game.state.clear_streak = 3
        game.state.tray = [Piece.build(102, PieceShape.SINGLE, ["라"])]
        await game.place_piece(102, [(9, 9)])
        bomb = game.state.tray[0]
        game.state.board.place(Piece.build(50, PieceShape.SINGLE, ["가"]), [(5, 5)])
        before = game.snapshot()
        return bomb, before, await game.place_piece(bomb.id, [(5, 5)])

    bomb, before, outcome = asyncio.run(scenario())
    assert not outcome.ok and not outcome.exploded
    assert outcome.removed == ()
    after = game.snapshot()
    assert after.rows == before.rows
    assert after.tray == before.tray == (bomb,)
    assert after.bomb_armed and after.clear_streak == 3


class GatedLoader:
    """Holds every bucket load until ``gate`` is set."""

    def __init__(self):
        self.gate = None

    def bucket_keys(self):
        return []

    async def load_bucket(self, key):
        await self.gate.wait()
        return ["가나다"]

    async def load_bootstrap(self):
        raise AssetUnavailable("no bootstrap")

    async def load_frequency_table(self):
        raise AssetUnavailable("no table")


def test_restart_during_placement_drops_the_stale_result():
    loader = GatedLoader()
    game = WordTrisGame(GameConfig(random_seed=7), lexicon=Lexicon(loader, fallback_words=["가나다"]))

    async def scenario():
        loader.gate = asyncio.Event()
        await game.start()
        game.state.board.place(Piece.build(50, PieceShape.HORIZONTAL2, ["가", "나"]), [(0, 0), (1, 0)])
        game.state.tray = [Piece.build(101, PieceShape.SINGLE, ["다"])]
        pending = asyncio.ensure_future(game.place_piece(101, [(2, 0)]))
        for _ in range(5):
            await asyncio.sleep(0)
        assert not pending.done()
        await game.restart()
        loader.gate.set()
        stale = await pending
        snap = game.snapshot()
        piece = game.state.tray[0]
        fresh = await game.place_piece(piece.id, piece.cells_at(0, 0))
        return stale, snap, fresh

    stale, snap, fresh = asyncio.run(scenario())
    assert not stale.ok and "restarted" in stale.reason
    assert stale.words == ()
    assert snap.usage_counts == {"가나다": 0}
    assert snap.score == 0 and snap.clear_streak == 0
    assert snap.formed_words == ()
    assert len(snap.tray) == 4
    assert all(row == "." * 10 for row in snap.rows)
    # the next placement is accepted once the stale one is gone
    assert fresh.ok


def test_snapshot_usage_counts_are_read_only():
    game = make_game()
    asyncio.run(game.start())
    snap = game.snapshot()
    with pytest.raises(TypeError):
        snap.usage_counts["가나다"] = 9
    assert game.curator.usage_counts == {"가나다": 0}
