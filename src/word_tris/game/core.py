from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from word_tris.constants import BOARD_SIZE, INITIAL_TRAY_SIZE, TRAY_CAPACITY
from word_tris.errors import InvalidPlacement
from word_tris.lexicon import AssetLoader, Lexicon

from .board import Board, Coordinate, RemovedCell
from .curator import CuratorConfig, WordSetCurator
from .factory import DEFAULT_SIZE_WEIGHTS, PieceFactory
from .matching import FoundWord, MatchEngine
from .pieces import Piece
from .rules import ScoringRules
from .state import GameSnapshot, GameState, GameStatus

log = logging.getLogger("word_tris.game")


@dataclass
class GameConfig:
    width: int = BOARD_SIZE
    height: int = BOARD_SIZE
    random_seed: Optional[int] = None
    tray_capacity: int = TRAY_CAPACITY
    initial_tray_size: int = INITIAL_TRAY_SIZE
    bomb_every_clears: int = 3  # 0 disables bombs
    wildcard_every_pieces: int = 3  # 0 disables wildcards
    size_weights: Tuple[float, ...] = DEFAULT_SIZE_WEIGHTS
    preload_buckets: Optional[Tuple[str, ...]] = None  # None = every bucket
    curator: CuratorConfig = field(default_factory=CuratorConfig)


@dataclass(frozen=True)
class StateChanged:
    snapshot: GameSnapshot


@dataclass(frozen=True)
class CellsRemoved:
    cause: str  # "words" or "explosion"
    cells: Tuple[RemovedCell, ...]


@dataclass(frozen=True)
class WordsFormed:
    words: Tuple[FoundWord, ...]
    gained: int


GameEvent = Union[StateChanged, CellsRemoved, WordsFormed]
Listener = Callable[[GameEvent], None]


@dataclass(frozen=True)
class PlacementOutcome:
    ok: bool
    reason: str = ""
    words: Tuple[FoundWord, ...] = ()
    gained: int = 0
    removed: Tuple[RemovedCell, ...] = ()
    exploded: bool = False
    game_over: bool = False


@dataclass(frozen=True)
class RotationOutcome:
    ok: bool
    reason: str = ""
    piece: Optional[Piece] = None


class WordTrisGame:
    """Game state machine and the only entry point for UIs and agents.

    The tray starts with ``initial_tray_size`` pieces and is topped up by
    one piece per placement. Every placement runs a word scan; matched cells
    are cleared and scored. Bombs and wildcards are injected by cadence:
    a bomb after ``bomb_every_clears`` consecutive clearing placements, a
    wildcard every ``wildcard_every_pieces`` generated pieces.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        lexicon: Optional[Lexicon] = None,
        loader: Optional[AssetLoader] = None,
        definition_lookup: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.lexicon = lexicon or Lexicon(loader)
        self.rng = random.Random(self.config.random_seed)
        self.curator = WordSetCurator(self.lexicon, self.rng, self.config.curator)
        self.factory = PieceFactory(self.curator, self.rng, self.config.size_weights)
        self.matcher = MatchEngine(self.lexicon, self.curator, self.rules)
        self.definition_lookup = definition_lookup
        self.state = GameState(board=Board(self.config.width, self.config.height))
        self._listeners: List[Listener] = []
        self._warmed = False
        self._busy = False

    # ------------------------------------------------------------------ events

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for game events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: GameEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _changed(self) -> None:
        if self._listeners:
            self._emit(StateChanged(self.snapshot()))

    # ------------------------------------------------------------------ lifecycle

    async def start(self) -> None:
        self.state = GameState(board=Board(self.config.width, self.config.height))
        self._changed()
        if not self._warmed:
            await self.lexicon.warm(self.config.preload_buckets)
            self._warmed = True
        self.curator.select_initial()
        self.factory.reset()
        for _ in range(self.config.initial_tray_size):
            self.state.tray.append(self._generate_piece())
        self.state.status = GameStatus.PLAYING
        log.info("Game started with %d active words", len(self.curator.active_words))
        self._changed()

    async def restart(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        await self.start()

    def pause(self) -> bool:
        if self.state.status is not GameStatus.PLAYING:
            return False
        self.state.status = GameStatus.PAUSED
        self._changed()
        return True

    def resume(self) -> bool:
        if self.state.status is not GameStatus.PAUSED:
            return False
        self.state.status = GameStatus.PLAYING
        self._changed()
        return True

    # ------------------------------------------------------------------ pieces

    def _generate_piece(self) -> Piece:
        state = self.state
        state.pieces_generated += 1
        bomb_every = self.config.bomb_every_clears
        if bomb_every > 0 and state.clear_streak >= bomb_every and not state.bomb_armed:
            state.bomb_armed = True
            log.debug("Bomb armed after %d clears", state.clear_streak)
            return self.factory.create_bomb_piece()
        wildcard_every = self.config.wildcard_every_pieces
        if wildcard_every > 0 and state.pieces_generated % wildcard_every == 0:
            return self.factory.create_wildcard_piece()
        return self.factory.create_random_piece()

    def find_piece(self, piece_id: int) -> Optional[Piece]:
        for piece in self.state.tray:
            if piece.id == piece_id:
                return piece
        return None

    def _refusal(self) -> Optional[str]:
        if self.state.status is not GameStatus.PLAYING:
            return f"game is {self.state.status.value}"
        if self._busy:
            return "a placement is being resolved"
        return None

    def rotate_piece(self, piece_id: int) -> RotationOutcome:
        reason = self._refusal()
        if reason:
            return RotationOutcome(False, reason)
        piece = self.find_piece(piece_id)
        if piece is None:
            return RotationOutcome(False, f"piece {piece_id} is not in the tray")
        rotated = piece.rotate()
        if rotated is not piece:
            self.state.tray[self.state.tray.index(piece)] = rotated
            self._changed()
        return RotationOutcome(True, piece=rotated)

    async def place_piece(self, piece_id: int, cells: Sequence[Coordinate]) -> PlacementOutcome:
        reason = self._refusal()
        if reason:
            return PlacementOutcome(False, reason)
        piece = self.find_piece(piece_id)
        if piece is None:
            return PlacementOutcome(False, f"piece {piece_id} is not in the tray")
        targets = [(int(x), int(y)) for x, y in cells]
        try:
            self.state.board.check_placement(piece, targets)
        except InvalidPlacement as exc:
            log.debug("Rejected placement of piece %d: %s", piece_id, exc)
            return PlacementOutcome(False, str(exc))

        self._busy = True
        try:
            return await self._resolve_placement(piece, targets)
        finally:
            self._busy = False

    async def _resolve_placement(self, piece: Piece, targets: List[Coordinate]) -> PlacementOutcome:
        state = self.state
        exploded: Tuple[RemovedCell, ...] = ()
        if piece.is_bomb:
            exploded = tuple(state.board.explode(targets[0]))
            state.bomb_armed = False
            state.clear_streak = 0
            log.debug("Bomb at %s cleared %d cells", targets[0], len(exploded))
            self._emit(CellsRemoved("explosion", exploded))
        else:
            state.board.place(piece, targets)

        state.tray.remove(piece)
        if len(state.tray) < self.config.tray_capacity:
            state.tray.append(self._generate_piece())

        words = await self.matcher.find_words(state.board)
        if self.state is not state:
            # restarted while the lookups ran; the old board's words belong to no game
            log.info("Dropped placement of piece %d after a restart", piece.id)
            return PlacementOutcome(False, "game was restarted while the placement resolved")
        resolution = self.matcher.on_words_found(state, words)
        if resolution.words:
            state.score += resolution.gained
            level = self.rules.level_for(state.score)
            if level != state.level:
                log.info("Level %d reached at %d points", level, state.score)
            state.level = level
            self._emit(WordsFormed(resolution.words, resolution.gained))
            self._emit(CellsRemoved("words", resolution.removed))

        if not state.tray or state.board.is_full():
            state.status = GameStatus.GAME_OVER
            log.info("Game over with %d points after %d words", state.score, state.words_cleared)
        self._changed()
        return PlacementOutcome(
            ok=True,
            words=resolution.words,
            gained=resolution.gained,
            removed=exploded + resolution.removed,
            exploded=piece.is_bomb,
            game_over=state.status is GameStatus.GAME_OVER,
        )

    # ------------------------------------------------------------------ queries

    def snapshot(self) -> GameSnapshot:
        state = self.state
        return GameSnapshot(
            rows=tuple(state.board.rows()),
            tray=tuple(state.tray),
            score=state.score,
            level=state.level,
            status=state.status,
            clear_streak=state.clear_streak,
            bomb_armed=state.bomb_armed,
            active_words=tuple(self.curator.active_words),
            usage_counts=MappingProxyType(self.curator.usage_counts),
            formed_words=tuple(state.formed_words),
        )

    def valid_placements(self, piece: Piece) -> List[List[Coordinate]]:
        """Target cell lists accepted for ``piece`` in its current rotation."""
        board = self.state.board
        placements = []
        for y in range(board.height - piece.height + 1):
            for x in range(board.width - piece.width + 1):
                cells = piece.cells_at(x, y)
                if board.is_valid_placement(cells):
                    placements.append(cells)
        return placements

    def has_valid_move(self) -> bool:
        # diagnostic only; status is decided by tray and board fullness
        for piece in self.state.tray:
            for turn in range(4 if piece.rotatable else 1):
                if self.valid_placements(piece.rotated(turn)):
                    return True
        return False

    def suggest_words(self, prefix: str, limit: int = 20) -> List[str]:
        return self.lexicon.prefix_search(prefix, limit)

    def lookup_word(self, word: str) -> Any:
        if self.definition_lookup is None:
            return None
        return self.definition_lookup(word)
