"""Round state: an immutable value passed through the state machine."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from wordchain.benchmarks import Benchmarks, Grade
from wordchain.board import Board, Position
from wordchain.game.special import SpecialGrid

SNAPSHOT_VERSION = 1


class Phase(StrEnum):
    """Path construction phase."""

    IDLE = "idle"
    BUILDING = "building"
    WILDCARD_PENDING = "wildcard_pending"


@dataclass(frozen=True)
class WordRecord:
    """A committed word."""

    word: str
    path: tuple[Position, ...]
    score: int

    @property
    def tiles(self) -> frozenset[str]:
        """Tile-set of the word, as position keys."""
        return frozenset(pos.key for pos in self.path)

    def to_dict(self) -> dict:
        return {"word": self.word, "path": [pos.key for pos in self.path], "score": self.score}

    @classmethod
    def from_dict(cls, data: Mapping) -> "WordRecord":
        return cls(
            word=str(data["word"]),
            path=tuple(Position.from_key(key) for key in data["path"]),
            score=int(data["score"]),
        )


@dataclass(frozen=True, kw_only=True)
class RoundState:
    """Everything that describes one round in progress.

    Board and SpecialGrid are mutable containers; transitions copy them before any change
    so that a RoundState is never modified once created.
    """

    board: Board
    special: SpecialGrid
    initial_board: Board
    """Board as generated, before any special tile effect."""

    seed: str | None = None
    """Seed the board was generated from (daily mode), if any."""

    phase: Phase = Phase.IDLE
    path: tuple[Position, ...] = ()
    """Path currently being drawn."""

    wild_index: int | None = None
    """Index into `path` of the wild tile awaiting a letter (WILDCARD_PENDING only)."""

    history: tuple[WordRecord, ...] = ()
    used_words: frozenset[str] = frozenset()
    chain_tiles: frozenset[Position] = frozenset()
    """Tiles of the most recently committed word; empty before the first word."""

    score: int = 0
    streak: int = 0
    moves: int = 0
    move_limit: int | None = None
    """Maximum number of committed words (daily mode), or None for unlimited."""

    score_multiplier: float = 1.0
    """External multiplier applied to the next committed word only."""

    benchmarks: Benchmarks | None = None
    discoverable_words: int = 0
    game_over: bool = False
    grade: Grade | None = None
    """Final grade, set when the round ends."""

    @classmethod
    def new(
        cls,
        board: Board,
        *,
        special: SpecialGrid | None = None,
        seed: str | None = None,
        move_limit: int | None = None,
        benchmarks: Benchmarks | None = None,
        discoverable_words: int = 0,
    ) -> "RoundState":
        """Start a round on `board` (which is copied)."""
        return cls(
            board=board.copy(),
            special=special.copy() if special is not None else SpecialGrid(board.size),
            initial_board=board.copy(),
            seed=seed,
            move_limit=move_limit,
            benchmarks=benchmarks,
            discoverable_words=discoverable_words,
        )

    @property
    def current_word(self) -> str:
        return self.board.word_at(self.path)

    @property
    def moves_left(self) -> int | None:
        if self.move_limit is None:
            return None
        return max(0, self.move_limit - self.moves)

    def to_dict(self) -> dict:
        """Serialize the committed round state.

        The in-progress path is transient and not included.
        """
        return {
            "version": SNAPSHOT_VERSION,
            "board": self.board.rows(),
            "initial_board": self.initial_board.rows(),
            "special": self.special.to_rows(),
            "seed": self.seed,
            "history": [record.to_dict() for record in self.history],
            "used_words": sorted(self.used_words),
            "chain_tiles": sorted(pos.key for pos in self.chain_tiles),
            "score": self.score,
            "streak": self.streak,
            "moves": self.moves,
            "move_limit": self.move_limit,
            "score_multiplier": self.score_multiplier,
            "benchmarks": self.benchmarks.to_dict() if self.benchmarks else None,
            "discoverable_words": self.discoverable_words,
            "game_over": self.game_over,
            "grade": self.grade.value if self.grade is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "RoundState":
        """Restore a state serialized by `to_dict`.

        Raises:
            ValueError: If the snapshot is malformed.
        """
        try:
            if data.get("version") != SNAPSHOT_VERSION:
                raise ValueError(f"Unsupported snapshot version: {data.get('version')!r}")
            board = Board.from_rows(data["board"])
            initial_board = Board.from_rows(data["initial_board"])
            special = SpecialGrid.from_rows(data["special"])
            if not board.size == initial_board.size == special.size:
                raise ValueError("Board and special tile grids differ in size.")
            chain_tiles = frozenset(Position.from_key(key) for key in data["chain_tiles"])
            if not all(board.within(*pos) for pos in chain_tiles):
                raise ValueError("Chain tile outside the board.")
            benchmarks = data.get("benchmarks")
            grade = data.get("grade")
            return cls(
                board=board,
                special=special,
                initial_board=initial_board,
                seed=data.get("seed"),
                history=tuple(WordRecord.from_dict(r) for r in data["history"]),
                used_words=frozenset(str(w) for w in data["used_words"]),
                chain_tiles=chain_tiles,
                score=int(data["score"]),
                streak=int(data["streak"]),
                moves=int(data["moves"]),
                move_limit=None if data.get("move_limit") is None else int(data["move_limit"]),
                score_multiplier=float(data.get("score_multiplier", 1.0)),
                benchmarks=Benchmarks.from_dict(benchmarks) if benchmarks else None,
                discoverable_words=int(data.get("discoverable_words", 0)),
                game_over=bool(data["game_over"]),
                grade=Grade(grade) if grade is not None else None,
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed round snapshot: {e}") from e
