"""Path/word state machine.

Every player action is a small immutable value. `apply` takes the current RoundState and an
action and returns an Outcome holding the next RoundState; the input state is never modified.
Recoverable rejections are reported on the Outcome rather than raised.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from math import prod
from string import ascii_lowercase
from typing import Any

from wordchain.benchmarks import Benchmarks, Grade
from wordchain.board import Board, Position, is_adjacent, is_valid_path
from wordchain.errors import (
    ActionUnavailable,
    AmbiguousWildcard,
    BlockedTile,
    ChainViolation,
    DictionaryNotReady,
    DictionaryUnavailable,
    GameOver,
    InvalidPath,
    SubmissionError,
    WordAlreadyUsed,
    WordChainError,
    WordNotFound,
    WordTooShort,
)
from wordchain.game.scoring import ScoringPolicy, WordScore, score_word
from wordchain.game.special import (
    SpecialGrid,
    SpecialTileType,
    apply_shuffle,
    apply_xfactor,
    spawn_special_tiles,
)
from wordchain.game.state import Phase, RoundState, WordRecord
from wordchain.game.wildcard import WildcardResolver, candidate_word, make_resolver
from wordchain.letters import ConstrainedSampler
from wordchain.solver.config import EngineConfig
from wordchain.solver.config import config as engine_config
from wordchain.solver.terminal import find_hints, has_any_valid_move
from wordchain.wordlist import MIN_WORD_LENGTH, DictionaryIndex


@dataclass(frozen=True)
class Begin:
    """Start a new path at `pos`, discarding any path in progress."""

    pos: Position


@dataclass(frozen=True)
class Extend:
    """Add `pos` to the path, or pop the last cell if `pos` is the second-to-last one."""

    pos: Position


@dataclass(frozen=True)
class Submit:
    """Validate the current path and commit its word."""


@dataclass(frozen=True)
class ResolveWildcard:
    """Supply the letter of the wild tile in a pending submission."""

    letter: str


@dataclass(frozen=True)
class CancelWildcard:
    """Abandon a pending wildcard submission."""


@dataclass(frozen=True)
class ClearPath:
    """Discard the path in progress."""


@dataclass(frozen=True)
class ActivateScoreMultiplier:
    """Multiply the score of the next committed word by `factor`. Activations stack."""

    factor: float = 2.0

    def __post_init__(self) -> None:
        if self.factor <= 0:
            raise ValueError("Score multiplier must be positive.")


@dataclass(frozen=True)
class UseHammer:
    """Remove every stone tile from the board."""


@dataclass(frozen=True)
class AddExtraMoves:
    """Raise the move cap of a limited round. Defaults to `extra_moves_amount` moves."""

    amount: int | None = None

    def __post_init__(self) -> None:
        if self.amount is not None and self.amount < 1:
            raise ValueError("Extra moves must be at least 1.")


@dataclass(frozen=True)
class CheckTerminal:
    """Re-run the game-over check (used at round start)."""


Action = (
    Begin
    | Extend
    | Submit
    | ResolveWildcard
    | CancelWildcard
    | ClearPath
    | ActivateScoreMultiplier
    | UseHammer
    | AddExtraMoves
    | CheckTerminal
)


@dataclass
class GameContext:
    """Collaborators used by the state machine.

    `dictionary` may be None while it is still loading; submissions are then rejected with
    DictionaryNotReady.
    """

    dictionary: DictionaryIndex | None = None
    rng: random.Random = field(default_factory=random.Random)
    policy: ScoringPolicy = field(default_factory=ScoringPolicy)
    resolver: WildcardResolver | None = None
    """Wildcard strategy. Defaults to the configured `wildcard_strategy`."""

    settings: EngineConfig = field(default_factory=lambda: engine_config)

    def __post_init__(self) -> None:
        if self.resolver is None:
            self.resolver = make_resolver(self.settings.wildcard_strategy)

    def require_dictionary(self) -> DictionaryIndex:
        """Return the dictionary, or raise DictionaryNotReady / DictionaryUnavailable."""
        if self.dictionary is None:
            raise DictionaryNotReady("Dictionary is still loading.")
        self.dictionary.require_ready()
        return self.dictionary


@dataclass(frozen=True)
class Outcome:
    """Result of applying one action."""

    state: RoundState
    error: WordChainError | None = None
    """Why the action was rejected, if it was."""

    committed: WordRecord | None = None
    score: WordScore | None = None
    changed_tiles: frozenset[Position] = frozenset()
    """Cells whose letter or special tile was changed by an effect (xfactor, hammer)."""

    spawned: tuple[Position, ...] = ()
    expired: tuple[Position, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


def _idle(state: RoundState) -> RoundState:
    return replace(state, phase=Phase.IDLE, path=(), wild_index=None)


def _reject(state: RoundState, error: WordChainError) -> Outcome:
    return Outcome(_idle(state), error=error)


def _is_stone(state: RoundState, pos: Position) -> bool:
    return state.special[pos].type == SpecialTileType.STONE


def _begin(state: RoundState, action: Begin, ctx: GameContext) -> Outcome:
    if state.game_over:
        return _reject(state, GameOver("The round is over."))
    pos = Position(*action.pos)
    if not state.board.within(*pos):
        return _reject(state, InvalidPath(f"{pos.key} is off the board."))
    if _is_stone(state, pos):
        return _reject(state, BlockedTile("That tile is blocked by a stone."))
    return Outcome(replace(state, phase=Phase.BUILDING, path=(pos,), wild_index=None))


def _extend(state: RoundState, action: Extend, ctx: GameContext) -> Outcome:
    # Rejected extensions leave the path as it was
    if state.phase != Phase.BUILDING:
        return Outcome(state, error=InvalidPath("No path in progress."))
    pos = Position(*action.pos)
    path = state.path
    if len(path) >= 2 and pos == path[-2]:
        return Outcome(replace(state, path=path[:-1]))
    if not state.board.within(*pos) or pos in path or not is_adjacent(path[-1], pos):
        return Outcome(state, error=InvalidPath(f"{pos.key} cannot extend the path."))
    if _is_stone(state, pos):
        return Outcome(state, error=BlockedTile("That tile is blocked by a stone."))
    return Outcome(replace(state, path=path + (pos,)))


def _submit(state: RoundState, action: Submit, ctx: GameContext) -> Outcome:
    if state.phase != Phase.BUILDING or not state.path:
        return _reject(state, InvalidPath("No path to submit."))
    path = state.path
    try:
        dictionary = ctx.require_dictionary()
        if state.game_over:
            raise GameOver("The round is over.")
        if not is_valid_path(path):
            raise InvalidPath("The path is not a chain of adjacent tiles.")
        word = state.board.word_at(path)
        if len(word) < MIN_WORD_LENGTH:
            raise WordTooShort(f"Words need at least {MIN_WORD_LENGTH} letters.", word=word)

        wilds = [i for i, pos in enumerate(path) if state.special[pos].type == SpecialTileType.WILD]
        if len(wilds) > 1:
            raise AmbiguousWildcard("Only one wild tile may be used per word.", word=word)
        wild_index = wilds[0] if wilds else None
        if wild_index is not None:
            letter = ctx.resolver.resolve(word, wild_index, dictionary, state.used_words)
            if letter is None:
                return Outcome(replace(state, phase=Phase.WILDCARD_PENDING, wild_index=wild_index))
            word = candidate_word(word, wild_index, letter)

        _validate(state, dictionary, path, word)
    except (SubmissionError, DictionaryNotReady, DictionaryUnavailable) as e:
        return _reject(state, e)
    return _commit(state, ctx, path, word, wild_index)


def _resolve_wildcard(state: RoundState, action: ResolveWildcard, ctx: GameContext) -> Outcome:
    if state.phase != Phase.WILDCARD_PENDING or state.wild_index is None:
        return _reject(state, InvalidPath("No wild tile is waiting for a letter."))
    letter = action.letter.strip().lower()
    if len(letter) != 1 or letter not in ascii_lowercase:
        # Stay pending so the player can pick again
        return Outcome(state, error=AmbiguousWildcard("Choose a single letter from A to Z."))
    path = state.path
    word = candidate_word(state.current_word, state.wild_index, letter)
    try:
        dictionary = ctx.require_dictionary()
        _validate(state, dictionary, path, word)
    except (SubmissionError, DictionaryNotReady, DictionaryUnavailable) as e:
        return _reject(state, e)
    return _commit(state, ctx, path, word, state.wild_index)


def _validate(
    state: RoundState, dictionary: DictionaryIndex, path: tuple[Position, ...], word: str
) -> None:
    if word not in dictionary:
        raise WordNotFound(
            f"'{word.upper()}' is not in the dictionary.",
            word=word,
            suggestions=dictionary.suggest(word),
        )
    if word in state.used_words:
        raise WordAlreadyUsed(f"'{word.upper()}' has already been played.", word=word)
    if any(_is_stone(state, pos) for pos in path):
        raise BlockedTile("The path crosses a stone tile.", word=word)
    if state.chain_tiles and state.chain_tiles.isdisjoint(path):
        raise ChainViolation(
            f"'{word.upper()}' must reuse a tile from the previous word.", word=word
        )


def _spawn_threshold(state: RoundState, settings: EngineConfig) -> int:
    if settings.special_tile_score_threshold is not None:
        return settings.special_tile_score_threshold
    if state.benchmarks is not None:
        return state.benchmarks.bronze
    return settings.special_tile_fallback_threshold


def _commit(
    state: RoundState,
    ctx: GameContext,
    path: tuple[Position, ...],
    word: str,
    wild_index: int | None,
) -> Outcome:
    settings = ctx.settings
    board = state.board.copy()
    special = state.special.copy()
    if wild_index is not None:
        board[path[wild_index]] = word[wild_index].upper()

    tile_multiplier = prod(
        special[pos].value for pos in path if special[pos].type == SpecialTileType.MULTIPLIER
    )
    result = score_word(
        word,
        shared_tiles=len(state.chain_tiles.intersection(path)),
        streak=state.streak,
        tile_multiplier=tile_multiplier,
        external_multiplier=state.score_multiplier,
        policy=ctx.policy,
    )
    record = WordRecord(word, path, result.total)

    # Special tiles on the path are consumed by this commit
    xfactors = [pos for pos in path if special[pos].type == SpecialTileType.XFACTOR]
    shuffle = any(special[pos].type == SpecialTileType.SHUFFLE for pos in path)
    for pos in path:
        special.clear(pos)

    changed: set[Position] = set()
    if xfactors:
        sampler = ConstrainedSampler(
            ctx.rng, max_count=settings.max_letter_count, counts=board.letter_counts()
        )
        for pos in xfactors:
            changed |= apply_xfactor(board, special, pos, sampler)
    if shuffle:
        apply_shuffle(board, ctx.rng, max_count=settings.max_letter_count)

    expired = special.tick()

    score = state.score + result.total
    spawned: list[Position] = []
    if (
        settings.special_tiles_enabled
        and score >= _spawn_threshold(state, settings)
        and ctx.rng.random() < settings.special_tile_spawn_chance
    ):
        spawned = spawn_special_tiles(
            special,
            ctx.rng,
            max_spawn=settings.special_tile_max_spawn,
            weights=settings.special_tile_weights,
            min_expiry=settings.special_tile_min_expiry,
            max_expiry=settings.special_tile_max_expiry,
            multiplier_values=settings.multiplier_values,
        )

    next_state = replace(
        _idle(state),
        board=board,
        special=special,
        history=state.history + (record,),
        used_words=state.used_words | {word},
        chain_tiles=frozenset(path),
        score=score,
        streak=result.streak,
        moves=state.moves + 1,
        score_multiplier=1.0,
    )
    return Outcome(
        check_terminal(next_state, ctx),
        committed=record,
        score=result,
        changed_tiles=frozenset(changed),
        spawned=tuple(spawned),
        expired=tuple(expired),
    )


def _clear_path(state: RoundState, action: Any, ctx: GameContext) -> Outcome:
    return Outcome(_idle(state))


def _activate_multiplier(
    state: RoundState, action: ActivateScoreMultiplier, ctx: GameContext
) -> Outcome:
    if state.game_over:
        return Outcome(state, error=GameOver("The round is over."))
    return Outcome(replace(state, score_multiplier=state.score_multiplier * action.factor))


def _use_hammer(state: RoundState, action: UseHammer, ctx: GameContext) -> Outcome:
    if state.game_over:
        return Outcome(state, error=GameOver("The round is over."))
    stones = state.special.positions_of(SpecialTileType.STONE)
    if not stones:
        return Outcome(state, error=ActionUnavailable("There are no stones to break."))
    special = state.special.copy()
    for pos in stones:
        special.clear(pos)
    return Outcome(replace(state, special=special), changed_tiles=frozenset(stones))


def _add_extra_moves(state: RoundState, action: AddExtraMoves, ctx: GameContext) -> Outcome:
    if state.move_limit is None:
        return Outcome(state, error=ActionUnavailable("This round has no move limit."))
    amount = ctx.settings.extra_moves_amount if action.amount is None else action.amount
    next_state = replace(state, move_limit=state.move_limit + amount)
    if state.game_over and state.moves >= state.move_limit:
        # The round ended on the move cap; reopen it if moves remain
        next_state = check_terminal(replace(next_state, game_over=False, grade=None), ctx)
    return Outcome(next_state)


def _check_terminal(state: RoundState, action: CheckTerminal, ctx: GameContext) -> Outcome:
    return Outcome(check_terminal(state, ctx))


_HANDLERS: dict[type, Callable[[RoundState, Any, GameContext], Outcome]] = {
    Begin: _begin,
    Extend: _extend,
    Submit: _submit,
    ResolveWildcard: _resolve_wildcard,
    CancelWildcard: _clear_path,
    ClearPath: _clear_path,
    ActivateScoreMultiplier: _activate_multiplier,
    UseHammer: _use_hammer,
    AddExtraMoves: _add_extra_moves,
    CheckTerminal: _check_terminal,
}


def apply(state: RoundState, action: Action, ctx: GameContext) -> Outcome:
    """Apply `action` to `state` and return the outcome.

    Raises:
        TypeError: If `action` is not a known action type.
    """
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action, ctx)


def end_round(state: RoundState) -> RoundState:
    """Mark the round as over and record its final grade."""
    grade = state.benchmarks.grade_for(state.score) if state.benchmarks else Grade.NONE
    return replace(_idle(state), game_over=True, grade=grade)


def check_terminal(state: RoundState, ctx: GameContext) -> RoundState:
    """End the round if its move cap is reached or no playable word remains.

    Wild tiles are searched as the letter currently under them. If the search runs out of
    budget without finding a word, the round continues.
    """
    if state.game_over or ctx.dictionary is None or not ctx.dictionary.ready:
        return state
    if state.move_limit is not None and state.moves >= state.move_limit:
        return end_round(state)
    if has_any_valid_move(
        state.board,
        ctx.dictionary,
        chain_tiles=state.chain_tiles,
        used_words=state.used_words,
        blocked=state.special.positions_of(SpecialTileType.STONE),
        max_nodes=ctx.settings.terminal_node_budget,
    ):
        return state
    return end_round(state)


def hints(
    state: RoundState, ctx: GameContext, limit: int | None = None
) -> dict[str, tuple[Position, ...]]:
    """Reveal a few playable words (longest first) with a path for each.

    `limit` defaults to a random count between `hint_min_words` and `hint_max_words`.

    Raises:
        DictionaryNotReady: If the dictionary is still loading.
        DictionaryUnavailable: If the dictionary failed to load.
    """
    dictionary = ctx.require_dictionary()
    if limit is None:
        limit = ctx.rng.randint(ctx.settings.hint_min_words, ctx.settings.hint_max_words)
    return find_hints(
        state.board,
        dictionary,
        chain_tiles=state.chain_tiles,
        used_words=state.used_words,
        blocked=state.special.positions_of(SpecialTileType.STONE),
        limit=limit,
        max_nodes=ctx.settings.terminal_node_budget,
    )


def new_round(
    board: Board,
    ctx: GameContext,
    *,
    special: SpecialGrid | None = None,
    seed: str | None = None,
    move_limit: int | None = None,
    benchmarks: Benchmarks | None = None,
    discoverable_words: int = 0,
) -> RoundState:
    """Start a round on `board` and run the initial game-over check."""
    state = RoundState.new(
        board,
        special=special,
        seed=seed,
        move_limit=move_limit,
        benchmarks=benchmarks,
        discoverable_words=discoverable_words,
    )
    return check_terminal(state, ctx)
