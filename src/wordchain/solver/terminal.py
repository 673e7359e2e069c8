"""Search for live moves under the chain rule: game-over detection and hints."""

from collections.abc import Collection, Iterator
from dataclasses import dataclass

from wordchain.board import Board, Position
from wordchain.solver.config import config as engine_config
from wordchain.solver.prober import UNSET
from wordchain.wordlist import MIN_WORD_LENGTH, DictionaryIndex, has_prefix


@dataclass
class MoveSearch:
    """Bookkeeping for a chain-constrained word search."""

    nodes: int = 0
    """Number of search nodes visited."""

    budget_exhausted: bool = False
    """Whether the search stopped because the node budget ran out."""


def iter_chain_words(
    board: Board,
    dictionary: DictionaryIndex,
    *,
    chain_tiles: Collection[Position] = (),
    used_words: Collection[str] = (),
    blocked: Collection[Position] = (),
    max_nodes: int | None = None,
    stats: MoveSearch | None = None,
) -> Iterator[tuple[str, tuple[Position, ...]]]:
    """Yield (word, path) for every playable word found on `board`.

    A word is playable if it has at least 3 letters, is in the dictionary, has not been used
    yet, and its path touches `chain_tiles` (any path qualifies while `chain_tiles` is empty).
    Paths never cross `blocked` cells. The same word may be yielded more than once if it can
    be spelled along several qualifying paths.

    Args:
        stats: Optional MoveSearch updated with node counts as the search proceeds.
    """
    stats = stats if stats is not None else MoveSearch()
    n_cells = board.size * board.size
    chain_idxs = {board.get_1d_idx(*pos) for pos in chain_tiles}
    blocked_idxs = {board.get_1d_idx(*pos) for pos in blocked}
    letters = [ch.lower() for ch in board.data]
    sorted_words = dictionary.sorted_words

    # Entries are (cell, path so far, word so far, path touches the chain)
    stack: list[tuple[int, tuple[int, ...], str, bool]] = [
        (idx, (), "", False) for idx in range(n_cells) if idx not in blocked_idxs
    ]
    while stack:
        idx, path, word, reuse = stack.pop()
        if idx in path:
            continue
        path = path + (idx,)
        word = word + letters[idx]
        reuse = reuse or not chain_idxs or idx in chain_idxs

        stats.nodes += 1
        if max_nodes is not None and stats.nodes > max_nodes:
            stats.budget_exhausted = True
            return

        if (
            reuse
            and len(word) >= MIN_WORD_LENGTH
            and word in dictionary
            and word not in used_words
        ):
            yield word, tuple(board.get_2d_idx(i) for i in path)

        if not has_prefix(sorted_words, word):
            continue

        row, col = board.get_2d_idx(idx)
        for nb in board.neighbors(Position(row, col)):
            nb_idx = board.get_1d_idx(*nb)
            if nb_idx not in path and nb_idx not in blocked_idxs:
                stack.append((nb_idx, path, word, reuse))


def has_any_valid_move(
    board: Board,
    dictionary: DictionaryIndex,
    *,
    chain_tiles: Collection[Position] = (),
    used_words: Collection[str] = (),
    blocked: Collection[Position] = (),
    max_nodes=UNSET,
) -> bool:
    """Return whether at least one playable word remains on `board`.

    Stops at the first hit. If the node budget runs out first, a move is assumed to exist,
    so a round never ends because of a search cut-off.

    Args:
        max_nodes: Node budget. Defaults to the configured `terminal_node_budget`; None
            means unbounded.
    """
    if max_nodes is UNSET:
        max_nodes = engine_config.terminal_node_budget
    stats = MoveSearch()
    for _ in iter_chain_words(
        board,
        dictionary,
        chain_tiles=chain_tiles,
        used_words=used_words,
        blocked=blocked,
        max_nodes=max_nodes,
        stats=stats,
    ):
        return True
    return stats.budget_exhausted


def find_hints(
    board: Board,
    dictionary: DictionaryIndex,
    *,
    chain_tiles: Collection[Position] = (),
    used_words: Collection[str] = (),
    blocked: Collection[Position] = (),
    limit: int | None = None,
    max_nodes=UNSET,
) -> dict[str, tuple[Position, ...]]:
    """Find up to `limit` distinct playable words and a path for each.

    Longer words are preferred: the whole (budgeted) search is run, then the longest words
    are kept, ties broken alphabetically.
    """
    if max_nodes is UNSET:
        max_nodes = engine_config.terminal_node_budget
    limit = engine_config.hint_max_words if limit is None else limit

    found: dict[str, tuple[Position, ...]] = {}
    for word, path in iter_chain_words(
        board,
        dictionary,
        chain_tiles=chain_tiles,
        used_words=used_words,
        blocked=blocked,
        max_nodes=max_nodes,
    ):
        found.setdefault(word, path)

    best = sorted(found, key=lambda w: (-len(w), w))[:limit]
    return {w: found[w] for w in best}
