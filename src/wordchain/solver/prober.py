"""Bounded exhaustive word search over a board."""

from collections import Counter
from collections.abc import Collection
from dataclasses import dataclass, field

from bitarray.util import count_and, zeros

from wordchain.board import Board, Position
from wordchain.solver.config import config as engine_config
from wordchain.wordlist import MIN_WORD_LENGTH, DictionaryIndex, has_prefix

UNSET = object()
"""Marks a node budget argument as not given (None already means unbounded)."""


@dataclass
class ProbeResult:
    """Outcome of probing a board for discoverable words."""

    words: set[str] = field(default_factory=set)
    """Distinct dictionary words found (lowercase)."""

    link_found: bool = False
    """Whether two found words share at least one tile (the chain rule is satisfiable)."""

    usage: Counter[str] = field(default_factory=Counter)
    """Number of found words using each tile, keyed by position key ``"r,c"``."""

    paths: dict[str, tuple[Position, ...]] = field(default_factory=dict)
    """The first path found for each word."""

    nodes: int = 0
    """Number of search nodes visited."""

    budget_exhausted: bool = False
    """Whether the search stopped because the node budget ran out."""

    @property
    def word_count(self) -> int:
        return len(self.words)

    def satisfies(self, min_words: int) -> bool:
        """Whether the board has at least `min_words` words and a chainable pair."""
        return len(self.words) >= min_words and self.link_found


def probe_board(
    board: Board,
    dictionary: DictionaryIndex,
    *,
    target: int | None = None,
    max_nodes=UNSET,
    blocked: Collection[Position] = (),
) -> ProbeResult:
    """Search `board` for every dictionary word reachable along a simple 8-adjacent path.

    One depth-first traversal is rooted at every cell. Each extension step counts as a node;
    once the node count exceeds `max_nodes` the probe stops and returns what it has found so
    far. A path whose string is not a prefix of any dictionary word is not extended.

    Args:
        board: Board to search.
        dictionary: Ready dictionary index.
        target: If given, return as soon as this many words are found and a chainable pair
            exists.
        max_nodes: Node budget. Defaults to the configured `probe_node_budget`; None means
            unbounded (the search is then complete).
        blocked: Positions that may not appear in any path (stone tiles).

    Returns:
        A ProbeResult with the words, per-tile usage histogram and link flag.
    """
    if max_nodes is UNSET:
        max_nodes = engine_config.probe_node_budget

    result = ProbeResult()
    n_cells = board.size * board.size
    blocked_idxs = {board.get_1d_idx(*pos) for pos in blocked}
    neighbor_idxs = [
        [
            board.get_1d_idx(*nb)
            for nb in board.neighbors(board.get_2d_idx(idx))
            if board.get_1d_idx(*nb) not in blocked_idxs
        ]
        for idx in range(n_cells)
    ]
    letters = [ch.lower() for ch in board.data]
    word_tiles = zeros(n_cells)  # Union of the tiles of every word found so far
    sorted_words = dictionary.sorted_words

    for root in range(n_cells):
        if root in blocked_idxs:
            continue
        stack: list[tuple[int, tuple[int, ...], str]] = [(root, (), "")]
        while stack:
            idx, path, word = stack.pop()
            if idx in path:
                continue
            path = path + (idx,)
            word = word + letters[idx]

            result.nodes += 1
            if max_nodes is not None and result.nodes > max_nodes:
                result.budget_exhausted = True
                return result

            if len(word) >= MIN_WORD_LENGTH and word in dictionary and word not in result.words:
                result.words.add(word)
                result.paths[word] = tuple(board.get_2d_idx(i) for i in path)
                mask = zeros(n_cells)
                for i in path:
                    mask[i] = 1
                    result.usage[board.get_2d_idx(i).key] += 1
                if not result.link_found and count_and(mask, word_tiles) > 0:
                    result.link_found = True
                word_tiles |= mask
                if target is not None and len(result.words) >= target and result.link_found:
                    return result

            if not has_prefix(sorted_words, word):
                continue

            for nb in neighbor_idxs[idx]:
                if nb not in path:
                    stack.append((nb, path, word))

    return result

