"""Utility functions for board analysis."""

from dataclasses import dataclass, field

import numpy as np

from wordchain.board import DIRECTIONS, Board
from wordchain.letters import VOWELS

COMMON_LETTERS = frozenset("EARIOTNS")
"""The eight most common letters in English words."""

COMMON_PAIRS = frozenset(
    {
        "TH", "HE", "IN", "ER", "AN", "RE", "ED", "ND", "ON", "EN",
        "AT", "OU", "IT", "ES", "TE", "OR", "TI", "HI", "AS", "TO",
        "ST", "NG", "SE", "HA", "VE", "DE", "OF", "LE", "CO", "NT",
    }
)
"""Frequent English digraphs (either order counts as favourable)."""


def letter_grid(board: Board) -> np.ndarray:
    """Return the board as a 2D numpy array of single-character strings."""
    return np.array(list(str(board)), dtype="<U1").reshape(board.size, board.size)


def vowel_ratio(board: Board) -> float:
    """Fraction of board cells holding a vowel (0.5 for an empty board)."""
    grid = letter_grid(board)
    if grid.size == 0:
        return 0.5
    return float(np.isin(grid, list(VOWELS)).mean())


@dataclass
class BoardAnalysis:
    """Composition statistics of a board."""

    grid_size: int
    total_letters: int
    unique_letters: int
    vowel_ratio: float
    common_letter_ratio: float
    connectivity_score: float
    """Percentage of neighbour links that alternate vowel/consonant or form a common digraph."""

    letter_distribution: dict[str, int] = field(default_factory=dict)


def connectivity_score(board: Board) -> float:
    """Score how well neighbouring letters combine, as a percentage.

    Every ordered neighbour link scores 1 if it pairs a vowel with a consonant, plus 0.5 if
    the two letters form a common digraph in either order.
    """
    grid = letter_grid(board)
    is_vowel = np.isin(grid, list(VOWELS))
    n = board.size
    total = 0
    favourable = 0.0
    for dr, dc in DIRECTIONS:
        # Slices selecting every cell whose neighbour at (dr, dc) lies on the board
        src = (slice(max(0, -dr), n - max(0, dr)), slice(max(0, -dc), n - max(0, dc)))
        dst = (slice(max(0, dr), n - max(0, -dr)), slice(max(0, dc), n - max(0, -dc)))
        total += grid[src].size
        favourable += int(np.count_nonzero(is_vowel[src] != is_vowel[dst]))
        pairs = np.char.add(grid[src], grid[dst])
        for pair in pairs.ravel():
            pair = str(pair)
            if pair in COMMON_PAIRS or pair[::-1] in COMMON_PAIRS:
                favourable += 0.5
    return favourable / total * 100 if total else 0.0


def analyze_board(board: Board) -> BoardAnalysis:
    """Compute composition statistics for `board`."""
    grid = letter_grid(board)
    letters, counts = np.unique(grid, return_counts=True)
    total = int(grid.size)
    return BoardAnalysis(
        grid_size=board.size,
        total_letters=total,
        unique_letters=len(letters),
        vowel_ratio=vowel_ratio(board),
        common_letter_ratio=float(np.isin(grid, list(COMMON_LETTERS)).mean()) if total else 0.0,
        connectivity_score=connectivity_score(board),
        letter_distribution={str(ch): int(c) for ch, c in zip(letters, counts)},
    )
