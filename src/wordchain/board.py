"""Classes and functions for representing the letter grid."""

from array import array
from collections import Counter
from collections.abc import Iterable, Iterator, Sequence
from typing import NamedTuple

DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)
"""Row/column offsets of the 8 neighbours of a cell."""

DIAGONALS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
"""Row/column offsets of the 4 diagonal neighbours of a cell."""


class Position(NamedTuple):
    """A cell on the grid."""

    row: int
    col: int

    @property
    def key(self) -> str:
        """Identity key of the position, as ``"r,c"``."""
        return f"{self.row},{self.col}"

    @classmethod
    def from_key(cls, key: str) -> "Position":
        """Parse a ``"r,c"`` key back into a Position."""
        try:
            row, col = (int(part) for part in key.split(","))
        except ValueError:
            raise ValueError(f"Invalid position key: '{key}'") from None
        return cls(row, col)


def is_adjacent(a: Position, b: Position) -> bool:
    """Return whether two positions are Chebyshev-adjacent (8-neighbourhood)."""
    return a != b and max(abs(a.row - b.row), abs(a.col - b.col)) <= 1


def is_valid_path(path: Sequence[Position]) -> bool:
    """Return whether `path` has no repeated cells and every step is 8-adjacent."""
    if len(set(path)) != len(path):
        return False
    return all(is_adjacent(a, b) for a, b in zip(path, path[1:]))


class Board:
    """Store a square matrix of uppercase letters as a 1D array.

    Contains support for 1D, 2D and Position indexing.
    """

    def __init__(self, data: str | Iterable[str], size: int) -> None:
        data = list(data) if isinstance(data, str) else data
        self.data = array("w", data)
        self.size = size
        if len(self.data) != size * size:
            raise ValueError(
                f"Board data has {len(self.data)} cells, expected {size * size} for size {size}."
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[str]]) -> "Board":
        """Create a board from a list of rows (strings or lists of single letters)."""
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError("Board rows must form a square grid.")
        return cls("".join("".join(row) for row in rows).upper(), size)

    def copy(self) -> "Board":
        """Generate a copy of the board."""
        return Board(self.data.__copy__(), self.size)

    def __str__(self) -> str:
        """Returns a string representation of the board."""
        return self.data.tounicode()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    def print(self, out=None) -> None:
        """Print the board to the console, one row per line."""
        for row in self.rows():
            print(" ".join(row), file=out)

    def rows(self) -> list[str]:
        """Return the board as a list of row strings."""
        text = self.data.tounicode()
        return [text[i : i + self.size] for i in range(0, len(text), self.size)]

    def __getitem__(self, idx: int | tuple[int, int]) -> str:
        """Get cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            return self.data[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            return self.data[row * self.size + col]
        raise IndexError("Invalid index type for Board.")

    def __setitem__(self, idx: int | tuple[int, int], value: str) -> None:
        """Set cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            self.data[idx] = value
            return
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            self.data[row * self.size + col] = value
            return
        raise IndexError("Invalid index type for Board.")

    def get_2d_idx(self, one_d_idx: int) -> Position:
        """Convert a 1D index to a Position."""
        return Position(*divmod(one_d_idx, self.size))

    def get_1d_idx(self, row: int, col: int) -> int:
        """Convert a (row, col) pair to a 1D index."""
        return row * self.size + col

    def within(self, row: int, col: int) -> bool:
        """Return whether (row, col) lies on the board."""
        return 0 <= row < self.size and 0 <= col < self.size

    def positions(self) -> Iterator[Position]:
        """Iterate over all positions in row-major order."""
        for idx in range(len(self.data)):
            yield self.get_2d_idx(idx)

    def neighbors(self, pos: Position) -> list[Position]:
        """Return the on-board 8-neighbours of `pos`."""
        return [
            Position(pos.row + dr, pos.col + dc)
            for dr, dc in DIRECTIONS
            if self.within(pos.row + dr, pos.col + dc)
        ]

    def diagonal_neighbors(self, pos: Position) -> list[Position]:
        """Return the on-board diagonal neighbours of `pos`."""
        return [
            Position(pos.row + dr, pos.col + dc)
            for dr, dc in DIAGONALS
            if self.within(pos.row + dr, pos.col + dc)
        ]

    def word_at(self, path: Sequence[Position]) -> str:
        """Return the lowercase word spelled by `path`."""
        return "".join(self[pos] for pos in path).lower()

    def letter_counts(self) -> Counter[str]:
        """Return the multiset of letters currently on the board."""
        return Counter(self.data)
