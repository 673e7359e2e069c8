"""Special tiles: a modifier grid laid over the letter board."""

import random
from collections import Counter
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from wordchain.board import Board, Position
from wordchain.letters import ConstrainedSampler


class SpecialTileType(StrEnum):
    """Kinds of special tile."""

    NONE = "none"
    STONE = "stone"
    WILD = "wild"
    XFACTOR = "xfactor"
    MULTIPLIER = "multiplier"
    SHUFFLE = "shuffle"


@dataclass(frozen=True)
class SpecialTile:
    """A modifier on one cell."""

    type: SpecialTileType = SpecialTileType.NONE

    expiry: int = 0
    """Committed words left before the tile reverts to NONE."""

    value: int = 1
    """Score factor of a MULTIPLIER tile (1 for every other type)."""

    @property
    def active(self) -> bool:
        return self.type != SpecialTileType.NONE

    def to_dict(self) -> dict:
        return {"type": self.type.value, "expiry": self.expiry, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping) -> "SpecialTile":
        return cls(
            type=SpecialTileType(data.get("type", "none")),
            expiry=int(data.get("expiry", 0)),
            value=int(data.get("value", 1)),
        )


EMPTY_TILE = SpecialTile()


class SpecialGrid:
    """Square grid of SpecialTiles parallel to a Board (at most one type per cell)."""

    def __init__(self, size: int, tiles: Sequence[SpecialTile] | None = None) -> None:
        self.size = size
        self.tiles: list[SpecialTile] = (
            list(tiles) if tiles is not None else [EMPTY_TILE] * (size * size)
        )
        if len(self.tiles) != size * size:
            raise ValueError(f"Expected {size * size} special tiles, got {len(self.tiles)}.")

    def copy(self) -> "SpecialGrid":
        return SpecialGrid(self.size, self.tiles)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SpecialGrid):
            return NotImplemented
        return self.size == other.size and self.tiles == other.tiles

    def __getitem__(self, pos: tuple[int, int]) -> SpecialTile:
        row, col = pos
        return self.tiles[row * self.size + col]

    def __setitem__(self, pos: tuple[int, int], tile: SpecialTile) -> None:
        row, col = pos
        self.tiles[row * self.size + col] = tile

    def clear(self, pos: tuple[int, int]) -> None:
        self[pos] = EMPTY_TILE

    def items(self) -> Iterator[tuple[Position, SpecialTile]]:
        for idx, tile in enumerate(self.tiles):
            yield Position(*divmod(idx, self.size)), tile

    def positions_of(self, tile_type: SpecialTileType) -> list[Position]:
        return [pos for pos, tile in self.items() if tile.type == tile_type]

    def empty_positions(self) -> list[Position]:
        return [pos for pos, tile in self.items() if not tile.active]

    def tick(self) -> list[Position]:
        """Decrement every active tile's expiry; tiles reaching 0 revert to NONE.

        Returns:
            Positions of the tiles that expired.
        """
        expired: list[Position] = []
        for pos, tile in self.items():
            if not tile.active:
                continue
            if tile.expiry <= 1:
                self.clear(pos)
                expired.append(pos)
            else:
                self[pos] = SpecialTile(tile.type, tile.expiry - 1, tile.value)
        return expired

    def to_rows(self) -> list[list[dict]]:
        return [
            [self.tiles[row * self.size + col].to_dict() for col in range(self.size)]
            for row in range(self.size)
        ]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Mapping]]) -> "SpecialGrid":
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError("Special tile rows must form a square grid.")
        return cls(size, [SpecialTile.from_dict(cell) for row in rows for cell in row])


def apply_xfactor(
    board: Board, grid: SpecialGrid, pos: Position, sampler: ConstrainedSampler
) -> set[Position]:
    """Redraw the letters on the diagonal neighbours of `pos` and clear their special tiles.

    Modifies `board` and `grid` in place. `sampler` should be primed with the board's current
    letter counts so that the per-letter cap is respected.

    Returns:
        The set of cells whose letter was regenerated.
    """
    changed: set[Position] = set()
    for diag in board.diagonal_neighbors(pos):
        sampler.release(board[diag])
        board[diag] = sampler.sample()
        grid.clear(diag)
        changed.add(diag)
    return changed


def apply_shuffle(board: Board, rng: random.Random, *, max_count: int) -> None:
    """Redistribute the board's letters randomly across all cells, in place.

    Letters occurring more than `max_count` times lose their excess copies, which are
    replaced by constrained random letters before the permutation.
    """
    sampler = ConstrainedSampler(rng, max_count=max_count, counts=Counter())
    kept: list[str] = []
    excess = 0
    for ch in board.data:
        if sampler.counts[ch] < max_count:
            sampler.counts[ch] += 1
            kept.append(ch)
        else:
            excess += 1
    kept.extend(sampler.sample() for _ in range(excess))
    rng.shuffle(kept)
    for idx, ch in enumerate(kept):
        board[idx] = ch


def random_special_tile(
    rng: random.Random,
    *,
    weights: Mapping[str, float],
    min_expiry: int,
    max_expiry: int,
    multiplier_values: Sequence[int],
) -> SpecialTile:
    """Draw a tile type from the weighted rarity table, with a random lifetime."""
    types = [SpecialTileType(name) for name in weights]
    tile_type = rng.choices(types, weights=list(weights.values()), k=1)[0]
    expiry = rng.randint(min_expiry, max_expiry)
    value = rng.choice(list(multiplier_values)) if tile_type == SpecialTileType.MULTIPLIER else 1
    return SpecialTile(tile_type, expiry, value)


def spawn_special_tiles(
    grid: SpecialGrid,
    rng: random.Random,
    *,
    max_spawn: int,
    weights: Mapping[str, float],
    min_expiry: int,
    max_expiry: int,
    multiplier_values: Sequence[int],
) -> list[Position]:
    """Place 1 to `max_spawn` random special tiles on empty cells of `grid`, in place.

    Returns:
        Positions of the new tiles (empty if the grid has no free cell).
    """
    empty = grid.empty_positions()
    if not empty or max_spawn < 1:
        return []
    count = min(rng.randint(1, max_spawn), len(empty))
    spawned = rng.sample(empty, count)
    for pos in spawned:
        grid[pos] = random_special_tile(
            rng,
            weights=weights,
            min_expiry=min_expiry,
            max_expiry=max_expiry,
            multiplier_values=multiplier_values,
        )
    return spawned
