"""Random board generation."""

import random

from wordchain.board import Board, Position
from wordchain.letters import ConstrainedSampler, LetterSampler, SeededRandom
from wordchain.solver.config import config as engine_config


def make_sampler(
    *,
    seed: str | None = None,
    rng: random.Random | None = None,
    constrained: bool | None = None,
) -> LetterSampler:
    """Create a letter sampler.

    Args:
        seed: Optional string seed; if given, draws are reproducible for that seed.
        rng: Optional random source to use instead (ignored if `seed` is given).
        constrained: Whether to cap per-letter counts. Defaults to `constrained_generation`.
    """
    if seed is not None:
        rng = SeededRandom(seed)
    if constrained is None:
        constrained = engine_config.constrained_generation
    return ConstrainedSampler(rng) if constrained else LetterSampler(rng)


def has_u_neighbor(board: Board, row: int, col: int) -> bool:
    return any(board[pos] == "U" for pos in board.neighbors(Position(row, col)))


def repair_q_tiles(board: Board, sampler: LetterSampler) -> int:
    """Replace every Q that has no U among its 8 neighbours.

    The replacement letter is drawn excluding Q (and, for a constrained sampler, any letter
    already at its cap). This is a local repair only; solvability is not re-checked.

    Returns:
        The number of cells regenerated.
    """
    repaired = 0
    for idx in range(len(board.data)):
        if board[idx] != "Q":
            continue
        row, col = board.get_2d_idx(idx)
        if has_u_neighbor(board, row, col):
            continue
        sampler.release("Q")
        board[idx] = sampler.sample(exclude={"Q"})
        repaired += 1
    return repaired


def generate_board(
    size: int | None = None,
    *,
    sampler: LetterSampler | None = None,
    seed: str | None = None,
) -> Board:
    """Build a `size` x `size` board by repeated sampler draws.

    With a constrained sampler, also runs the Q-needs-U repair pass.

    Args:
        size: Side length of the board. Defaults to the configured `grid_size`.
        sampler: Letter source. If None, one is created from `seed` and the configuration.
        seed: String seed used when no sampler is given.
    """
    size = engine_config.grid_size if size is None else size
    if size <= 0:
        raise ValueError("Board size must be positive.")
    if sampler is None:
        sampler = make_sampler(seed=seed)
    if isinstance(sampler, ConstrainedSampler):
        sampler.counts.clear()

    board = Board([sampler.sample() for _ in range(size * size)], size)
    if isinstance(sampler, ConstrainedSampler):
        repair_q_tiles(board, sampler)
    return board
