"""Iterative board refinement: generate, probe, mutate until the board is rich enough."""

import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TextIO

from wordchain.board import Board
from wordchain.errors import GenerationCancelled, GenerationFailed
from wordchain.letters import ConstrainedSampler, LetterSampler
from wordchain.solver.config import config as engine_config
from wordchain.solver.generator import generate_board, make_sampler, repair_q_tiles
from wordchain.solver.prober import UNSET, ProbeResult, probe_board
from wordchain.solver.utils import vowel_ratio
from wordchain.wordlist import DictionaryIndex


@dataclass
class RefinedBoard:
    """A board produced by the refiner, with its final probe."""

    board: Board
    probe: ProbeResult
    accepted: bool
    """Whether the board met both thresholds (False for a best-effort fallback)."""

    attempts: int
    """Number of candidate boards generated."""

    mutations: int
    """Total number of mutation rounds applied across all candidates."""

    @property
    def word_count(self) -> int:
        return self.probe.word_count


def mutate_board(
    board: Board,
    usage: Mapping[str, int],
    ratio: float,
    sampler: LetterSampler,
    *,
    count: int,
    vowel_min: float,
    vowel_max: float,
) -> Board:
    """Return a copy of `board` with its `count` least-used tiles redrawn.

    Tiles are ranked by how many found words use them (ties broken randomly). The new letters
    are vowels if the vowel ratio is below the band, consonants if above, and a coin flip
    decides when it is inside the band.

    With a constrained sampler, the Q-needs-U repair is re-run on the mutated board.
    """
    rng = sampler.rng
    ranked = sorted(board.positions(), key=lambda pos: (usage.get(pos.key, 0), rng.random()))
    chosen = ranked[: min(count, len(ranked))]
    if ratio < vowel_min:
        bias_to_vowel = True
    elif ratio > vowel_max:
        bias_to_vowel = False
    else:
        bias_to_vowel = rng.random() < 0.5

    new_board = board.copy()
    for pos in chosen:
        sampler.release(new_board[pos])
        new_board[pos] = sampler.sample_vowel() if bias_to_vowel else sampler.sample_consonant()
    if isinstance(sampler, ConstrainedSampler):
        repair_q_tiles(new_board, sampler)
    return new_board


def refine_board(
    dictionary: DictionaryIndex,
    *,
    size: int | None = None,
    seed: str | None = None,
    sampler: LetterSampler | None = None,
    min_words: int | None = None,
    vowel_min: float | None = None,
    vowel_max: float | None = None,
    respawn_count: int | None = None,
    mutation_rounds: int | None = None,
    max_attempts: int | None = None,
    max_nodes=UNSET,
    strict: bool | None = None,
    should_stop: Callable[[], bool] | None = None,
    out: TextIO | None = None,
) -> RefinedBoard:
    """Generate a board with at least `min_words` discoverable words and a chainable pair.

    Each candidate board is probed; if it falls short, its least-used tiles are redrawn
    (biased towards the target vowel band) and the board is re-probed, up to
    `mutation_rounds` times. A candidate that still falls short is discarded, up to
    `max_attempts` candidates in total. If none succeeds the last candidate is returned
    with `accepted=False`, unless `strict` is set.

    Keyword arguments left as None default to the engine configuration. `max_nodes` is
    passed to `probe_board` unchanged. `should_stop` is polled before every candidate and
    every mutation round.

    Raises:
        GenerationFailed: If `strict` is set and no candidate met the thresholds.
        GenerationCancelled: If `should_stop` returned True.
    """
    size = engine_config.grid_size if size is None else size
    min_words = engine_config.min_words if min_words is None else min_words
    vowel_min = engine_config.vowel_ratio_min if vowel_min is None else vowel_min
    vowel_max = engine_config.vowel_ratio_max if vowel_max is None else vowel_max
    respawn_count = engine_config.respawn_count if respawn_count is None else respawn_count
    mutation_rounds = engine_config.mutation_rounds if mutation_rounds is None else mutation_rounds
    max_attempts = engine_config.max_attempts if max_attempts is None else max_attempts
    strict = engine_config.strict_generation if strict is None else strict
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1.")
    if sampler is None:
        sampler = make_sampler(seed=seed)
    out = out or sys.stdout

    def _report(msg: str) -> None:
        if engine_config.verbose:
            print(msg, file=out, flush=True)

    def _check_stop() -> None:
        if should_stop is not None and should_stop():
            raise GenerationCancelled("Board generation was superseded.")

    dictionary.require_ready()

    total_mutations = 0
    board: Board | None = None
    probe: ProbeResult | None = None
    for attempt in range(1, max_attempts + 1):
        _check_stop()
        board = generate_board(size, sampler=sampler)
        probe = probe_board(board, dictionary, target=min_words, max_nodes=max_nodes)
        _report(
            f"Candidate {attempt}/{max_attempts}: {probe.word_count} words, "
            f"link={probe.link_found}"
        )
        if probe.satisfies(min_words):
            return RefinedBoard(board, probe, True, attempt, total_mutations)

        for round_idx in range(1, mutation_rounds + 1):
            _check_stop()
            board = mutate_board(
                board,
                probe.usage,
                vowel_ratio(board),
                sampler,
                count=respawn_count,
                vowel_min=vowel_min,
                vowel_max=vowel_max,
            )
            total_mutations += 1
            probe = probe_board(board, dictionary, target=min_words, max_nodes=max_nodes)
            _report(
                f"  mutation {round_idx}/{mutation_rounds}: {probe.word_count} words, "
                f"link={probe.link_found}"
            )
            if probe.satisfies(min_words):
                return RefinedBoard(board, probe, True, attempt, total_mutations)

    assert board is not None and probe is not None
    if strict:
        raise GenerationFailed(
            f"No board with {min_words} words and a chainable pair after {max_attempts} attempts."
        )
    _report(
        f"Warning: no candidate met the thresholds after {max_attempts} attempts; "
        f"using best-effort board with {probe.word_count} words."
    )
    return RefinedBoard(board, probe, False, max_attempts, total_mutations)
