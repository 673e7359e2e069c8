"""A player's session: dictionary loading, background board generation and the live round."""

import random
import sys
import threading
from collections.abc import Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from os import PathLike
from typing import TextIO

from wordchain.benchmarks import BenchmarkFunction, compute_benchmarks
from wordchain.board import Position
from wordchain.daily import daily_move_limit, daily_seed, is_valid_seed_date
from wordchain.errors import GenerationCancelled, RoundNotReady
from wordchain.game.machine import Action, GameContext, Outcome, apply, hints, new_round
from wordchain.game.scoring import ScoringPolicy
from wordchain.game.state import RoundState
from wordchain.game.wildcard import WildcardResolver
from wordchain.letters import SeededRandom
from wordchain.solver.config import EngineConfig
from wordchain.solver.config import config as engine_config
from wordchain.solver.generator import make_sampler
from wordchain.solver.refiner import refine_board
from wordchain.wordlist import DictionaryIndex


class GameSession:
    """Runs rounds for one player.

    Dictionary loading and board generation run on a single background worker, so they
    happen in submission order and never overlap. Each round request is tagged with a
    token; a generation result whose token is no longer current is discarded.

    Args:
        dictionary: Index to play against. If omitted, an empty (PENDING) index is created and
            must be filled with `load_dictionary`.
        settings: Engine configuration. Defaults to the module-level configuration.
        benchmark_fn: Converts a discoverable word count into score cutoffs.
        out: Stream for progress reports.
    """

    def __init__(
        self,
        dictionary: DictionaryIndex | None = None,
        *,
        settings: EngineConfig | None = None,
        policy: ScoringPolicy | None = None,
        resolver: WildcardResolver | None = None,
        benchmark_fn: BenchmarkFunction = compute_benchmarks,
        executor: ThreadPoolExecutor | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.settings = settings or engine_config
        self.dictionary = dictionary if dictionary is not None else DictionaryIndex()
        self.benchmark_fn = benchmark_fn
        self.out = out or sys.stdout
        self.ctx = GameContext(
            dictionary=self.dictionary,
            policy=policy or ScoringPolicy(),
            resolver=resolver,
            settings=self.settings,
        )
        self._owns_executor = executor is None
        self.executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="wordchain"
        )
        self._lock = threading.Lock()
        self._token = 0
        self._pending: Future | None = None
        self.state: RoundState | None = None

    def __enter__(self) -> "GameSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=False, cancel_futures=True)

    def load_dictionary(self, path: PathLike | str | None = None) -> Future:
        """Load the word list in the background.

        The returned future raises DictionaryUnavailable if the load fails. Until the load
        completes, submissions are rejected with DictionaryNotReady.
        """
        path = path if path is not None else self.settings.word_list_path
        return self.executor.submit(self.dictionary.load, path, out=self.out)

    def retry_dictionary(self, path: PathLike | str | None = None) -> Future:
        """Reload a dictionary that failed to load."""
        return self.load_dictionary(path)

    @property
    def generating(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def start_round(self, *, seed: str | None = None, daily: bool = False) -> Future:
        """Request a new round, superseding any round still being generated.

        Args:
            seed: Seed for a reproducible board. Daily rounds default to today's date.
            daily: Seed the board from the date and cap the number of moves.

        Returns:
            A future resolving to the new RoundState, or None if a later request superseded it.
        """
        if daily and seed is None:
            seed = daily_seed(timezone=self.settings.daily_timezone)
        if daily and not is_valid_seed_date(seed):
            raise ValueError(f"Daily seed must be a date (YYYY-MM-DD), got '{seed}'.")
        move_limit = (
            daily_move_limit(
                seed,
                min_moves=self.settings.daily_min_moves,
                max_moves=self.settings.daily_max_moves,
            )
            if daily
            else None
        )
        with self._lock:
            self._token += 1
            token = self._token
            self.state = None
            if self._pending is not None:
                self._pending.cancel()
            self._pending = self.executor.submit(self._generate, token, seed, move_limit)
            return self._pending

    def _generate(self, token: int, seed: str | None, move_limit: int | None) -> RoundState | None:
        settings = self.settings
        sampler = make_sampler(seed=seed, constrained=settings.constrained_generation)
        try:
            refined = refine_board(
                self.dictionary,
                size=settings.grid_size,
                sampler=sampler,
                min_words=settings.min_words,
                vowel_min=settings.vowel_ratio_min,
                vowel_max=settings.vowel_ratio_max,
                respawn_count=settings.respawn_count,
                mutation_rounds=settings.mutation_rounds,
                max_attempts=settings.max_attempts,
                max_nodes=settings.probe_node_budget,
                strict=settings.strict_generation,
                should_stop=lambda: token != self._token,
                out=self.out,
            )
        except GenerationCancelled:
            return None
        benchmarks = self.benchmark_fn(refined.word_count, settings.min_words)
        with self._lock:
            if token != self._token:
                return None
            # Gameplay randomness (spawns, effects) is reproducible for seeded rounds
            self.ctx.rng = SeededRandom(f"{seed}:play") if seed is not None else random.Random()
            self.state = new_round(
                refined.board,
                self.ctx,
                seed=seed,
                move_limit=move_limit,
                benchmarks=benchmarks,
                discoverable_words=refined.word_count,
            )
            if settings.verbose:
                print(
                    f"Board ready: {refined.word_count} words, rating {benchmarks.rating}"
                    f"{'' if refined.accepted else ' (best effort)'}",
                    file=self.out,
                    flush=True,
                )
            return self.state

    def require_state(self) -> RoundState:
        if self.state is None:
            raise RoundNotReady("No round is ready yet.")
        return self.state

    def dispatch(self, action: Action) -> Outcome:
        """Apply a player action to the live round.

        Raises:
            RoundNotReady: If no round has been generated or restored.
        """
        with self._lock:
            outcome = apply(self.require_state(), action, self.ctx)
            self.state = outcome.state
            return outcome

    def hints(self, limit: int | None = None) -> dict[str, tuple[Position, ...]]:
        with self._lock:
            return hints(self.require_state(), self.ctx, limit)

    def snapshot(self) -> dict:
        """Return the live round as a JSON-serializable dict."""
        return self.require_state().to_dict()

    def restore(self, data: Mapping) -> RoundState:
        """Replace the live round with a snapshot, superseding any pending generation.

        Raises:
            ValueError: If the snapshot is malformed.
        """
        state = RoundState.from_dict(data)
        with self._lock:
            self._token += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            seed = state.seed
            self.ctx.rng = SeededRandom(f"{seed}:play") if seed is not None else random.Random()
            self.state = state
        return state
