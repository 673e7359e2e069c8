"""Test session orchestration: background generation, stale results and snapshots."""

import io
import threading

import pytest

from wordchain import session as session_module
from wordchain.benchmarks import compute_benchmarks
from wordchain.daily import daily_move_limit
from wordchain.errors import (
    DictionaryNotReady,
    DictionaryUnavailable,
    GenerationCancelled,
    RoundNotReady,
)
from wordchain.game.machine import Begin, Extend, Submit, new_round
from wordchain.session import GameSession
from wordchain.solver.config import EngineConfig
from wordchain.solver.refiner import refine_board
from wordchain.wordlist import DictionaryIndex, DictionaryStatus

WORDS = ["cat", "tax", "dog"]


@pytest.fixture
def fast_settings() -> EngineConfig:
    return EngineConfig(
        special_tiles_enabled=False, min_words=3, max_attempts=2, mutation_rounds=1
    )


@pytest.fixture
def session(cvc_dictionary, fast_settings):
    with GameSession(cvc_dictionary, settings=fast_settings, out=io.StringIO()) as s:
        yield s


class TestRounds:
    """Test round generation."""

    def test_no_round_yet(self, session):
        with pytest.raises(RoundNotReady):
            session.require_state()
        with pytest.raises(RoundNotReady):
            session.dispatch(Begin((0, 0)))

    def test_start_round(self, session, fast_settings):
        state = session.start_round(seed="fixed").result(timeout=30)
        assert state is session.state
        assert state.board.size == fast_settings.grid_size
        assert state.benchmarks is not None
        assert state.move_limit is None
        assert not session.generating

    def test_seeded_rounds_match(self, cvc_dictionary, fast_settings):
        boards = []
        for _ in range(2):
            with GameSession(cvc_dictionary, settings=fast_settings, out=io.StringIO()) as s:
                boards.append(s.start_round(seed="repeat").result(timeout=30).board)
        assert boards[0] == boards[1]

    def test_daily_round(self, session):
        state = session.start_round(daily=True, seed="2024-06-01").result(timeout=30)
        assert state.seed == "2024-06-01"
        assert state.move_limit == daily_move_limit("2024-06-01", min_moves=12, max_moves=18)

    def test_invalid_daily_seed(self, session):
        with pytest.raises(ValueError):
            session.start_round(daily=True, seed="2024-02-30")

    def test_stale_generation_is_discarded(self, cvc_dictionary, fast_settings):
        started = threading.Event()
        release = threading.Event()

        def slow_benchmarks(word_count, min_words):
            started.set()
            release.wait(10)
            return compute_benchmarks(word_count, min_words)

        with GameSession(
            cvc_dictionary, settings=fast_settings, benchmark_fn=slow_benchmarks, out=io.StringIO()
        ) as s:
            first = s.start_round(seed="first")
            assert started.wait(30)
            second = s.start_round(seed="second")
            assert s.state is None
            release.set()
            assert first.result(timeout=30) is None
            assert second.result(timeout=30).seed == "second"
            assert s.state.seed == "second"

    def test_hints(self, session):
        session.start_round(seed="hints").result(timeout=30)
        found = session.hints(limit=2)
        assert 1 <= len(found) <= 2
        for word, path in found.items():
            assert session.state.board.word_at(path) == word

    def test_superseded_generation_stops_early(self, cvc_dictionary, fast_settings, monkeypatch):
        started = threading.Event()
        release = threading.Event()
        cancelled = []

        def gated_refine(*args, **kwargs):
            if not started.is_set():
                started.set()
                release.wait(10)
                try:
                    return refine_board(*args, **kwargs)
                except GenerationCancelled:
                    cancelled.append(True)
                    raise
            return refine_board(*args, **kwargs)

        monkeypatch.setattr(session_module, "refine_board", gated_refine)
        with GameSession(cvc_dictionary, settings=fast_settings, out=io.StringIO()) as s:
            first = s.start_round(seed="first")
            assert started.wait(30)
            second = s.start_round(seed="second")
            release.set()
            assert first.result(timeout=30) is None
            assert cancelled == [True]
            assert second.result(timeout=30).seed == "second"

    def test_hints_wait_for_generation_lock(self, session):
        session.start_round(seed="locked").result(timeout=30)
        found = []
        with session._lock:
            worker = threading.Thread(target=lambda: found.append(session.hints(limit=1)))
            worker.start()
            worker.join(0.2)
            assert worker.is_alive()
        worker.join(10)
        assert len(found) == 1


class TestDictionary:
    """Test background dictionary loading."""

    def test_load(self, tmp_path, fast_settings):
        path = tmp_path / "words.txt"
        path.write_text("\n".join(WORDS), encoding="utf-8")
        with GameSession(settings=fast_settings, out=io.StringIO()) as s:
            assert s.dictionary.status == DictionaryStatus.PENDING
            s.load_dictionary(path).result(timeout=10)
            assert s.dictionary.ready
            assert "tax" in s.dictionary

    def test_retry_after_failure(self, tmp_path, fast_settings):
        path = tmp_path / "words.txt"
        with GameSession(settings=fast_settings, out=io.StringIO()) as s:
            with pytest.raises(DictionaryUnavailable):
                s.load_dictionary(path).result(timeout=10)
            assert s.dictionary.status == DictionaryStatus.FAILED
            path.write_text("\n".join(WORDS), encoding="utf-8")
            s.retry_dictionary(path).result(timeout=10)
            assert s.dictionary.ready

    def test_generation_needs_dictionary(self, fast_settings):
        with GameSession(settings=fast_settings, out=io.StringIO()) as s:
            with pytest.raises(DictionaryNotReady):
                s.start_round(seed="pending").result(timeout=10)


class TestSnapshots:
    """Test snapshot and restore."""

    def test_round_trip(self, session):
        session.start_round(seed="snap").result(timeout=30)
        data = session.snapshot()
        state = session.restore(data)
        assert state.to_dict() == data
        assert session.state is state

    def test_restore_supersedes_generation(self, session, chain_board, ctx):
        data = new_round(chain_board, ctx).to_dict()
        pending = session.start_round(seed="late")
        session.restore(data)
        if not pending.cancelled():
            pending.result(timeout=30)
        assert session.state.board == chain_board

    def test_submit_before_dictionary_loads(self, chain_board, ctx, fast_settings):
        data = new_round(chain_board, ctx).to_dict()
        with GameSession(DictionaryIndex(), settings=fast_settings, out=io.StringIO()) as s:
            s.restore(data)
            for action in [Begin((0, 0)), Extend((0, 1)), Extend((0, 2))]:
                assert s.dispatch(action).ok
            outcome = s.dispatch(Submit())
            assert isinstance(outcome.error, DictionaryNotReady)
            assert s.state.score == 0
            assert s.state.used_words == frozenset()

    def test_malformed_snapshot(self, session):
        with pytest.raises(ValueError):
            session.restore({"version": 1})
