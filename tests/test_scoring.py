"""Test the scoring policy."""

import pytest

from wordchain.benchmarks import Benchmarks, Grade, compute_benchmarks
from wordchain.game.scoring import ScoringPolicy, round_half_up, score_word


class TestScoringPolicy:
    """Test the individual score terms."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_rarity_classes(self):
        policy = ScoringPolicy()
        assert policy.rarity_class("j") == 2
        assert policy.rarity_class("Z") == 2
        assert policy.rarity_class("K") == 1
        assert policy.rarity_class("B") == 1
        assert policy.rarity_class("E") == 0

    def test_base_is_at_least_quadratic(self):
        policy = ScoringPolicy()
        assert [policy.base_score(n) for n in (3, 4, 5)] == [9, 16, 25]
        with pytest.raises(ValueError):
            ScoringPolicy(base_exponent=1.5)

    def test_streak(self):
        policy = ScoringPolicy()
        assert policy.next_streak(0, 5) == 1
        assert policy.next_streak(3, 6) == 4
        assert policy.next_streak(3, 4) == 0

    def test_chain_bonus_is_capped(self):
        policy = ScoringPolicy()
        bonuses = [policy.chain_bonus(s) for s in range(20)]
        assert bonuses == sorted(bonuses)
        assert max(bonuses) == policy.chain_bonus_cap


class TestScoreWord:
    """Test whole-word scores."""

    def test_plain_word(self):
        assert score_word("cat").total == 9

    def test_rare_letters(self):
        result = score_word("jazz")
        assert result.rarity == 9.0
        assert result.total == 25

    def test_link_bonus(self):
        assert score_word("cat", shared_tiles=2).total == 13

    def test_multipliers(self):
        result = score_word("cat", tile_multiplier=3, external_multiplier=2)
        assert result.multiplier == 6
        assert result.total == 54

    def test_streak_and_chain_bonus(self):
        result = score_word("chain", streak=2)
        assert result.streak == 3
        assert result.chain_bonus == 15
        assert result.total == 25 + 15

    def test_custom_policy(self):
        policy = ScoringPolicy(base_exponent=3, link_bonus_per_tile=10)
        assert score_word("cat", shared_tiles=1, policy=policy).total == 37


class TestBenchmarks:
    """Test benchmark cutoffs and grades."""

    def test_baseline_board(self):
        b = compute_benchmarks(12, 12)
        assert (b.bronze, b.silver, b.gold, b.platinum) == (800, 1920, 3600, 6400)
        assert b.rating == "Medium"

    def test_rich_board_is_clamped(self):
        b = compute_benchmarks(500, 12)
        assert b.bronze == 1500
        assert b.platinum == 12000

    def test_larger_grid(self):
        b = compute_benchmarks(40, 20)
        assert b.bronze == 1400
        assert b.rating == "Easy"

    def test_sparse_board(self):
        assert compute_benchmarks(15, 15).rating == "Hard"

    def test_cutoffs_increase(self):
        for count in (1, 12, 30, 100):
            b = compute_benchmarks(count, 12)
            assert b.bronze < b.silver < b.gold < b.platinum

    def test_grade_for(self):
        b = Benchmarks(10, 20, 30, 40)
        assert b.grade_for(5) == Grade.NONE
        assert b.grade_for(10) == Grade.BRONZE
        assert b.grade_for(29) == Grade.SILVER
        assert b.grade_for(30) == Grade.GOLD
        assert b.grade_for(1000) == Grade.PLATINUM

    def test_dict_round_trip(self):
        b = compute_benchmarks(20, 12)
        assert Benchmarks.from_dict(b.to_dict()) == b
