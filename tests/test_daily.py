"""Test daily challenge seeding."""

from datetime import UTC, datetime

import pytest

from wordchain.daily import daily_move_limit, daily_seed, is_valid_seed_date


class TestDailySeed:
    """Test date derivation."""

    def test_uses_timezone(self):
        now = datetime(2024, 1, 1, 3, tzinfo=UTC)
        assert daily_seed(now, timezone="America/New_York") == "2023-12-31"
        assert daily_seed(now, timezone="UTC") == "2024-01-01"

    def test_today_is_valid(self):
        assert is_valid_seed_date(daily_seed())

    @pytest.mark.parametrize("seed", ["2024-02-30", "2024-13-01", "20240101", "yesterday", ""])
    def test_invalid_dates(self, seed):
        assert not is_valid_seed_date(seed)

    def test_leap_day(self):
        assert is_valid_seed_date("2024-02-29")


class TestDailyMoveLimit:
    """Test the seeded move cap."""

    def test_deterministic(self):
        assert daily_move_limit("2024-06-01") == daily_move_limit("2024-06-01")

    def test_in_range(self):
        for day in range(1, 29):
            limit = daily_move_limit(f"2024-02-{day:02d}", min_moves=12, max_moves=18)
            assert 12 <= limit <= 18

    def test_fixed_range(self):
        assert daily_move_limit("2024-06-01", min_moves=15, max_moves=15) == 15

    def test_bad_range(self):
        with pytest.raises(ValueError):
            daily_move_limit("2024-06-01", min_moves=20, max_moves=10)
