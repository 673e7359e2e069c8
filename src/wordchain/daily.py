"""Daily challenge seeding."""

import re
from datetime import date, datetime
from zoneinfo import ZoneInfo

from wordchain.letters import SeededRandom
from wordchain.solver.config import config as engine_config

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def daily_seed(now: datetime | None = None, *, timezone: str | None = None) -> str:
    """Return today's challenge date (``YYYY-MM-DD``) in the configured timezone.

    Args:
        now: Moment to convert. Defaults to the current time.
        timezone: IANA timezone name. Defaults to `daily_timezone`.
    """
    tz = ZoneInfo(timezone or engine_config.daily_timezone)
    moment = datetime.now(tz) if now is None else now.astimezone(tz)
    return moment.strftime("%Y-%m-%d")


def is_valid_seed_date(seed: str) -> bool:
    """Return whether `seed` is a real calendar date in ``YYYY-MM-DD`` form."""
    if not DATE_PATTERN.match(seed):
        return False
    try:
        date.fromisoformat(seed)
    except ValueError:
        return False
    return True


def daily_move_limit(
    seed: str, *, min_moves: int | None = None, max_moves: int | None = None
) -> int:
    """Return the move cap for the day identified by `seed` (same seed, same cap)."""
    min_moves = engine_config.daily_min_moves if min_moves is None else min_moves
    max_moves = engine_config.daily_max_moves if max_moves is None else max_moves
    if min_moves > max_moves:
        raise ValueError(f"min_moves ({min_moves}) exceeds max_moves ({max_moves}).")
    return SeededRandom(f"{seed}:moves").randint(min_moves, max_moves)
