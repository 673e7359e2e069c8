"""Word scoring policy."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from wordchain.letters import FREQUENCY_MAP


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(x + 0.5)


@dataclass(frozen=True)
class ScoringPolicy:
    """Tunable scoring constants.

    A word scores
    ``(len ** base_exponent + rarity + chain_bonus + link_bonus) * tile_multiplier * external``,
    rounded half up.
    """

    base_exponent: float = 2.0
    """Exponent of the word-length term. Must be at least 2."""

    rarity_multiplier: float = 1.5
    """Weight applied to the summed rarity classes of the letters."""

    rare_frequency_cutoff: float = 2.0
    """Letters with a frequency (percent) below this are rare (class 1)."""

    ultra_rare_letters: frozenset[str] = frozenset("JQXZ")
    """Letters in the top rarity class."""

    ultra_rare_class: int = 2

    link_bonus_per_tile: int = 2
    """Bonus per tile shared with the previous word."""

    streak_target_length: int = 5
    """Minimum word length that extends the streak."""

    chain_bonus_per_streak: int = 5
    chain_bonus_cap: int = 50

    def __post_init__(self) -> None:
        if self.base_exponent < 2:
            raise ValueError("base_exponent must be at least 2.")
        if self.chain_bonus_per_streak < 0 or self.chain_bonus_cap < 0:
            raise ValueError("Chain bonus parameters must be non-negative.")

    def rarity_class(self, letter: str) -> int:
        letter = letter.upper()
        if letter in self.ultra_rare_letters:
            return self.ultra_rare_class
        if FREQUENCY_MAP.get(letter, 0.0) < self.rare_frequency_cutoff:
            return 1
        return 0

    def base_score(self, length: int) -> float:
        return float(length) ** self.base_exponent

    def rarity_bonus(self, letters: Iterable[str]) -> float:
        return sum(self.rarity_class(ch) for ch in letters) * self.rarity_multiplier

    def next_streak(self, streak: int, length: int) -> int:
        return streak + 1 if length >= self.streak_target_length else 0

    def chain_bonus(self, streak: int) -> int:
        return min(self.chain_bonus_cap, self.chain_bonus_per_streak * streak)

    def link_bonus(self, shared_tiles: int) -> int:
        return self.link_bonus_per_tile * shared_tiles


@dataclass(frozen=True)
class WordScore:
    """Breakdown of the score awarded to one committed word."""

    base: float
    rarity: float
    chain_bonus: int
    link_bonus: int
    multiplier: float
    """Product of the multiplier tiles on the path and the external score multiplier."""

    streak: int
    """Streak after this word."""

    total: int


def score_word(
    word: str,
    *,
    shared_tiles: int = 0,
    streak: int = 0,
    tile_multiplier: float = 1.0,
    external_multiplier: float = 1.0,
    policy: ScoringPolicy | None = None,
) -> WordScore:
    """Score `word` given the streak before it and how many tiles it shares with the last word."""
    policy = policy or ScoringPolicy()
    base = policy.base_score(len(word))
    rarity = policy.rarity_bonus(word)
    new_streak = policy.next_streak(streak, len(word))
    chain = policy.chain_bonus(new_streak)
    link = policy.link_bonus(shared_tiles)
    multiplier = tile_multiplier * external_multiplier
    total = round_half_up((base + rarity + chain + link) * multiplier)
    return WordScore(base, rarity, chain, link, multiplier, new_streak, total)
