"""Score benchmarks (Bronze/Silver/Gold/Platinum) and grades."""

from collections.abc import Callable
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Literal


class Grade(StrEnum):
    """Final grade of a round."""

    NONE = "none"
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


@dataclass(frozen=True)
class Benchmarks:
    """Score cutoffs for a board."""

    bronze: int
    silver: int
    gold: int
    platinum: int
    rating: Literal["Easy", "Medium", "Hard"] = "Medium"
    word_count: int = 0

    def grade_for(self, score: int) -> Grade:
        """Return the highest grade whose cutoff `score` reaches."""
        if score >= self.platinum:
            return Grade.PLATINUM
        if score >= self.gold:
            return Grade.GOLD
        if score >= self.silver:
            return Grade.SILVER
        if score >= self.bronze:
            return Grade.BRONZE
        return Grade.NONE

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Benchmarks":
        return cls(**data)


BenchmarkFunction = Callable[[int, int], Benchmarks]
"""Signature of a benchmark collaborator: (discoverable word count, min words) -> Benchmarks."""


def compute_benchmarks(word_count: int, min_words: int) -> Benchmarks:
    """Derive score cutoffs from the number of discoverable words on a board.

    Richer boards (relative to `min_words`) get proportionally higher cutoffs, clamped to
    0.7x-1.5x of the base values; larger grids (higher `min_words`) are scaled up further.
    """
    richness = max(1, word_count) / max(1, min_words)
    scale = min(1.5, max(0.7, 0.8 + 0.2 * (richness - 1)))
    grid_scale = 1.0 if min_words <= 12 else 1.4 if min_words <= 20 else 2.0

    if min_words == 12 and word_count >= 10:
        rating = "Medium"
    elif word_count >= 2 * min_words:
        rating = "Easy"
    elif word_count >= 1.2 * min_words:
        rating = "Medium"
    else:
        rating = "Hard"

    return Benchmarks(
        bronze=round(1000 * scale * grid_scale),
        silver=round(2400 * scale * grid_scale),
        gold=round(4500 * scale * grid_scale),
        platinum=round(8000 * scale * grid_scale),
        rating=rating,
        word_count=word_count,
    )
