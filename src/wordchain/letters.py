"""Letter frequency tables and weighted letter samplers."""

import random
from collections import Counter
from collections.abc import Collection, Sequence

from wordchain.solver.config import config as engine_config

LetterPool = Sequence[tuple[str, float]]
"""A sequence of (letter, weight) pairs."""

LETTER_FREQUENCIES: LetterPool = (
    ("E", 12.02), ("T", 9.10), ("A", 8.12), ("O", 7.68), ("I", 7.31), ("N", 6.95),
    ("S", 6.28), ("R", 6.02), ("H", 5.92), ("D", 4.32), ("L", 3.98), ("U", 2.88),
    ("C", 2.71), ("M", 2.61), ("F", 2.30), ("Y", 2.11), ("W", 2.09), ("G", 2.03),
    ("P", 1.82), ("B", 1.49), ("V", 1.11), ("K", 0.69), ("X", 0.17), ("Q", 0.11),
    ("J", 0.10), ("Z", 0.07),
)
"""English letter frequencies (percent), most frequent first."""

FREQUENCY_MAP: dict[str, float] = dict(LETTER_FREQUENCIES)

VOWELS = frozenset("AEIOUY")
"""Letters counted as vowels for vowel-ratio balancing."""

VOWEL_POOL: LetterPool = tuple((ch, f) for ch, f in LETTER_FREQUENCIES if ch in VOWELS)
CONSONANT_POOL: LetterPool = tuple((ch, f) for ch, f in LETTER_FREQUENCIES if ch not in VOWELS)

_MASK32 = 0xFFFFFFFF


def is_vowel(ch: str) -> bool:
    return ch.upper() in VOWELS


def hash_seed(seed: str) -> int:
    """Hash a string seed to a 32-bit integer.

    Uses the multiplicative string hash ``h = h * 31 + code`` followed by the murmur3
    finaliser so that similar seeds (consecutive dates) give unrelated states.
    """
    h = 0
    for ch in seed:
        h = (h * 31 + ord(ch)) & _MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class SeededRandom(random.Random):
    """Deterministic random source seeded from a string (mulberry32 generator).

    The same seed string always yields the same sequence, on every platform. All the usual
    `random.Random` helpers (`choice`, `shuffle`, `randint`, ...) are driven by `random()`.
    """

    def __init__(self, seed: str) -> None:
        self._state = 0
        super().__init__(seed)

    def seed(self, a=None, version: int = 2) -> None:
        self._state = hash_seed("" if a is None else str(a))

    def random(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    def getstate(self) -> tuple[int]:
        return (self._state,)

    def setstate(self, state: tuple[int]) -> None:
        (self._state,) = state


def pick_weighted(pool: LetterPool, rng: random.Random, default: str = "E") -> str:
    """Draw one letter from `pool` with probability proportional to its weight.

    Samples ``x`` uniformly in ``[0, total)`` and walks the pool subtracting weights until
    the remainder is non-positive. Returns `default` if floating error leaves nothing matched.
    """
    total = sum(f for _, f in pool)
    x = rng.random() * total
    for ch, f in pool:
        x -= f
        if x <= 0:
            return ch
    return default


class LetterSampler:
    """Frequency-weighted letter source."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    @classmethod
    def seeded(cls, seed: str, **kwargs) -> "LetterSampler":
        """Create a sampler whose letter sequence is fully determined by `seed`."""
        return cls(SeededRandom(seed), **kwargs)

    def sample(self, exclude: Collection[str] = ()) -> str:
        """Draw one letter from the English frequency table."""
        if not exclude:
            return pick_weighted(LETTER_FREQUENCIES, self.rng)
        pool = [(ch, f) for ch, f in LETTER_FREQUENCIES if ch not in exclude]
        return pick_weighted(pool, self.rng, default=pool[0][0])

    def sample_vowel(self) -> str:
        return pick_weighted(VOWEL_POOL, self.rng, default=VOWEL_POOL[0][0])

    def sample_consonant(self) -> str:
        return pick_weighted(CONSONANT_POOL, self.rng, default=CONSONANT_POOL[0][0])

    def release(self, letter: str) -> None:
        """Notify the sampler that a previously drawn letter left the board (no-op here)."""


class ConstrainedSampler(LetterSampler):
    """Letter source that caps how often each letter may be drawn.

    Keeps a running count per letter. A draw that would exceed the cap is re-sampled up to
    `max_retries` times, after which the least-used legal letter is returned.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        max_count: int | None = None,
        max_retries: int | None = None,
        counts: Counter[str] | None = None,
    ) -> None:
        super().__init__(rng)
        self.max_count = engine_config.max_letter_count if max_count is None else max_count
        self.max_retries = engine_config.sampler_max_retries if max_retries is None else max_retries
        self.counts: Counter[str] = Counter() if counts is None else counts

    def is_legal(self, ch: str, exclude: Collection[str] = ()) -> bool:
        return ch not in exclude and self.counts[ch] < self.max_count

    def _take(self, ch: str) -> str:
        self.counts[ch] += 1
        return ch

    def _least_used(self, pool: LetterPool, exclude: Collection[str]) -> str:
        legal = [ch for ch, _ in pool if self.is_legal(ch, exclude)]
        if not legal:
            raise ValueError("Every letter has reached its cap; cannot draw another letter.")
        # min() keeps the first of equal counts, i.e. the most frequent letter
        return min(legal, key=lambda ch: self.counts[ch])

    def _sample_pool(self, pool: LetterPool, exclude: Collection[str]) -> str:
        for _ in range(self.max_retries):
            ch = pick_weighted(pool, self.rng, default=pool[0][0])
            if self.is_legal(ch, exclude):
                return self._take(ch)
        return self._take(self._least_used(pool, exclude))

    def sample(self, exclude: Collection[str] = ()) -> str:
        return self._sample_pool(LETTER_FREQUENCIES, exclude)

    def sample_vowel(self) -> str:
        if any(self.is_legal(ch) for ch, _ in VOWEL_POOL):
            return self._sample_pool(VOWEL_POOL, ())
        return self.sample()

    def sample_consonant(self) -> str:
        if any(self.is_legal(ch) for ch, _ in CONSONANT_POOL):
            return self._sample_pool(CONSONANT_POOL, ())
        return self.sample()

    def release(self, letter: str) -> None:
        if self.counts[letter] > 0:
            self.counts[letter] -= 1
