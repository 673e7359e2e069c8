"""Test letter tables, seeded randomness and samplers."""

import random
from collections import Counter

import pytest

from wordchain.letters import (
    LETTER_FREQUENCIES,
    VOWELS,
    ConstrainedSampler,
    LetterSampler,
    SeededRandom,
    hash_seed,
    pick_weighted,
)


class TestFrequencyTable:
    """Test the static letter frequency table."""

    def test_table_covers_alphabet(self):
        letters = [ch for ch, _ in LETTER_FREQUENCIES]
        assert len(letters) == 26
        assert set(letters) == set("ABCDEFGHIJKLMNOPQRSTUVWXYZ")

    def test_table_sums_to_100(self):
        assert sum(f for _, f in LETTER_FREQUENCIES) == pytest.approx(100, abs=0.1)


class TestSeededRandom:
    """Test the deterministic string-seeded generator."""

    def test_hash_is_32_bit_and_stable(self):
        h = hash_seed("2024-01-01")
        assert 0 <= h < 2**32
        assert h == hash_seed("2024-01-01")
        assert h != hash_seed("2024-01-02")

    def test_same_seed_same_sequence(self):
        a = SeededRandom("2024-01-01")
        b = SeededRandom("2024-01-01")
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seeds_differ(self):
        a = SeededRandom("2024-01-01")
        b = SeededRandom("2024-01-02")
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_values_in_unit_interval(self):
        rng = SeededRandom("range")
        assert all(0 <= rng.random() < 1 for _ in range(1000))

    def test_helpers_are_deterministic(self):
        a = SeededRandom("helpers")
        b = SeededRandom("helpers")
        assert a.randint(1, 100) == b.randint(1, 100)
        items_a, items_b = list(range(10)), list(range(10))
        a.shuffle(items_a)
        b.shuffle(items_b)
        assert items_a == items_b

    def test_state_round_trip(self):
        rng = SeededRandom("state")
        rng.random()
        state = rng.getstate()
        expected = [rng.random() for _ in range(3)]
        rng.setstate(state)
        assert [rng.random() for _ in range(3)] == expected


class TestPickWeighted:
    """Test the weighted table walk."""

    def test_single_entry(self):
        assert pick_weighted([("Q", 1.0)], random.Random(0)) == "Q"

    def test_zero_weight_letters_never_drawn(self):
        rng = random.Random(1)
        draws = {pick_weighted([("A", 1.0), ("B", 0.0)], rng) for _ in range(200)}
        assert draws == {"A"}

    def test_frequent_letters_dominate(self):
        rng = random.Random(2)
        counts = Counter(pick_weighted(LETTER_FREQUENCIES, rng) for _ in range(5000))
        assert counts["E"] > counts["Z"]
        assert counts["T"] > counts["Q"]


class TestLetterSampler:
    """Test the unconstrained sampler."""

    def test_seeded_sampler_is_reproducible(self):
        a = LetterSampler.seeded("2024-05-05")
        b = LetterSampler.seeded("2024-05-05")
        assert [a.sample() for _ in range(30)] == [b.sample() for _ in range(30)]

    def test_exclude(self):
        sampler = LetterSampler(random.Random(3))
        assert all(sampler.sample(exclude={"E", "T"}) not in {"E", "T"} for _ in range(200))

    def test_vowel_and_consonant_pools(self):
        sampler = LetterSampler(random.Random(4))
        assert all(sampler.sample_vowel() in VOWELS for _ in range(100))
        assert all(sampler.sample_consonant() not in VOWELS for _ in range(100))


class TestConstrainedSampler:
    """Test the per-letter cap."""

    def test_cap_is_never_exceeded(self):
        sampler = ConstrainedSampler(random.Random(5), max_count=4)
        letters = [sampler.sample() for _ in range(100)]
        assert max(Counter(letters).values()) <= 4
        assert Counter(letters) == +sampler.counts

    def test_exhausted_alphabet_raises(self):
        sampler = ConstrainedSampler(random.Random(6), max_count=1)
        letters = [sampler.sample() for _ in range(26)]
        assert sorted(letters) == sorted("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        with pytest.raises(ValueError):
            sampler.sample()

    def test_release_frees_a_slot(self):
        sampler = ConstrainedSampler(random.Random(7), max_count=1)
        letter = sampler.sample()
        assert not sampler.is_legal(letter)
        sampler.release(letter)
        assert sampler.is_legal(letter)

    def test_primed_counts_are_respected(self):
        sampler = ConstrainedSampler(random.Random(8), max_count=2, counts=Counter({"E": 2}))
        assert all(sampler.sample() != "E" for _ in range(30))

    def test_vowel_falls_back_when_vowels_capped(self):
        counts = Counter({v: 1 for v in VOWELS})
        sampler = ConstrainedSampler(random.Random(9), max_count=1, counts=counts)
        assert sampler.sample_vowel() not in VOWELS
