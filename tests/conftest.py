"""Shared fixtures for the word chain tests."""

import random
from itertools import product

import pytest

from wordchain.board import Board
from wordchain.game.machine import GameContext
from wordchain.solver.config import EngineConfig
from wordchain.wordlist import DictionaryIndex

SCENARIO_ROWS = ["CATS", "RATE", "ATES", "BATH"]
SCENARIO_WORDS = ["cat", "rat", "bat", "rate", "bath", "cats", "ate", "eats"]

# C A T X
# X X X X
# X X X X
# X D O G
CHAIN_ROWS = ["CATX", "XXXX", "XXXX", "XDOG"]
CHAIN_WORDS = ["cat", "tax", "dog"]

CONSONANTS = "BCDFGHJKLMNPQRSTVWXZ"
VOWELS = "AEIOUY"


def cvc_words() -> list[str]:
    """Every consonant-vowel-consonant and vowel-consonant-vowel trigram."""
    cvc = ("".join(t).lower() for t in product(CONSONANTS, VOWELS, CONSONANTS))
    vcv = ("".join(t).lower() for t in product(VOWELS, CONSONANTS, VOWELS))
    return [*cvc, *vcv]


@pytest.fixture
def settings() -> EngineConfig:
    """Engine settings with special tile spawning disabled, for deterministic play."""
    return EngineConfig(special_tiles_enabled=False, wildcard_strategy="auto")


@pytest.fixture
def scenario_board() -> Board:
    return Board.from_rows(SCENARIO_ROWS)


@pytest.fixture
def scenario_dictionary() -> DictionaryIndex:
    return DictionaryIndex.from_words(SCENARIO_WORDS)


@pytest.fixture
def chain_board() -> Board:
    return Board.from_rows(CHAIN_ROWS)


@pytest.fixture
def chain_dictionary() -> DictionaryIndex:
    return DictionaryIndex.from_words(CHAIN_WORDS)


@pytest.fixture
def cvc_dictionary() -> DictionaryIndex:
    return DictionaryIndex.from_words(cvc_words())


@pytest.fixture
def ctx(chain_dictionary, settings) -> GameContext:
    return GameContext(dictionary=chain_dictionary, rng=random.Random(0), settings=settings)
