"""Strategies for resolving the letter of a wild tile."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from string import ascii_lowercase

from wordchain.errors import AmbiguousWildcard
from wordchain.wordlist import DictionaryIndex


def candidate_word(word: str, index: int, letter: str) -> str:
    """Return `word` with the letter at `index` replaced by `letter` (lowercase)."""
    return word[:index] + letter.lower() + word[index + 1 :]


class WildcardResolver(ABC):
    """Decides which letter a wild tile stands for in a submitted word."""

    @abstractmethod
    def resolve(
        self,
        word: str,
        index: int,
        dictionary: DictionaryIndex,
        used_words: Collection[str],
    ) -> str | None:
        """Resolve the wild letter at position `index` of `word`.

        Returns:
            The resolved lowercase letter, or None if the player must supply it.

        Raises:
            AmbiguousWildcard: If the letter cannot be resolved.
        """


class AutoWildcardResolver(WildcardResolver):
    """Try every letter A-Z and take a playable dictionary word.

    Args:
        first_hit: Accept the first (alphabetical) hit. If False, more than one hit is
            treated as ambiguous.
    """

    def __init__(self, *, first_hit: bool = True) -> None:
        self.first_hit = first_hit

    def resolve(self, word, index, dictionary, used_words):
        hits: list[str] = []
        for letter in ascii_lowercase:
            candidate = candidate_word(word, index, letter)
            if candidate in dictionary and candidate not in used_words:
                if self.first_hit:
                    return letter
                hits.append(letter)
        if not hits:
            raise AmbiguousWildcard("No letter makes a new word with the wild tile.", word=word)
        if len(hits) > 1:
            raise AmbiguousWildcard(
                f"The wild tile could be any of {', '.join(h.upper() for h in hits)}.", word=word
            )
        return hits[0]


class ExplicitWildcardResolver(WildcardResolver):
    """Always defer to the player, who supplies the letter with ResolveWildcard."""

    def resolve(self, word, index, dictionary, used_words):
        return None


def make_resolver(strategy: str) -> WildcardResolver:
    """Create the resolver for a `wildcard_strategy` setting ("auto" or "explicit")."""
    if strategy == "auto":
        return AutoWildcardResolver()
    if strategy == "explicit":
        return ExplicitWildcardResolver()
    raise ValueError(f"Unknown wildcard strategy: '{strategy}'")
