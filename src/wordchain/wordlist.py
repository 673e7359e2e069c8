"""Module for dictionary loading and lookup."""

import re
import sys
from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from os import PathLike
from pathlib import Path
from time import time
from typing import TextIO

from sortedcontainers import SortedList

from wordchain.errors import DictionaryNotReady, DictionaryUnavailable
from wordchain.solver.config import config as engine_config

MIN_WORD_LENGTH = 3
"""Shortest word accepted by the game."""

VALID_WORD_PATTERN = re.compile(r"^[a-z']+$")
"""Dictionary lines must consist of lowercase letters and apostrophes (after normalisation)."""


class DictionaryStatus(StrEnum):
    """Load state of a DictionaryIndex."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass
class LoadReport:
    """Summary of a dictionary load."""

    word_count: int = 0
    """Number of distinct words indexed."""

    skipped: int = 0
    """Number of lines rejected for containing invalid characters."""

    load_time: float = 0.0
    """Seconds spent loading and indexing."""

    error: str | None = None
    """Reason the load failed, if it did."""


def has_prefix(sorted_words: Sequence[str], prefix: str) -> bool:
    """Return whether any word in `sorted_words` starts with `prefix`.

    Binary-searches for the smallest entry >= `prefix` and checks whether it starts with it.

    Args:
        sorted_words: Words in ascending order (a SortedList or a plain sorted list).
        prefix: Lowercase prefix to look for.
    """
    if isinstance(sorted_words, SortedList):
        idx = sorted_words.bisect_left(prefix)
    else:
        idx = bisect_left(sorted_words, prefix)
    if idx >= len(sorted_words):
        return False
    return sorted_words[idx].startswith(prefix)


def normalize_lines(lines: Iterable[str]) -> tuple[set[str], int]:
    """Normalise raw word-list lines.

    Lines are trimmed and lowercased; blank lines are ignored; lines with characters other
    than letters and apostrophes are counted as skipped; words shorter than 3 letters are dropped.

    Returns:
        The set of accepted words and the number of skipped lines.
    """
    words: set[str] = set()
    skipped = 0
    for line in lines:
        word = line.strip().lower()
        if not word:
            continue
        if not VALID_WORD_PATTERN.match(word):
            skipped += 1
            continue
        if len(word) >= MIN_WORD_LENGTH:
            words.add(word)
    return words, skipped


class DictionaryIndex:
    """Immutable word set plus a sorted view used for prefix pruning.

    An index starts out PENDING (nothing can be validated), becomes READY once words are
    loaded, or FAILED if the source was unreachable or empty. A FAILED index can be reloaded.
    """

    def __init__(self) -> None:
        self._words: frozenset[str] = frozenset()
        self._sorted: SortedList[str] = SortedList()
        self.status: DictionaryStatus = DictionaryStatus.PENDING
        self.report: LoadReport = LoadReport()

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "DictionaryIndex":
        """Build a ready index from an iterable of words (or raw lines)."""
        index = cls()
        index.load_lines(words)
        return index

    @classmethod
    def from_file(
        cls, path: PathLike | str | None = None, *, out: TextIO | None = None
    ) -> "DictionaryIndex":
        """Build an index from a newline-delimited word list file.

        Raises:
            DictionaryUnavailable: If the file is missing, unreadable or contains no words.
        """
        index = cls()
        index.load(path, out=out)
        return index

    def load(self, path: PathLike | str | None = None, *, out: TextIO | None = None) -> None:
        """(Re)load the index from a word list file, updating `status` in place.

        Args:
            path: Path of the word list. Defaults to the configured `word_list_path`.
            out: Stream for the load summary (printed only in verbose mode).

        Raises:
            DictionaryUnavailable: If the file is missing, unreadable or contains no words.
        """
        word_list_path = Path(path if path is not None else engine_config.word_list_path)
        start = time()
        try:
            with word_list_path.open("r", encoding="utf-8") as f:
                self.load_lines(f, start_time=start)
        except (OSError, UnicodeDecodeError) as e:
            self._fail(f"Could not read word list {word_list_path}: {e}")
            raise DictionaryUnavailable(self.report.error) from e

        if engine_config.verbose:
            print(
                f"Loaded {self.report.word_count} words from {word_list_path} "
                f"in {self.report.load_time:.3f}s ({self.report.skipped} lines skipped)",
                file=out or sys.stdout,
                flush=True,
            )

    def load_lines(self, lines: Iterable[str], *, start_time: float | None = None) -> None:
        """(Re)load the index from raw lines.

        Raises:
            DictionaryUnavailable: If no valid word was found.
        """
        start = time() if start_time is None else start_time
        words, skipped = normalize_lines(lines)
        if not words:
            self._fail("Word list is empty.")
            raise DictionaryUnavailable(self.report.error)

        self._words = frozenset(words)
        self._sorted = SortedList(words)
        self.report = LoadReport(
            word_count=len(words), skipped=skipped, load_time=time() - start
        )
        # Must be set last: readers on other threads check status before reading words
        self.status = DictionaryStatus.READY

    def _fail(self, reason: str) -> None:
        self._words = frozenset()
        self._sorted = SortedList()
        self.report = LoadReport(error=reason)
        self.status = DictionaryStatus.FAILED

    @property
    def ready(self) -> bool:
        """Whether words can be validated against this index."""
        return self.status == DictionaryStatus.READY

    def require_ready(self) -> None:
        """Raise unless the index is ready.

        Raises:
            DictionaryNotReady: If the index is still loading.
            DictionaryUnavailable: If the index failed to load.
        """
        if self.status == DictionaryStatus.PENDING:
            raise DictionaryNotReady("Dictionary is still loading.")
        if self.status == DictionaryStatus.FAILED:
            raise DictionaryUnavailable(self.report.error or "Dictionary unavailable.")

    @property
    def words(self) -> frozenset[str]:
        return self._words

    @property
    def sorted_words(self) -> SortedList[str]:
        return self._sorted

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return word in self._words

    def contains(self, word: str) -> bool:
        """Return whether `word` (any case) is a dictionary word."""
        return word.lower() in self._words

    def has_prefix(self, prefix: str) -> bool:
        """Return whether some dictionary word starts with `prefix` (any case)."""
        return has_prefix(self._sorted, prefix.lower())

    def suggest(self, word: str, max_suggestions: int = 3) -> list[str]:
        """Suggest dictionary words sharing the first three letters of `word`.

        Only words within two letters of the length of `word` are suggested.
        """
        word = word.lower()
        if len(word) < MIN_WORD_LENGTH:
            return []
        prefix = word[:3]
        suggestions: list[str] = []
        for candidate in self._sorted.irange(minimum=prefix):
            if not candidate.startswith(prefix) or len(suggestions) >= max_suggestions:
                break
            if candidate != word and abs(len(candidate) - len(word)) <= 2:
                suggestions.append(candidate)
        return suggestions
