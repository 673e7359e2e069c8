"""Exception types raised by the word chain engine."""


class WordChainError(Exception):
    """Base class for all engine errors."""


class DictionaryNotReady(WordChainError):
    """The dictionary is still loading; submissions are not accepted yet."""


class DictionaryUnavailable(WordChainError):
    """The dictionary failed to load; no word can be validated until it is reloaded."""


class GenerationFailed(WordChainError):
    """No candidate board met the solvability thresholds (strict generation only)."""


class GenerationCancelled(WordChainError):
    """Board generation was stopped because its result is no longer wanted."""


class SubmissionError(WordChainError):
    """A recoverable rejection of the current path or submission."""

    user_visible: bool = True
    """Whether the rejection should be surfaced to the player."""

    def __init__(self, message: str, *, word: str | None = None) -> None:
        super().__init__(message)
        self.word = word


class InvalidPath(SubmissionError):
    """A non-adjacent, duplicate or off-board cell was added to the path."""

    user_visible = False


class WordTooShort(SubmissionError):
    """The submitted word has fewer than 3 letters."""


class WordNotFound(SubmissionError):
    """The submitted word is not in the dictionary."""

    def __init__(
        self, message: str, *, word: str | None = None, suggestions: list[str] | None = None
    ) -> None:
        super().__init__(message, word=word)
        self.suggestions = suggestions or []


class WordAlreadyUsed(SubmissionError):
    """The submitted word was already committed this round."""


class ChainViolation(SubmissionError):
    """The submitted path shares no tile with the previously committed word."""


class BlockedTile(SubmissionError):
    """The path touches a stone tile."""


class AmbiguousWildcard(SubmissionError):
    """A wild tile could not be resolved to exactly one letter."""


class GameOver(SubmissionError):
    """The round has ended; no further moves are accepted."""


class ActionUnavailable(WordChainError):
    """A consumable action does not apply to the current round."""


class RoundNotReady(WordChainError):
    """No round has been generated or restored yet."""
