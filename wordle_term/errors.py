"""
Exceptions raised by the game core, the word lists and the stats store.
"""

from typing import Iterable, Tuple


class WordleError(Exception):
    """Base class for every error raised by this package."""


class GuessRejected(WordleError):
    """A guess was refused. No attempt is consumed."""

    reason = "rejected"


class InvalidLength(GuessRejected):
    reason = "length"

    def __init__(self, guess: str, expected: int):
        self.guess = guess
        self.expected = expected
        super().__init__(f"Guess must be {expected} letters long.")


class NotADictionaryWord(GuessRejected):
    reason = "dictionary"

    def __init__(self, guess: str):
        self.guess = guess
        super().__init__(f"'{guess}' is not in word list.")


class HardModeViolation(GuessRejected):
    reason = "hard-mode"

    def __init__(self, guess: str, positions: Iterable[int]):
        self.guess = guess
        self.positions: Tuple[int, ...] = tuple(positions)
        # positions are reported 1-based to the player
        named = ", ".join(str(p + 1) for p in self.positions)
        super().__init__(f"Must use revealed hints (position {named}).")


class GameOverError(WordleError):
    """Raised when a guess is submitted to a finished session."""


class WordListError(WordleError):
    """A word list is missing, unreadable or empty."""


class PersistenceError(WordleError):
    pass


class PersistenceReadFailure(PersistenceError):
    pass


class PersistenceWriteFailure(PersistenceError):
    pass
