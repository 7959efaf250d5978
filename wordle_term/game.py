import logging
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, TYPE_CHECKING

from .errors import GameOverError, HardModeViolation, InvalidLength, NotADictionaryWord

# the validator lives in words.py, which imports the constants below
if TYPE_CHECKING:
    from .words import WordValidator

logger = logging.getLogger(__name__)

WORD_LENGTH = 5
TOTAL_GUESSES = 6
ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class LetterHint(IntEnum):
    """Feedback for one letter. The ordering is the upgrade precedence."""
    UNKNOWN = 0
    NOT_IN_WORD = 1
    SOMEWHERE = 2
    LOCATED = 3


class SessionStatus(Enum):
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"


GuessResult = Tuple[LetterHint, ...]


def evaluate(guess: str, target: str) -> GuessResult:
    """
    Scores a guess against the target, one hint per position.

    Exact matches are settled first so that a letter already accounted for at
    its correct position can't also be credited as SOMEWHERE elsewhere.
    """
    if len(guess) != WORD_LENGTH or len(target) != WORD_LENGTH:
        raise InvalidLength(guess, WORD_LENGTH)

    guess = guess.upper()
    target = target.upper()
    if not all(c in ALPHABET for c in guess + target):
        raise ValueError(f"Only letters A-Z can be scored: {guess!r}, {target!r}")

    hints = [LetterHint.NOT_IN_WORD] * WORD_LENGTH

    # unmatched occurrences of each letter in the target, indexed A..Z
    remaining = [0] * len(ALPHABET)
    for letter in target:
        remaining[ord(letter) - ord("A")] += 1

    # exact matches
    for i in range(WORD_LENGTH):
        if guess[i] == target[i]:
            hints[i] = LetterHint.LOCATED
            remaining[ord(guess[i]) - ord("A")] -= 1

    # present letters, limited by what exact matches left over
    for i in range(WORD_LENGTH):
        if hints[i] == LetterHint.LOCATED:
            continue
        slot = ord(guess[i]) - ord("A")
        if remaining[slot] > 0:
            hints[i] = LetterHint.SOMEWHERE
            remaining[slot] -= 1

    return tuple(hints)


def check_hard_mode(guess: str, discovered: List[bool], target: str) -> List[int]:
    """
    Returns the positions where a guess abandons a letter already located.

    Only LOCATED positions are enforced; letters hinted SOMEWHERE may be
    dropped, the same as the reference game.
    """
    return [
        i for i in range(WORD_LENGTH)
        if discovered[i] and guess[i] != target[i]
    ]


class KeyboardHints:
    """Best known hint for every letter across a session."""

    def __init__(self):
        self._hints = {letter: LetterHint.UNKNOWN for letter in ALPHABET}

    def __getitem__(self, letter: str) -> LetterHint:
        return self._hints[letter.upper()]

    def set_hint(self, letter: str, hint: LetterHint) -> None:
        letter = letter.upper()
        # never downgrade
        if hint > self._hints[letter]:
            self._hints[letter] = hint

    def update(self, guess: str, result: GuessResult) -> None:
        for letter, hint in zip(guess, result):
            self.set_hint(letter, hint)

    def as_dict(self) -> Mapping[str, LetterHint]:
        return MappingProxyType(dict(self._hints))


class GameSession:
    MAX_TURNS = TOTAL_GUESSES
    MAX_WORD_LEN = WORD_LENGTH

    def __init__(self, target_word: str, validator: "WordValidator", hard_mode: bool = False):
        if len(target_word) != self.MAX_WORD_LEN:
            raise ValueError(f"Target word must be {self.MAX_WORD_LEN} letters long.")

        self.target = target_word.upper()
        self.validator = validator
        self.hard_mode = hard_mode

        # session state, only ever appended to or upgraded
        self.guesses: List[str] = []
        self.results: List[GuessResult] = []
        self.discovered: List[bool] = [False] * self.MAX_WORD_LEN
        self.keyboard = KeyboardHints()
        self.attempt = 0
        self.status = SessionStatus.ACTIVE

    @property
    def turn(self) -> int:
        return len(self.guesses)

    @property
    def remaining(self) -> int:
        return self.MAX_TURNS - self.turn

    @property
    def is_over(self) -> bool:
        return self.status is not SessionStatus.ACTIVE

    @property
    def won(self) -> bool:
        return self.status is SessionStatus.WON

    @property
    def last_result(self) -> Optional[GuessResult]:
        return self.results[-1] if self.results else None

    def validate(self, guess: str) -> str:
        """
        Checks a guess without touching the session and returns its
        normalised form. Raises a GuessRejected subclass on failure.
        """
        guess_word = guess.strip().upper()

        if len(guess_word) != self.MAX_WORD_LEN:
            raise InvalidLength(guess_word, self.MAX_WORD_LEN)
        if not self.validator.is_valid_guess(guess_word):
            raise NotADictionaryWord(guess_word)
        if self.hard_mode:
            violations = check_hard_mode(guess_word, self.discovered, self.target)
            if violations:
                raise HardModeViolation(guess_word, violations)

        return guess_word

    def submit(self, guess: str) -> GuessResult:
        """
        Processes a guess. Rejected guesses raise without consuming an
        attempt; accepted guesses are scored and move the state machine.
        """
        if self.is_over:
            raise GameOverError(f"Game is over ({self.status.value}).")

        guess_word = self.validate(guess)

        result = evaluate(guess_word, self.target)
        self.guesses.append(guess_word)
        self.results.append(result)

        for i, hint in enumerate(result):
            if hint == LetterHint.LOCATED:
                self.discovered[i] = True
        self.keyboard.update(guess_word, result)

        if guess_word == self.target:
            self.status = SessionStatus.WON
            logger.info("won on attempt %d", self.attempt + 1)
        elif self.attempt == self.MAX_TURNS - 1:
            self.status = SessionStatus.LOST
            logger.info("lost, the word was %s", self.target)
        else:
            self.attempt += 1

        return result
