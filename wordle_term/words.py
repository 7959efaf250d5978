import logging
import random
from bisect import bisect_left
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .errors import WordListError
from .game import ALPHABET, WORD_LENGTH

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'
DEFAULT_ANSWERS_PATH = DATA_DIR / 'answers.txt'
DEFAULT_ALLOWED_PATH = DATA_DIR / 'allowed.txt'

# daily puzzle number 0
DAILY_EPOCH = date(2021, 6, 19)


def load_word_list(path: Path) -> List[str]:
    """
    Reads one word per line, keeping file order. Lines that aren't a
    WORD_LENGTH run of letters are skipped, as are repeats.
    """
    path = Path(path)
    if not path.is_file():
        raise WordListError(f"Error: Word list not found at '{path}'")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise WordListError(f"Error: Could not read word list '{path}': {e}") from e

    words: List[str] = []
    seen = set()
    for line in lines:
        word = line.strip().upper()
        if len(word) != WORD_LENGTH or not all(c in ALPHABET for c in word):
            continue
        if word in seen:
            continue
        seen.add(word)
        words.append(word)

    if not words:
        raise WordListError(f"Error: Word list '{path}' has no {WORD_LENGTH}-letter words.")

    logger.debug("loaded %d words from %s", len(words), path)
    return words


def _contains(sorted_words: Sequence[str], word: str) -> bool:
    index = bisect_left(sorted_words, word)
    return index < len(sorted_words) and sorted_words[index] == word


class WordValidator:
    """Dictionary membership over the answer list and the allowed-guess list."""

    def __init__(self, answers: Iterable[str], allowed: Iterable[str]):
        self.answers = sorted(w.upper() for w in answers)
        self.allowed = sorted(w.upper() for w in allowed)

    def is_valid_guess(self, word: str) -> bool:
        word = word.strip().upper()
        return _contains(self.answers, word) or _contains(self.allowed, word)

    def __contains__(self, word: str) -> bool:
        return self.is_valid_guess(word)


def day_offset(today: Union[date, datetime]) -> int:
    """Whole days from DAILY_EPOCH to the calendar date of `today`."""
    if isinstance(today, datetime):
        if today.tzinfo is not None:
            today = today.astimezone(timezone.utc)
        today = today.date()
    return (today - DAILY_EPOCH).days


class WordSelector:
    """
    Picks target words from the answer list.

    The list must stay in its original file order: the daily index is
    computed against it, so sorting it would change every daily word.
    """

    def __init__(self, answers: Sequence[str]):
        if not answers:
            raise WordListError("Answer list cannot be empty.")
        self.answers = [w.upper() for w in answers]

    def select_daily(self, today: Union[date, datetime]) -> str:
        return self.answers[day_offset(today) % len(self.answers)]

    def select_random(self, rng: Optional[random.Random] = None) -> str:
        rng = rng or random.Random()
        return rng.choice(self.answers)
