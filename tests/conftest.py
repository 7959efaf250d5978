import pytest

from wordle_term.stats import StatsStore
from wordle_term.words import WordValidator

ANSWERS = ["CRANE", "SPEED", "HUMOR", "PAUSE", "TIGER", "PLANT", "LIGHT"]
ALLOWED = ["TRACE", "ERASE", "HONOR", "EERIE", "LEPER", "SLATE", "BRAKE", "RAISE"]


@pytest.fixture
def validator():
    return WordValidator(ANSWERS, ALLOWED)


@pytest.fixture
def store(tmp_path):
    return StatsStore(tmp_path / "stats.json")


@pytest.fixture
def word_files(tmp_path):
    answers = tmp_path / "answers.txt"
    allowed = tmp_path / "allowed.txt"
    answers.write_text("crane\n")
    allowed.write_text("\n".join(w.lower() for w in ANSWERS + ALLOWED) + "\n")
    return answers, allowed
