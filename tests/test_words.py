import random
from datetime import date, datetime, timedelta, timezone

import pytest

from wordle_term.errors import WordListError
from wordle_term.words import (
    DEFAULT_ALLOWED_PATH,
    DEFAULT_ANSWERS_PATH,
    WordSelector,
    WordValidator,
    day_offset,
    load_word_list,
)

from .conftest import ALLOWED, ANSWERS


def test_load_word_list_keeps_order_and_filters(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("speed\nCrane\n\n abc\nto0ls\nspeed\nhello world\n  tiger  \n")
    assert load_word_list(path) == ["SPEED", "CRANE", "TIGER"]


def test_load_word_list_missing_file(tmp_path):
    with pytest.raises(WordListError):
        load_word_list(tmp_path / "nope.txt")


def test_load_word_list_without_usable_words(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("cat\ndog\n")
    with pytest.raises(WordListError):
        load_word_list(path)


def test_bundled_word_lists():
    answers = load_word_list(DEFAULT_ANSWERS_PATH)
    allowed = load_word_list(DEFAULT_ALLOWED_PATH)
    assert "CRANE" in answers
    assert answers[0] == "CIGAR"
    assert len(allowed) > len(answers)


def test_validator_accepts_members_of_either_list(validator):
    for word in ANSWERS + ALLOWED:
        assert validator.is_valid_guess(word)
    assert validator.is_valid_guess("crane")
    assert "trace" in validator


@pytest.mark.parametrize("word", ["QQQQQ", "CRAN", "", "CRANES", "AAAAA"])
def test_validator_rejects_non_members(validator, word):
    assert not validator.is_valid_guess(word)


def test_validator_sorts_its_own_copies():
    answers = ["ZEBRA", "APPLE"]
    validator = WordValidator(answers, ["MANGO"])
    assert answers == ["ZEBRA", "APPLE"]
    assert validator.answers == ["APPLE", "ZEBRA"]
    assert validator.is_valid_guess("ZEBRA")


def test_day_offset():
    assert day_offset(date(2021, 6, 19)) == 0
    assert day_offset(date(2021, 6, 20)) == 1
    assert day_offset(datetime(2021, 6, 20, 23, 59)) == 1


def test_day_offset_uses_utc_for_aware_datetimes():
    eastern = timezone(timedelta(hours=-5))
    late_evening = datetime(2024, 3, 1, 23, 30, tzinfo=eastern)
    assert day_offset(late_evening) == day_offset(date(2024, 3, 2))


def test_daily_is_stable_within_a_day():
    selector = WordSelector(ANSWERS)
    morning = selector.select_daily(datetime(2024, 3, 1, 0, 5))
    evening = selector.select_daily(datetime(2024, 3, 1, 23, 59))
    assert morning == evening
    # a fresh selector, as after a restart
    assert WordSelector(ANSWERS).select_daily(date(2024, 3, 1)) == morning


def test_daily_changes_between_days():
    selector = WordSelector(ANSWERS)
    today = date(2024, 3, 1)
    words = [selector.select_daily(today + timedelta(days=n)) for n in range(len(ANSWERS))]
    assert sorted(words) == sorted(ANSWERS)


def test_daily_uses_file_order():
    selector = WordSelector(ANSWERS)
    assert selector.select_daily(date(2021, 6, 19)) == ANSWERS[0]
    assert selector.select_daily(date(2021, 6, 19) + timedelta(days=len(ANSWERS) + 2)) == ANSWERS[2]


def test_random_selection_is_injectable():
    selector = WordSelector(ANSWERS)
    first = selector.select_random(random.Random(7))
    second = selector.select_random(random.Random(7))
    assert first == second
    assert first in ANSWERS
    assert selector.select_random() in ANSWERS


def test_selector_needs_answers():
    with pytest.raises(WordListError):
        WordSelector([])
