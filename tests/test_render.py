import pytest

from wordle_term.game import GameSession
from wordle_term.render import TextUI, format_percent, generate_html, share_lines
from wordle_term.stats import GameStats


@pytest.fixture
def ui():
    return TextUI(color=False)


@pytest.fixture
def won_game(validator):
    game = GameSession("CRANE", validator)
    game.submit("TRACE")
    game.submit("CRANE")
    return game


@pytest.mark.parametrize("value, expected", [
    (66.6666, "66.7"),
    (50.0, "50"),
    (0.0, "0"),
    (100.0, "100"),
    (12.5, "12.5"),
])
def test_format_percent(value, expected):
    assert format_percent(value) == expected


def test_pending_rows(ui):
    assert ui.format_row("") == "     █ _ _ _ _"
    assert ui.format_row("CR") == "     C R █ _ _"
    assert ui.format_row("CRANE") == "     C R A N E"


def test_scored_row_colors(validator):
    game = GameSession("CRANE", validator)
    result = game.submit("TRACE")
    plain = TextUI(color=False).format_row("TRACE", result)
    assert plain == "     T R A C E"

    painted = TextUI(color=True).format_row("TRACE", result)
    assert "\u001b[31mT\u001b[0m" in painted
    assert "\u001b[32mR\u001b[0m" in painted
    assert "\u001b[33mC\u001b[0m" in painted


def test_board_has_a_row_per_turn(ui, validator):
    game = GameSession("CRANE", validator)
    game.submit("TRACE")
    lines = ui.board_string(game).splitlines()
    assert len(lines) == game.MAX_TURNS
    assert lines[0] == "     T R A C E"
    assert lines[1] == "     █ _ _ _ _"
    assert lines[2] == "     _ _ _ _ _"


def test_keyboard_rows(ui, validator):
    game = GameSession("CRANE", validator)
    assert ui.keyboard_string(game).splitlines() == [
        "Q W E R T Y U I O P",
        " A S D F G H J K L",
        "  Z X C V B N M",
    ]


def test_observation_includes_status(ui, validator):
    game = GameSession("CRANE", validator)
    text = ui.get_text_observation(game, status="Invalid: nope")
    assert text.startswith("Invalid: nope\n\n")


def test_stats_report():
    stats = GameStats(total_games=5, wins=[1, 2, 0, 0, 0, 1], streak=1, best_streak=3)
    lines = TextUI().stats_report(stats).splitlines()
    assert lines[0] == "Game Stats"
    assert "   Total Games: 5" in lines
    assert "         Win %: 80" in lines
    assert "Current Streak: 1" in lines
    assert "   Best Streak: 3" in lines
    assert "1: 1 " + "█" * 7 in lines
    assert "2: 2 " + "█" * 15 in lines
    assert "3: 0" in lines


def test_stats_report_without_games():
    lines = TextUI().stats_report(GameStats(), hard_mode=True).splitlines()
    assert lines[0] == "Game Stats (Hard Mode)"
    assert "         Win %: 0" in lines
    assert [line for line in lines if line[:2] in {"1:", "6:"}] == ["1: 0", "6: 0"]


def test_share_text(ui, won_game):
    assert ui.share_text(won_game, 987).splitlines() == [
        "Wordle 987 2/6",
        "",
        "⬛🟩🟩🟨🟩",
        "🟩🟩🟩🟩🟩",
    ]


def test_share_text_for_hard_loss(ui, validator):
    game = GameSession("CRANE", validator, hard_mode=True)
    # none of these locates a letter, so hard mode never blocks them
    for guess in ["SPEED", "HUMOR", "TIGER", "LIGHT", "HONOR", "LEPER"]:
        game.submit(guess)
    assert game.discovered == [False] * 5
    header = ui.share_text(game, 5).splitlines()[0]
    assert header == "Wordle 5 X/6*"
    assert len(share_lines(game.results)) == 6


def test_share_card_html(won_game):
    html = generate_html(won_game)
    assert "Wordle 2/6" in html
    assert '<div class="tile correct filled">R</div>' in html
    assert '<div class="tile present filled">C</div>' in html
    assert html.count('<div class="row">') == won_game.MAX_TURNS
