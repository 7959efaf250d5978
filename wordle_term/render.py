import logging
from html import escape
from pathlib import Path
from typing import List, Optional, TYPE_CHECKING

from .game import LetterHint, TOTAL_GUESSES, WORD_LENGTH

# Use a forward reference for the type hint to avoid circular imports
if TYPE_CHECKING:
    from .game import GameSession, GuessResult
    from .stats import GameStats

logger = logging.getLogger(__name__)

# --- Constants and Paths ---
ASSETS_DIR = Path(__file__).parent / 'assets'
TEMPLATE_PATH = ASSETS_DIR / 'template.html'
CSS_PATH = ASSETS_DIR / 'styles.css'

KEYBOARD_ROWS = ["QWERTYUIOP", "ASDFGHJKL", "ZXCVBNM"]
MAX_HISTOGRAM_BAR = 15
INDENT = "     "
CURSOR = "█"

EMOJI = {
    LetterHint.NOT_IN_WORD: "⬛",
    LetterHint.SOMEWHERE: "🟨",
    LetterHint.LOCATED: "🟩",
}
HINT_COLORS = {
    LetterHint.UNKNOWN: None,
    LetterHint.NOT_IN_WORD: "red",
    LetterHint.SOMEWHERE: "yellow",
    LetterHint.LOCATED: "green",
}
# css class per hint, used by the share card
HINT_CLASSES = {
    LetterHint.UNKNOWN: "",
    LetterHint.NOT_IN_WORD: "absent",
    LetterHint.SOMEWHERE: "present",
    LetterHint.LOCATED: "correct",
}


def colored(st, color: Optional[str], background=False): return f"\u001b[{10*background+60*(color.upper() == color)+30+['black', 'red', 'green', 'yellow', 'blue', 'magenta', 'cyan', 'white'].index(color.lower())}m{st}\u001b[0m" if color is not None else st


def format_percent(value: float) -> str:
    """One decimal place, trailing zeros dropped: 66.7, 50, 0."""
    text = f"{value:.1f}".rstrip("0").rstrip(".")
    return text or "0"


def share_lines(results: List['GuessResult']) -> List[str]:
    return ["".join(EMOJI[hint] for hint in result) for result in results]


# --- Text-based UI Class ---
class TextUI:
    def __init__(self, color: bool = True):
        self.color = color

    def _paint(self, text: str, hint: LetterHint) -> str:
        return colored(text, HINT_COLORS[hint]) if self.color else text

    def print_welcome(self, hard_mode: bool = False, daily: bool = False):
        print("Wordle!")
        print(f"Guess the {WORD_LENGTH}-letter word in {TOTAL_GUESSES} tries.")
        if daily:
            print("   Daily Puzzle!")
        if hard_mode:
            print("     Hard Mode")
        print("-" * 30)

    def get_input(self, game: 'GameSession') -> str:
        attempt_num = game.turn + 1
        prompt = f"Attempt #{attempt_num} ({game.remaining} left). Enter your guess: "
        return input(prompt).strip().upper()

    def format_row(self, guess: str, result: Optional['GuessResult'] = None) -> str:
        if result is not None:
            slots = [self._paint(letter, hint) for letter, hint in zip(guess, result)]
        else:
            slots = list(guess)
            # cursor on the first empty slot, blanks after it
            if len(slots) < WORD_LENGTH:
                slots.append(CURSOR)
            slots.extend("_" * (WORD_LENGTH - len(slots)))
        return INDENT + " ".join(slots)

    def board_string(self, game: 'GameSession', pending: str = "") -> str:
        lines = []
        for i in range(game.MAX_TURNS):
            if i < game.turn:
                lines.append(self.format_row(game.guesses[i], game.results[i]))
            elif i == game.turn and not game.is_over:
                lines.append(self.format_row(pending))
            else:
                lines.append(INDENT + " ".join("_" * WORD_LENGTH))
        return "\n".join(lines)

    def keyboard_string(self, game: 'GameSession') -> str:
        hints = game.keyboard.as_dict()
        lines = []
        for i, row in enumerate(KEYBOARD_ROWS):
            keys = [self._paint(key, hints[key]) for key in row]
            lines.append(" " * i + " ".join(keys))
        return "\n".join(lines)

    def get_text_observation(self, game: 'GameSession', status: Optional[str] = None) -> str:
        status_message = f"{status}\n\n" if status else ""
        return f"{status_message}{self.board_string(game)}\n\n{self.keyboard_string(game)}"

    def print_game_over(self, game: 'GameSession'):
        if game.won:
            print("You win!\n")
        else:
            print(f"\nThe word was {game.target}\n")

    def stats_report(self, stats: 'GameStats', hard_mode: bool = False) -> str:
        wins = stats.histogram(hard_mode)
        total_games = stats.games_played(hard_mode)

        title = "Game Stats (Hard Mode)" if hard_mode else "Game Stats"
        lines = [
            title,
            "",
            f"   Total Games: {total_games}",
            f"         Win %: {format_percent(stats.win_percent(hard_mode))}",
            f"Current Streak: {stats.streak}",
            f"   Best Streak: {stats.best_streak}",
            "",
            "Guess Distribution:",
            "",
        ]

        # bars scale so the most common result gets the full width
        most = max(wins)
        pad = max(len(str(n)) for n in wins)
        for i, count in enumerate(wins):
            bar = int(min(MAX_HISTOGRAM_BAR, count * MAX_HISTOGRAM_BAR / most)) if most else 0
            lines.append(f"{i + 1}: {str(count).rjust(pad)} {'█' * bar}".rstrip())

        return "\n".join(lines)

    def share_text(self, game: 'GameSession', puzzle_number: int) -> str:
        turn = str(game.attempt + 1) if game.won else "X"
        hard = "*" if game.hard_mode else ""
        header = f"Wordle {puzzle_number} {turn}/{TOTAL_GUESSES}{hard}"
        return "\n".join([header, ""] + share_lines(game.results))


# --- Share card generation ---
def generate_html(game: 'GameSession') -> str:
    grid_html = ''
    for r in range(game.MAX_TURNS):
        grid_html += '<div class="row">'
        if r < game.turn:
            for letter, hint in zip(game.guesses[r], game.results[r]):
                grid_html += f'<div class="tile {HINT_CLASSES[hint]} filled">{escape(letter)}</div>'
        else:
            for _ in range(game.MAX_WORD_LEN):
                grid_html += '<div class="tile"></div>'
        grid_html += '</div>'

    hints = game.keyboard.as_dict()
    keyboard_html = ''
    for row in KEYBOARD_ROWS:
        keyboard_html += '<div class="keyboard-row">'
        for key in row:
            keyboard_html += f'<span class="key {HINT_CLASSES[hints[key]]}">{key}</span>'
        keyboard_html += '</div>'

    turn = str(game.attempt + 1) if game.won else "X"
    title = f"{turn}/{game.MAX_TURNS}{'*' if game.hard_mode else ''}"

    with open(TEMPLATE_PATH, 'r', encoding='utf-8') as f:
        html_template = f.read()
    return html_template.format(title_html=escape(title), grid_html=grid_html, keyboard_html=keyboard_html)


def render_share_card(game: 'GameSession', output_path: Path) -> Optional[Path]:
    """
    Renders the board as a PNG share card at output_path.
    Needs a Chrome/Chromium install for html2image to drive.
    """
    from html2image import Html2Image

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    html = generate_html(game)
    with open(CSS_PATH, 'r', encoding='utf-8') as f:
        css = f.read()

    hti = Html2Image(custom_flags=['--disable-gpu', '--no-sandbox', '--headless=new', '--log-level=3'], output_path=str(output_path.parent))

    files: List[str] = hti.screenshot(html_str=html, css_str=css, save_as=output_path.name, size=(500, 700))
    if not files:
        logger.warning("html2image produced no screenshot for %s", output_path)
        return None

    logger.info("share card saved to %s", files[0])
    return Path(files[0])
