import argparse
import logging
import random
import signal
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

from . import __version__
from .config import Settings, configure_logging
from .errors import GuessRejected, PersistenceWriteFailure, WordListError
from .game import GameSession
from .render import TextUI, render_share_card
from .stats import GameStats, StatsStore
from .words import WordSelector, WordValidator, day_offset, load_word_list

logger = logging.getLogger(__name__)

SAVE_WARNING = "(problem saving stats)"


class GameEnv:
    """A Wordle game environment: one session plus its stats bookkeeping."""

    def __init__(
        self,
        answers: Sequence[str],
        allowed: Sequence[str],
        store: StatsStore,
        hard_mode: Optional[bool] = None,
        ui: Optional[TextUI] = None,
    ):
        """
        Initializes the environment.

        Args:
            answers: answer-eligible words, in their original file order.
            allowed: additional words accepted as guesses.
            store: where stats are read from and written to.
            hard_mode: force hard mode on or off; None uses the saved preference.
            ui: renderer used for text observations.
        """
        self.selector = WordSelector(answers)
        self.validator = WordValidator(answers, allowed)
        self.store = store
        self.hard_mode_arg = hard_mode
        self.ui = ui or TextUI()

        self.stats: GameStats = GameStats()
        self.game: Optional[GameSession] = None
        self.daily = False
        self.puzzle_number = 0
        self.save_failed = False
        self.last_status: Optional[str] = None
        self._finalized = False
        self._recorded = False

    def reset(
        self,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
        daily: Optional[bool] = None,
    ) -> Dict[str, Any]:
        """
        Starts a new session and returns the initial observation. The daily
        puzzle is played when `daily` is True, or when it is None and no daily
        has been played in the last 24 hours.
        """
        now = now or datetime.now(timezone.utc)
        self.stats = self.store.load()

        self.daily = self.stats.daily_due(now) if daily is None else daily
        self.puzzle_number = day_offset(now)
        if self.daily:
            target = self.selector.select_daily(now)
            # saved together with the first checkpoint
            self.stats.mark_daily(now)
        else:
            target = self.selector.select_random(rng)

        hard_mode = self.stats.default_hard_mode if self.hard_mode_arg is None else self.hard_mode_arg
        self.game = GameSession(target, self.validator, hard_mode=hard_mode)
        self.save_failed = False
        self.last_status = None
        self._finalized = False
        self._recorded = False

        logger.info("new %s game (hard=%s)", "daily" if self.daily else "free", hard_mode)
        return self._get_observation()

    def step(self, guess: str) -> Tuple[Dict[str, Any], bool]:
        """
        Submits a guess and returns the new observation and the done flag.
        A rejected guess leaves the session untouched and is reported in the
        observation's status.
        """
        if not self.game:
            raise RuntimeError("You must call reset() before calling step().")

        self.last_status = None
        try:
            result = self.game.submit(guess)
        except GuessRejected as e:
            logger.debug("rejected %r: %s", guess, e)
            self.last_status = f"Invalid: {e}"
            return self._get_observation(reason=e.reason), self.game.is_over

        if self.game.turn == 1:
            # the game counts from its first accepted guess
            self.stats.record_start(self.game.hard_mode)
            self._save()

        if self.game.is_over:
            self._finish()

        return self._get_observation(result=result), self.game.is_over

    def abandon(self) -> bool:
        """
        Handles an interrupted session. Counts as a loss when at least one
        guess was accepted. Safe to call more than once.

        An interrupt can land inside step() after the session has ended but
        before its result was recorded; that result is recorded here instead.
        """
        if self._finalized or not self.game or self.game.turn == 0:
            return False
        if self.game.is_over:
            self._finish()
            return not self.game.won

        if not self._recorded:
            self._recorded = True
            self.stats.record_loss()
        self._save()
        self._finalized = True
        logger.info("session abandoned after %d guesses", self.game.turn)
        return True

    def _finish(self) -> None:
        if self._finalized:
            return
        # recorded once; finalized only once the save has gone through
        if not self._recorded:
            self._recorded = True
            if self.game.won:
                self.stats.record_win(self.game.attempt, self.game.hard_mode)
            else:
                self.stats.record_loss()
        self._save()
        self._finalized = True

    def _save(self) -> None:
        try:
            self.store.save(self.stats)
        except PersistenceWriteFailure as e:
            logger.warning("%s", e)
            self.save_failed = True
            self.last_status = SAVE_WARNING

    def _get_observation(self, result=None, reason: Optional[str] = None) -> Dict[str, Any]:
        if not self.game:
            return {}

        return {
            'text': self.ui.get_text_observation(self.game, status=self.last_status),
            'status': self.last_status,
            'reason': reason,
            'result': result,
        }


def _parse_toggle(value: str) -> bool:
    if value not in ('on', 'off'):
        raise argparse.ArgumentTypeError("expected 'on' or 'off'")
    return value == 'on'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wordle-term',
        description=(
            "Each guess must be a valid word. Red letters aren't in the answer, yellow letters "
            "are in the answer, green letters are in the answer at that position. Hard mode: once "
            "a letter is green, all future guesses must include it in that position."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument('-H', '--hard', action='store_true', default=None, help="Play in hard mode")
    parser.add_argument('-s', '--stats', action='store_true', help="Print stats and exit")
    parser.add_argument('-v', '--version', action='store_true', help="Print the version and exit")
    parser.add_argument('--free', action='store_true', help="Play a random word even if the daily puzzle is due")
    parser.add_argument('--answers', type=Path, default=None, help="Path to the answer word list")
    parser.add_argument('--allowed', type=Path, default=None, help="Path to the allowed-guess word list")
    parser.add_argument('--stats-file', type=Path, default=None, help="Path to the stats record")
    parser.add_argument('--share-card', type=Path, default=None, help="Save a PNG of the final board here")
    parser.add_argument('--emoji-sharing', type=_parse_toggle, default=None, metavar='{on,off}',
                        help="Print an emoji grid when a game ends")
    parser.add_argument('--default-hard', type=_parse_toggle, default=None, metavar='{on,off}',
                        help="Play hard mode unless told otherwise")
    parser.add_argument('--no-color', action='store_true', help="Disable ANSI colors")
    return parser


def _update_preferences(store: StatsStore, args: argparse.Namespace) -> None:
    if args.emoji_sharing is None and args.default_hard is None:
        return
    stats = store.load()
    if args.emoji_sharing is not None:
        stats.emoji_sharing = args.emoji_sharing
    if args.default_hard is not None:
        stats.default_hard_mode = args.default_hard
    try:
        store.save(stats)
    except PersistenceWriteFailure as e:
        logger.warning("%s", e)
        print(SAVE_WARNING)


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Runs an interactive Wordle game from the command line."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"v{__version__}")
        return 0

    settings = Settings.from_env()
    configure_logging(settings)

    store = StatsStore(args.stats_file or settings.stats_path)
    _update_preferences(store, args)
    ui = TextUI(color=not args.no_color and sys.stdout.isatty())

    if args.stats:
        stats = store.load()
        hard = stats.default_hard_mode if args.hard is None else args.hard
        print(ui.stats_report(stats, hard_mode=hard))
        return 0

    try:
        answers = load_word_list(args.answers or settings.answers_path)
        allowed = load_word_list(args.allowed or settings.allowed_path)
    except WordListError as e:
        print(e)
        return 1

    env = GameEnv(answers, allowed, store, hard_mode=args.hard, ui=ui)
    obs = env.reset(daily=False if args.free else None)
    game = env.game

    # SIGTERM takes the same path as Ctrl-C
    signal.signal(signal.SIGTERM, _raise_interrupt)

    ui.print_welcome(hard_mode=game.hard_mode, daily=env.daily)
    print(obs['text'])

    try:
        while not game.is_over:
            action = ui.get_input(game)
            if not action:
                continue
            obs, done = env.step(action)
            print(obs['text'])
    except (KeyboardInterrupt, EOFError):
        env.abandon()
        if game.won:
            ui.print_game_over(game)
        elif game.turn:
            print(f"\nThe word was {game.target}")
        else:
            print("\n\nExiting game.")
        return 0

    try:
        ui.print_game_over(game)
        print(ui.stats_report(env.stats, hard_mode=game.hard_mode))

        if env.stats.emoji_sharing:
            print()
            print(ui.share_text(game, env.puzzle_number))

        if args.share_card:
            try:
                render_share_card(game, args.share_card)
            except Exception as e:
                logger.warning("could not render share card: %s", e)
                print(f"(could not save share card: {e})")
    except (KeyboardInterrupt, EOFError):
        # stats were saved when the game ended
        print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
