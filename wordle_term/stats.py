"""
Cross-session statistics.

GameStats is the persisted record; StatsStore reads and writes it as JSON in
a single file (by default ~/.wordle). A missing record yields zeroed stats; a
corrupt record is deleted and replaced by zeroed stats.
"""

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import PersistenceReadFailure, PersistenceWriteFailure
from .game import TOTAL_GUESSES

logger = logging.getLogger(__name__)

DEFAULT_STATS_PATH = Path.home() / '.wordle'
DAILY_WINDOW = timedelta(hours=24)


def _empty_histogram() -> List[int]:
    return [0] * TOTAL_GUESSES


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GameStats:
    total_games: int = 0
    total_hard_games: int = 0
    wins: List[int] = field(default_factory=_empty_histogram)
    hard_wins: List[int] = field(default_factory=_empty_histogram)
    streak: int = 0
    best_streak: int = 0
    last_daily: Optional[datetime] = None
    emoji_sharing: bool = False
    default_hard_mode: bool = False

    def histogram(self, hard: bool) -> List[int]:
        return self.hard_wins if hard else self.wins

    def games_played(self, hard: bool) -> int:
        return self.total_hard_games if hard else self.total_games

    def record_start(self, hard: bool) -> None:
        if hard:
            self.total_hard_games += 1
        else:
            self.total_games += 1

    def record_win(self, attempt: int, hard: bool) -> None:
        if not 0 <= attempt < TOTAL_GUESSES:
            raise ValueError(f"attempt must be in [0, {TOTAL_GUESSES}), got {attempt}")
        self.histogram(hard)[attempt] += 1
        # one streak shared by both modes
        self.streak += 1
        self.best_streak = max(self.best_streak, self.streak)

    def record_loss(self) -> None:
        self.streak = 0

    def win_percent(self, hard: bool) -> float:
        played = self.games_played(hard)
        if played == 0:
            return 0.0
        return sum(self.histogram(hard)) * 100 / played

    def daily_due(self, now: Optional[datetime] = None) -> bool:
        if self.last_daily is None:
            return True
        now = now or _utcnow()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now - self.last_daily > DAILY_WINDOW

    def mark_daily(self, now: Optional[datetime] = None) -> None:
        now = now or _utcnow()
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        self.last_daily = datetime(now.year, now.month, now.day, tzinfo=timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['last_daily'] = self.last_daily.isoformat() if self.last_daily else None
        return data

    @classmethod
    def from_dict(cls, data: Any) -> 'GameStats':
        """Builds stats from a decoded record. Raises PersistenceReadFailure on a bad shape."""
        if not isinstance(data, dict):
            raise PersistenceReadFailure("stats record is not an object")

        stats = cls()
        for name in ('total_games', 'total_hard_games', 'streak', 'best_streak'):
            if name in data:
                value = data[name]
                if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                    raise PersistenceReadFailure(f"{name} must be a non-negative integer")
                setattr(stats, name, value)

        for name in ('wins', 'hard_wins'):
            if name in data:
                value = data[name]
                if (not isinstance(value, list) or len(value) != TOTAL_GUESSES
                        or not all(isinstance(n, int) and not isinstance(n, bool) and n >= 0 for n in value)):
                    raise PersistenceReadFailure(f"{name} must be {TOTAL_GUESSES} non-negative integers")
                setattr(stats, name, list(value))

        for name in ('emoji_sharing', 'default_hard_mode'):
            if name in data:
                if not isinstance(data[name], bool):
                    raise PersistenceReadFailure(f"{name} must be a boolean")
                setattr(stats, name, data[name])

        last_daily = data.get('last_daily')
        if last_daily is not None:
            try:
                parsed = datetime.fromisoformat(last_daily)
            except (TypeError, ValueError) as e:
                raise PersistenceReadFailure(f"last_daily is not a timestamp: {e}") from e
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            stats.last_daily = parsed

        return stats


class StatsStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_STATS_PATH

    def load(self) -> GameStats:
        if not self.path.is_file():
            return GameStats()

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.warning("could not read stats from %s: %s", self.path, e)
            return GameStats()

        try:
            try:
                data = json.loads(raw.decode('utf-8'))
            except UnicodeDecodeError as e:
                raise PersistenceReadFailure(f"not UTF-8: {e}") from e
            except ValueError as e:
                raise PersistenceReadFailure(f"invalid JSON: {e}") from e
            return GameStats.from_dict(data)
        except PersistenceReadFailure as e:
            # present but unreadable, discard it
            logger.warning("discarding corrupt stats file %s: %s", self.path, e)
            self._discard()
            return GameStats()

    def _discard(self) -> None:
        try:
            self.path.unlink()
        except OSError as e:
            logger.warning("could not remove %s: %s", self.path, e)

    def save(self, stats: GameStats) -> None:
        """Atomically replaces the stats record. Raises PersistenceWriteFailure."""
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix='.wordle-', suffix='.tmp', dir=directory)
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(stats.to_dict(), f)
                    f.write('\n')
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.remove(tmp_name)
                raise
        except OSError as e:
            raise PersistenceWriteFailure(f"could not save stats to {self.path}: {e}") from e
        logger.debug("saved stats to %s", self.path)
