__version__ = "1.0.0"

from .game import GameSession, LetterHint, SessionStatus, evaluate
from .words import WordSelector, WordValidator
from .stats import GameStats, StatsStore
from .env import GameEnv
from .render import TextUI

__all__ = [
    "GameSession", "LetterHint", "SessionStatus", "evaluate",
    "WordSelector", "WordValidator",
    "GameStats", "StatsStore",
    "GameEnv", "TextUI",
]
