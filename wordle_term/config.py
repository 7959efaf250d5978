"""
Configuration Module

Settings are read from environment variables, after loading an optional .env
file from the working directory. Command line flags override them.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .stats import DEFAULT_STATS_PATH
from .words import DEFAULT_ALLOWED_PATH, DEFAULT_ANSWERS_PATH

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    stats_path: Path = DEFAULT_STATS_PATH
    answers_path: Path = DEFAULT_ANSWERS_PATH
    allowed_path: Path = DEFAULT_ALLOWED_PATH
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        env = os.environ if environ is None else environ

        def _path(name: str, default: Optional[Path]) -> Optional[Path]:
            value = env.get(name)
            return Path(value).expanduser() if value else default

        return cls(
            stats_path=_path("WORDLE_STATS_PATH", DEFAULT_STATS_PATH),
            answers_path=_path("WORDLE_ANSWERS_PATH", DEFAULT_ANSWERS_PATH),
            allowed_path=_path("WORDLE_ALLOWED_PATH", DEFAULT_ALLOWED_PATH),
            log_level=env.get("WORDLE_LOG_LEVEL", "WARNING").upper(),
            log_file=_path("WORDLE_LOG_FILE", None),
        )


def configure_logging(settings: Settings) -> None:
    """Logs go to stderr, and also to settings.log_file when one is set."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    level = getattr(logging, settings.log_level, None)
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)
