"""Centralized configuration for environment variables."""

import logging
import os
from pathlib import Path

from models import DEFAULT_TUNING, PlayTuning

ROSTER_PATH_ENV = "BBC_ROSTER_PATH"
LOG_LEVEL_ENV = "BBC_LOG_LEVEL"
HIT_BONUS_ENV = "BBC_HIT_BONUS"

DEFAULT_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "players.json"


def get_roster_path() -> Path:
    """Return the player database path, defaulting to the bundled roster."""
    value = os.environ.get(ROSTER_PATH_ENV, "")
    return Path(value) if value else DEFAULT_ROSTER_PATH


def get_log_level() -> int:
    """Return the configured log level, or WARNING if unset or unknown."""
    name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def get_play_tuning() -> PlayTuning:
    """Return the play generator constants, applying any env override."""
    bonus = os.environ.get(HIT_BONUS_ENV, "")
    if not bonus:
        return DEFAULT_TUNING
    try:
        value = int(bonus)
    except ValueError:
        raise ValueError(f"{HIT_BONUS_ENV} must be an integer, got {bonus!r}") from None
    return PlayTuning.model_validate({**DEFAULT_TUNING.model_dump(), "hit_bonus": value})
