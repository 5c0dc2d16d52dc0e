# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Data models for the BBC baseball simulation."""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Hand(str, Enum):
    R = "R"
    L = "L"
    B = "B"  # switch-hitter


class Position(IntEnum):
    """Fielding position codes as stored in the player database."""
    FIRST_BASE = 0
    SECOND_BASE = 10
    THIRD_BASE = 20
    SHORTSTOP = 30
    LEFT_FIELD = 40
    CENTER_FIELD = 50
    RIGHT_FIELD = 60
    CATCHER = 70
    PITCHER = 80

    @property
    def label(self) -> str:
        return _POSITION_LABELS[self.value // 10]


_POSITION_LABELS = (
    "FIRST", "SECOND", "THIRD", "SHORT", "LEFT", "CENTER", "RIGHT", "CATCHER", "PITCHER",
)


class Half(str, Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"


class PlayType(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"
    TRIPLE = "triple"
    HOME_RUN = "home_run"
    GROUND_OUT = "ground_out"
    FLY_OUT = "fly_out"
    LINE_OUT = "line_out"
    STRIKEOUT_SWINGING = "strikeout_swinging"
    STRIKEOUT_CALLED = "strikeout_called"
    WALK = "walk"
    ERROR = "error"
    DOUBLE_PLAY = "double_play"
    TRIPLE_PLAY = "triple_play"
    FIELDERS_CHOICE = "fielders_choice"
    SACRIFICE_FLY = "sacrifice_fly"

    @property
    def is_hit(self) -> bool:
        return self in (PlayType.SINGLE, PlayType.DOUBLE, PlayType.TRIPLE, PlayType.HOME_RUN)


# ---------------------------------------------------------------------------
# Player data model
# ---------------------------------------------------------------------------

class Player(BaseModel):
    """One entry of the player database. Immutable for the life of a game."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=29, description="Surname, upper case")
    year: int = Field(ge=1869, description="Season the rating was drawn from")
    team: str = Field(min_length=1, max_length=19, description="Team abbreviation")
    batting_avg: int = Field(ge=0, le=1000, description="Batting average in thousandths")
    hand: Hand
    position: Position
    jersey: int = Field(ge=1, le=99, description="Looked up as e.g. 3NYY; 0 is not addressable")

    @field_validator("name", "team", mode="before")
    @classmethod
    def _normalise_text(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def average_display(self) -> str:
        return f".{self.batting_avg:03d}"


# ---------------------------------------------------------------------------
# Tunable simulation constants
# ---------------------------------------------------------------------------

class PlayTuning(BaseModel):
    """Fixed cutoffs driving the play generator.

    The defaults reproduce the 1961 program. Out-bucket cutoffs are
    cumulative upper bounds on a roll in [1, 100].
    """
    model_config = ConfigDict(frozen=True)

    hit_bonus: int = Field(default=50, ge=0, description="Added to the batting average for the hit roll")
    hit_roll_max: int = Field(default=1000, ge=1)

    home_run_max: int = 5
    triple_max: int = 12
    double_max: int = 30

    double_play_max: int = 3
    sacrifice_fly_max: int = 8
    strikeout_swinging_max: int = 15
    strikeout_called_max: int = 20
    walk_max: int = 25
    error_max: int = 30
    fielders_choice_max: int = 32
    triple_play_max: int = 33
    ground_out_max: int = 65
    fly_out_max: int = 85

    steal_second_odds: int = Field(default=12, ge=1, description="1-in-N chance a lone runner on first steals")
    double_steal_odds: int = Field(default=20, ge=1)
    caught_stealing_odds: int = Field(default=25, ge=1)

    regulation_innings: int = Field(default=9, ge=1)


DEFAULT_TUNING = PlayTuning()
