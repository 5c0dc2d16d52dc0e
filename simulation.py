# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Baseball game simulation engine.

Resolves every batter appearance to a single play category with two weighted
rolls, applies that play to the base runners and the score, and drives
half-innings until a winner is decided. Play-by-play events are emitted to
listeners as they happen; text rendering lives in ``narration``.

All randomness comes from the ``DualLCG`` instance handed to the engine, and
draws are made in a fixed order, so identical seed text and lineups replay
identical games.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from models import DEFAULT_TUNING, Half, Player, PlayTuning, PlayType
from rng import DualLCG

logger = logging.getLogger(__name__)

FIELD_LOCATIONS = (
    "LEFT", "CENTER", "RIGHT", "L CENTR", "R CENTR",
    "FIRST", "SECOND", "THIRD", "SHORT", "PITCHER",
)

OUTS_PER_HALF = 3


# ---------------------------------------------------------------------------
# Base runners
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BaseState:
    """Occupancy of first, second and third.

    Transitions never mutate; they return a new value for the caller to swap
    into the game state.
    """
    first: bool = False
    second: bool = False
    third: bool = False

    @classmethod
    def from_tuple(cls, bases: Sequence[object]) -> BaseState:
        if len(bases) != 3:
            raise ValueError(f"Expected 3 bases, got {len(bases)}")
        return cls(bool(bases[0]), bool(bases[1]), bool(bases[2]))

    def as_tuple(self) -> tuple[bool, bool, bool]:
        return (self.first, self.second, self.third)

    def occupied(self, base: int) -> bool:
        """Return True if ``base`` (1, 2 or 3) holds a runner."""
        return self.as_tuple()[base - 1]

    @property
    def occupied_count(self) -> int:
        return sum(self.as_tuple())

    @property
    def is_empty(self) -> bool:
        return not any(self.as_tuple())

    def runs_scored(self, bases_to_advance: int) -> int:
        """Count the runners that would cross the plate on ``advance``."""
        if bases_to_advance < 0:
            raise ValueError(f"bases_to_advance must be >= 0, got {bases_to_advance}")
        bases = self.as_tuple()
        return sum(1 for idx in range(2, -1, -1)
                   if bases[idx] and idx + bases_to_advance >= 3)

    def advance(self, bases_to_advance: int) -> BaseState:
        """Move every runner forward; runners pushed past third are dropped."""
        if bases_to_advance < 0:
            raise ValueError(f"bases_to_advance must be >= 0, got {bases_to_advance}")
        current = self.as_tuple()
        new_bases = [False, False, False]
        for idx in range(2, -1, -1):
            if current[idx]:
                destination = idx + bases_to_advance
                if destination < 3:
                    new_bases[destination] = True
        return BaseState(*new_bases)

    def clear(self) -> BaseState:
        return BaseState()

    def with_runner(self, base: int) -> BaseState:
        bases = list(self.as_tuple())
        bases[base - 1] = True
        return BaseState(*bases)

    def without_runner(self, base: int) -> BaseState:
        bases = list(self.as_tuple())
        bases[base - 1] = False
        return BaseState(*bases)

    def __str__(self) -> str:
        """Return base state string like '110' for runners on 1st and 2nd."""
        return "".join("1" if b else "0" for b in self.as_tuple())


# ---------------------------------------------------------------------------
# Play effects
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlayEffect:
    """What a play does to the bases, the score and the out count."""
    bases: BaseState
    runs: int = 0
    outs: int = 0
    hit: bool = False
    error: bool = False


def _single(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.advance(1).with_runner(1), runs=bases.runs_scored(1), hit=True)


def _double(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.advance(2).with_runner(2), runs=bases.runs_scored(2), hit=True)


def _triple(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.clear().with_runner(3), runs=bases.runs_scored(3), hit=True)


def _home_run(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.clear(), runs=1 + bases.occupied_count, hit=True)


def _walk(bases: BaseState) -> PlayEffect:
    # Only runners forced by the batter move.
    if bases.first and bases.second and bases.third:
        return PlayEffect(bases=bases, runs=1)
    if bases.first and bases.second:
        return PlayEffect(bases=BaseState(True, True, True))
    if bases.first:
        return PlayEffect(bases=BaseState(True, True, bases.third))
    return PlayEffect(bases=bases.with_runner(1))


def _error(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.advance(1).with_runner(1), runs=bases.runs_scored(1), error=True)


def _double_play(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.clear(), outs=2)


def _triple_play(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases.clear(), outs=3)


def _fielders_choice(bases: BaseState) -> PlayEffect:
    # A runner forced home is the one retired, so nobody scores.
    return PlayEffect(bases=bases.advance(1).with_runner(1), outs=1)


def _sacrifice_fly(bases: BaseState) -> PlayEffect:
    if bases.third:
        return PlayEffect(bases=bases.without_runner(3), runs=1, outs=1)
    return PlayEffect(bases=bases, outs=1)


def _batter_out(bases: BaseState) -> PlayEffect:
    return PlayEffect(bases=bases, outs=1)


PLAY_EFFECTS: dict[PlayType, Callable[[BaseState], PlayEffect]] = {
    PlayType.SINGLE: _single,
    PlayType.DOUBLE: _double,
    PlayType.TRIPLE: _triple,
    PlayType.HOME_RUN: _home_run,
    PlayType.GROUND_OUT: _batter_out,
    PlayType.FLY_OUT: _batter_out,
    PlayType.LINE_OUT: _batter_out,
    PlayType.STRIKEOUT_SWINGING: _batter_out,
    PlayType.STRIKEOUT_CALLED: _batter_out,
    PlayType.WALK: _walk,
    PlayType.ERROR: _error,
    PlayType.DOUBLE_PLAY: _double_play,
    PlayType.TRIPLE_PLAY: _triple_play,
    PlayType.FIELDERS_CHOICE: _fielders_choice,
    PlayType.SACRIFICE_FLY: _sacrifice_fly,
}

# Draws made for the play description, in order. Outfield locations are the
# first five entries of FIELD_LOCATIONS, infield the last five.
_VARIANT = ("variant", 1, 10)
_ANYWHERE = ("location", 0, 9)
_OUTFIELD = ("location", 0, 4)
_INFIELD = ("location", 5, 9)
_FENCES = ("location", 0, 2)

NARRATION_DRAWS: dict[PlayType, tuple[tuple[str, int, int], ...]] = {
    PlayType.SINGLE: (_VARIANT, _ANYWHERE),
    PlayType.DOUBLE: (_OUTFIELD, _VARIANT),
    PlayType.TRIPLE: (_OUTFIELD,),
    PlayType.HOME_RUN: (_VARIANT, _FENCES),
    PlayType.GROUND_OUT: (_INFIELD, _VARIANT),
    PlayType.FLY_OUT: (_OUTFIELD, _VARIANT),
    PlayType.LINE_OUT: (_INFIELD,),
    PlayType.STRIKEOUT_SWINGING: (),
    PlayType.STRIKEOUT_CALLED: (),
    PlayType.WALK: (),
    PlayType.ERROR: (_INFIELD,),
    PlayType.DOUBLE_PLAY: (_INFIELD,),
    PlayType.TRIPLE_PLAY: (),
    PlayType.FIELDERS_CHOICE: (),
    PlayType.SACRIFICE_FLY: (_OUTFIELD,),
}


# ---------------------------------------------------------------------------
# Outcome classifier
# ---------------------------------------------------------------------------

def determine_play_result(rng: DualLCG, batting_avg: int, outs: int, bases: BaseState,
                          tuning: PlayTuning = DEFAULT_TUNING) -> PlayType:
    """Pick the play for one at-bat.

    The first roll decides hit or no hit against the batting average plus a
    fixed bonus. The second roll picks the kind of hit, or walks the
    situational out buckets in order. A bucket whose situation does not hold
    keeps its range; the roll simply moves on to the next bucket.
    """
    roll = rng.next_int(1, tuning.hit_roll_max)
    hit_threshold = batting_avg + tuning.hit_bonus

    if roll <= hit_threshold:
        hit_type = rng.next_int(1, 100)
        if hit_type <= tuning.home_run_max:
            return PlayType.HOME_RUN
        elif hit_type <= tuning.triple_max:
            return PlayType.TRIPLE
        elif hit_type <= tuning.double_max:
            return PlayType.DOUBLE
        else:
            return PlayType.SINGLE

    out_type = rng.next_int(1, 100)
    if out_type <= tuning.double_play_max and bases.first and outs < 2:
        return PlayType.DOUBLE_PLAY
    elif out_type <= tuning.sacrifice_fly_max and outs < 2 and (bases.second or bases.third):
        return PlayType.SACRIFICE_FLY
    elif out_type <= tuning.strikeout_swinging_max:
        return PlayType.STRIKEOUT_SWINGING
    elif out_type <= tuning.strikeout_called_max:
        return PlayType.STRIKEOUT_CALLED
    elif out_type <= tuning.walk_max:
        return PlayType.WALK
    elif out_type <= tuning.error_max:
        return PlayType.ERROR
    elif out_type <= tuning.fielders_choice_max and bases.first:
        return PlayType.FIELDERS_CHOICE
    elif out_type <= tuning.triple_play_max and bases.first and bases.second and outs == 0:
        return PlayType.TRIPLE_PLAY
    elif out_type <= tuning.ground_out_max:
        return PlayType.GROUND_OUT
    elif out_type <= tuning.fly_out_max:
        return PlayType.FLY_OUT
    else:
        return PlayType.LINE_OUT


# ---------------------------------------------------------------------------
# Play-by-play event
# ---------------------------------------------------------------------------

@dataclass
class PlayEvent:
    inning: int
    half: Half
    event_type: str  # "at_bat", "steal", "double_steal", "caught_stealing", "half_end", "inning_end", "game_end"
    batter: str = ""
    play: Optional[PlayType] = None
    location: str = ""
    variant: int = 0
    runs_scored: int = 0
    hits: int = 0
    errors: int = 0
    outs_before: int = 0
    outs_after: int = 0
    bases_before: BaseState = field(default_factory=BaseState)
    bases_after: BaseState = field(default_factory=BaseState)
    show_bases: bool = False
    score_home: int = 0
    score_visitors: int = 0
    winning_team: str = ""

    def to_dict(self) -> dict:
        return {
            "inning": self.inning,
            "half": self.half.value,
            "event_type": self.event_type,
            "batter": self.batter,
            "play": self.play.value if self.play else None,
            "location": self.location,
            "variant": self.variant,
            "runs_scored": self.runs_scored,
            "hits": self.hits,
            "errors": self.errors,
            "outs": {"before": self.outs_before, "after": self.outs_after},
            "bases": {"before": str(self.bases_before), "after": str(self.bases_after)},
            "show_bases": self.show_bases,
            "score": {"home": self.score_home, "visitors": self.score_visitors},
            "winning_team": self.winning_team,
        }


# ---------------------------------------------------------------------------
# Team game state
# ---------------------------------------------------------------------------

@dataclass
class TeamState:
    """Mutable state for one team during a game."""
    name: str
    lineup: list[Player]
    lineup_index: int = 0  # who bats next (0-8)
    score: int = 0
    hits: int = 0
    errors: int = 0
    inning_runs: list[int] = field(default_factory=list)

    def current_batter(self) -> Player:
        return self.lineup[self.lineup_index]

    def advance_batter(self) -> Player:
        self.lineup_index = (self.lineup_index + 1) % len(self.lineup)
        return self.lineup[self.lineup_index]


# ---------------------------------------------------------------------------
# Main game state
# ---------------------------------------------------------------------------

@dataclass
class GameState:
    """Authoritative game state."""
    visitors: TeamState
    home: TeamState
    inning: int = 1
    half: Half = Half.TOP  # TOP = visitors bat, BOTTOM = home bats
    outs: int = 0
    bases: BaseState = field(default_factory=BaseState)
    play_log: list[PlayEvent] = field(default_factory=list)
    game_over: bool = False
    winning_team: str = ""
    seed: tuple[int, int] = (0, 0)

    # Running totals for the half-inning in progress
    half_inning_runs: int = 0
    half_inning_hits: int = 0
    half_inning_errors: int = 0

    def batting_team(self) -> TeamState:
        return self.visitors if self.half == Half.TOP else self.home

    def fielding_team(self) -> TeamState:
        return self.home if self.half == Half.TOP else self.visitors

    @property
    def innings_played(self) -> int:
        return len(self.home.inning_runs)

    def start_half(self, half: Half) -> None:
        self.half = half
        self.outs = 0
        self.bases = self.bases.clear()
        self.half_inning_runs = 0
        self.half_inning_hits = 0
        self.half_inning_errors = 0

    def score_display(self) -> str:
        return f"{self.visitors.name} {self.visitors.score} - {self.home.name} {self.home.score}"


# ---------------------------------------------------------------------------
# Simulation engine
# ---------------------------------------------------------------------------

class SimulationEngine:
    """Resolves at-bats and manages game flow.

    The engine owns no hidden random state: every draw goes through the
    ``DualLCG`` passed in, which is shared with lineup selection so that a
    whole session replays from its seed text.
    """

    def __init__(self, rng: DualLCG, tuning: PlayTuning | None = None,
                 listeners: Sequence[Callable[[PlayEvent], None]] | None = None):
        self.rng = rng
        self.tuning = tuning or DEFAULT_TUNING
        self._listeners: list[Callable[[PlayEvent], None]] = list(listeners or [])

    def add_listener(self, listener: Callable[[PlayEvent], None]) -> None:
        self._listeners.append(listener)

    def _emit(self, game_state: GameState, event: PlayEvent) -> None:
        game_state.play_log.append(event)
        for listener in self._listeners:
            listener(event)

    def _event(self, game_state: GameState, event_type: str, **kwargs) -> PlayEvent:
        return PlayEvent(
            inning=game_state.inning,
            half=game_state.half,
            event_type=event_type,
            score_home=game_state.home.score,
            score_visitors=game_state.visitors.score,
            **kwargs,
        )

    # -------------------------------------------------------------------
    # Game initialization
    # -------------------------------------------------------------------

    def initialize_game(self, visiting_lineup: Sequence[Player],
                        home_lineup: Sequence[Player]) -> GameState:
        """Create a GameState for two already validated lineups."""
        return GameState(
            visitors=TeamState(name="VISITORS", lineup=list(visiting_lineup)),
            home=TeamState(name="HOMETEAM", lineup=list(home_lineup)),
            seed=self.rng.state,
        )

    # -------------------------------------------------------------------
    # Base stealing
    # -------------------------------------------------------------------

    def attempt_steal(self, game_state: GameState) -> PlayEvent | None:
        """Decide whether a runner goes before the pitch.

        Each check draws only when the checks before it did not fire.
        """
        t = self.tuning
        bases = game_state.bases
        outs = game_state.outs

        if self.rng.next_int(1, t.steal_second_odds) == 1 and bases.first and not bases.second and outs < 2:
            event_type = "steal"
            new_bases = bases.without_runner(1).with_runner(2)
        elif (self.rng.next_int(1, t.double_steal_odds) == 1 and bases.first and bases.second
              and not bases.third and outs < 2):
            event_type = "double_steal"
            new_bases = BaseState(False, True, True)
        elif self.rng.next_int(1, t.caught_stealing_odds) == 1 and bases.first and outs < 2:
            event_type = "caught_stealing"
            new_bases = bases.without_runner(1)
            game_state.outs += 1
        else:
            return None

        game_state.bases = new_bases
        logger.debug("%s: bases %s -> %s, outs %d", event_type, bases, new_bases, game_state.outs)
        event = self._event(
            game_state, event_type,
            outs_before=outs, outs_after=game_state.outs,
            bases_before=bases, bases_after=new_bases,
        )
        self._emit(game_state, event)
        return event

    # -------------------------------------------------------------------
    # Plays
    # -------------------------------------------------------------------

    def determine_play(self, game_state: GameState, batter: Player) -> PlayType:
        return determine_play_result(
            self.rng, batter.batting_avg, game_state.outs, game_state.bases, self.tuning
        )

    def _draw_descriptor(self, play: PlayType) -> tuple[str, int]:
        location = ""
        variant = 0
        for kind, low, high in NARRATION_DRAWS[play]:
            value = self.rng.next_int(low, high)
            if kind == "location":
                location = FIELD_LOCATIONS[value]
            else:
                variant = value
        return location, variant

    def execute_play(self, game_state: GameState, play: PlayType, batter: Player) -> PlayEvent:
        """Apply a play to the game state and emit its event."""
        team = game_state.batting_team()
        bases_before = game_state.bases
        outs_before = game_state.outs

        effect = PLAY_EFFECTS[play](bases_before)
        game_state.bases = effect.bases
        game_state.outs += effect.outs

        if effect.hit:
            team.hits += 1
            game_state.half_inning_hits += 1
        if effect.error:
            team.errors += 1
            game_state.half_inning_errors += 1

        team.score += effect.runs
        game_state.half_inning_runs += effect.runs

        location, variant = self._draw_descriptor(play)
        show_bases = self.rng.next_int(1, 3) == 1 and not game_state.bases.is_empty

        event = self._event(
            game_state, "at_bat",
            batter=batter.name,
            play=play,
            location=location,
            variant=variant,
            runs_scored=effect.runs,
            outs_before=outs_before,
            outs_after=game_state.outs,
            bases_before=bases_before,
            bases_after=game_state.bases,
            show_bases=show_bases,
        )
        self._emit(game_state, event)
        return event

    def play_at_bat(self, game_state: GameState, batter: Player) -> PlayEvent | None:
        """Run the steal check, then the at-bat unless a steal ended the half."""
        self.attempt_steal(game_state)
        if game_state.outs >= OUTS_PER_HALF:
            return None
        play = self.determine_play(game_state, batter)
        return self.execute_play(game_state, play, batter)

    # -------------------------------------------------------------------
    # Game flow
    # -------------------------------------------------------------------

    def play_half_inning(self, game_state: GameState, half: Half) -> None:
        game_state.start_half(half)
        team = game_state.batting_team()
        logger.debug("%s of inning %d, %s batting", half.value, game_state.inning, team.name)

        while game_state.outs < OUTS_PER_HALF:
            self.play_at_bat(game_state, team.current_batter())
            team.advance_batter()

        team.inning_runs.append(game_state.half_inning_runs)
        self._emit(game_state, self._event(
            game_state, "half_end",
            runs_scored=game_state.half_inning_runs,
            hits=game_state.half_inning_hits,
            errors=game_state.half_inning_errors,
            outs_before=game_state.outs,
            outs_after=game_state.outs,
        ))

    def play_game(self, visiting_lineup: Sequence[Player],
                  home_lineup: Sequence[Player]) -> GameState:
        """Simulate a complete game.

        The home team always bats in the bottom half. The game ends after a
        full inning past regulation in which the score is not tied; there is
        no cap on extra innings.
        """
        game = self.initialize_game(visiting_lineup, home_lineup)

        while not game.game_over:
            self.play_half_inning(game, Half.TOP)
            self.play_half_inning(game, Half.BOTTOM)
            self._emit(game, self._event(game, "inning_end"))

            game.inning += 1
            if game.inning > self.tuning.regulation_innings and game.home.score != game.visitors.score:
                game.game_over = True
                game.winning_team = (game.home.name if game.home.score > game.visitors.score
                                     else game.visitors.name)

        logger.info("Game over after %d innings: %s", game.innings_played, game.score_display())
        self._emit(game, PlayEvent(
            inning=game.innings_played,
            half=Half.BOTTOM,
            event_type="game_end",
            score_home=game.home.score,
            score_visitors=game.visitors.score,
            winning_team=game.winning_team,
        ))
        return game

    # -------------------------------------------------------------------
    # Box score
    # -------------------------------------------------------------------

    def generate_box_score(self, game_state: GameState) -> dict:
        """Generate the line score and R/H/E totals for the game."""
        def team_box(team: TeamState) -> dict:
            return {
                "team_name": team.name,
                "inning_runs": list(team.inning_runs),
                "runs": team.score,
                "hits": team.hits,
                "errors": team.errors,
                "lineup": [p.name for p in team.lineup],
            }

        return {
            "visitors": team_box(game_state.visitors),
            "home": team_box(game_state.home),
            "final_score": {
                "visitors": game_state.visitors.score,
                "home": game_state.home.score,
            },
            "winning_team": game_state.winning_team,
            "innings": game_state.innings_played,
            "seed": list(game_state.seed),
        }


# ---------------------------------------------------------------------------
# Serialization support
# ---------------------------------------------------------------------------

def game_state_to_dict(game_state: GameState) -> dict:
    """Serialize game state to a dict for JSON output."""
    def team_to_dict(team: TeamState) -> dict:
        return {
            "name": team.name,
            "lineup": [p.model_dump(mode="json") for p in team.lineup],
            "lineup_index": team.lineup_index,
            "score": team.score,
            "hits": team.hits,
            "errors": team.errors,
            "inning_runs": team.inning_runs,
        }

    return {
        "inning": game_state.inning,
        "half": game_state.half.value,
        "outs": game_state.outs,
        "bases": str(game_state.bases),
        "game_over": game_state.game_over,
        "winning_team": game_state.winning_team,
        "seed": list(game_state.seed),
        "visitors": team_to_dict(game_state.visitors),
        "home": team_to_dict(game_state.home),
        "play_log": [e.to_dict() for e in game_state.play_log],
    }
