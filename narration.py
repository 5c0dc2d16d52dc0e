# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Console text for the simulation.

Turns ``PlayEvent`` payloads and box scores into the teletype-style lines of
the 1961 printout. Nothing here touches the random engine: every variant and
location was drawn by the engine when the play happened.
"""

from __future__ import annotations

import sys
from typing import TextIO

from models import Player, PlayType
from simulation import BaseState, PlayEvent

RULE = "=" * 40


# ---------------------------------------------------------------------------
# Header and lineups
# ---------------------------------------------------------------------------

def format_header() -> str:
    return "\n".join([
        "",
        RULE,
        "  BBC BASEBALL SIMULATION (1961)",
        "  Burgeson Baseball Computer",
        RULE,
        "",
    ])


def format_lineup_heading(team_label: str) -> str:
    return f"\n{team_label}\n\nNAME       TEAM AVG BATS\n"


def format_player_row(player: Player, with_name: bool = True) -> str:
    """One lineup row. Without the name it echoes a typed-in selection."""
    details = (f"{player.position.label:<2} {player.year:4d} {player.team:<18} "
               f"{player.average_display}  {player.hand.value}")
    if with_name:
        return f"{player.name:<10} {details}"
    return f"        {details}"


# ---------------------------------------------------------------------------
# Plays
# ---------------------------------------------------------------------------

def _single(event: PlayEvent) -> str:
    if event.variant <= 2:
        return f"SINGLE OVER {event.location}"
    elif event.variant <= 3:
        return f"INF. HIT TO {event.location}"
    return f"SINGLE TO {event.location}"


def _double(event: PlayEvent) -> str:
    if event.variant <= 2:
        return f"TEXAS LEAGER DOUBLE TO {event.location}"
    elif event.variant <= 3:
        return f"DOUBLE OVER {event.location}"
    return f"DOUBLE TO {event.location}"


def _home_run(event: PlayEvent) -> str:
    if event.variant <= 3:
        return f"HOMER  TO {event.location}"
    elif event.variant <= 4:
        return "BLAST OVER C F WALL"
    return f"HOME RUN TO {event.location}"


def _ground_out(event: PlayEvent) -> str:
    bases = event.bases_after
    prefix = f"GROUNDER TO {event.location}"
    if event.variant <= 2 and bases.first:
        return f"{prefix} BATTER SAFE AT FIRST RUNNER OUT AT SECOND"
    elif event.variant <= 3 and bases.first and bases.second:
        return f"{prefix} BATTER SAFE AT FIRST RUNNER OUT IN RUNDOWN"
    elif event.variant <= 4 and bases.third and event.outs_after < 2:
        return f"{prefix} BATTER SAFE AT FIRST RUNNER OUT AT HOME"
    return prefix


def _fly_out(event: PlayEvent) -> str:
    if event.variant <= 2:
        return f"LONG FLY TO {event.location}"
    elif event.variant <= 3:
        return f"SHORT FLY TO {event.location}"
    elif event.variant <= 4:
        return f"POP FLY TO {event.location}"
    elif event.variant <= 5:
        return f"FOUL OUT TO {event.location}"
    return f"FLY BALL TO {event.location}"


_PLAY_TEXT = {
    PlayType.SINGLE: _single,
    PlayType.DOUBLE: _double,
    PlayType.TRIPLE: lambda e: f"TRIPLE TO {e.location}",
    PlayType.HOME_RUN: _home_run,
    PlayType.GROUND_OUT: _ground_out,
    PlayType.FLY_OUT: _fly_out,
    PlayType.LINE_OUT: lambda e: f"LINE DRIVE TO {e.location}",
    PlayType.STRIKEOUT_SWINGING: lambda e: "STRUCK OUT SWINGING",
    PlayType.STRIKEOUT_CALLED: lambda e: "STRUCK OUT CALLED",
    PlayType.WALK: lambda e: "BASE   ON BALLS",
    PlayType.ERROR: lambda e: f"ERROR ON {e.location} FIELDER",
    PlayType.DOUBLE_PLAY: lambda e: f"GROUNDER TO {e.location} DOUBLE PLAY",
    PlayType.TRIPLE_PLAY: lambda e: "LINE DRIVE TRIPLE PLAY",
    PlayType.FIELDERS_CHOICE: lambda e: "GROUNDER TO SHORT BATTER SAFE AT FIRST RUNNER OUT AT SECOND",
    PlayType.SACRIFICE_FLY: lambda e: f"LONG FLY TO {e.location}",
}


def describe_runs(runs: int) -> str:
    if runs <= 0:
        return ""
    elif runs == 1:
        return " RUNNER SCORES"
    elif runs == 2:
        return " TWO RUNS SCORE"
    elif runs == 3:
        return " 3 RUNS COME IN"
    return f" {runs} RUNS SCORE"


def describe_play(event: PlayEvent) -> str:
    """Render an at-bat event, e.g. 'RUTH UP  HOME RUN TO RIGHT TWO RUNS SCORE'."""
    return f"{event.batter} UP  {_PLAY_TEXT[event.play](event)}{describe_runs(event.runs_scored)}"


def describe_bases(bases: BaseState) -> str:
    if bases.first and bases.second and bases.third:
        return " BASES LOADED"
    elif bases.first and bases.second:
        return " RUNNERS ON 1ST AND 2ND"
    elif bases.second and bases.third:
        return " RUNNERS ON 2ND AND 3RD"
    elif bases.first and bases.third:
        return " RUNNERS ON 1ST AND 3RD"
    elif bases.third:
        return " RUNNER ON 3RD"
    elif bases.second:
        return " RUNNER ON 2ND"
    elif bases.first:
        return " RUNNER ON 1ST"
    return ""


def describe_event(event: PlayEvent) -> list[str]:
    """Return the printed lines for any event; some events print nothing."""
    if event.event_type == "at_bat":
        lines = [describe_play(event)]
        if event.show_bases:
            lines.append(describe_bases(event.bases_after))
        return lines
    if event.event_type == "steal":
        return ["RUNNER STEALS SECOND"]
    if event.event_type == "double_steal":
        return ["RUNNERS STEAL SECOND AND THIRD"]
    if event.event_type == "caught_stealing":
        return ["RUNNER OUT STEALING SECOND"]
    if event.event_type == "half_end":
        return ["", f"{event.runs_scored} RUNS  {event.hits} HITS  {event.errors} ERRORS"]
    if event.event_type == "inning_end":
        return ["", f"END OF INNING {event.inning}    SCORE {event.score_visitors} {event.score_home}", ""]
    return []


# ---------------------------------------------------------------------------
# Box score
# ---------------------------------------------------------------------------

def format_final_score(box: dict) -> str:
    """The totals block printed when the game is over."""
    lines = ["", "", "", "GAME COMPLETED. TOTALS", ""]
    for side in ("visitors", "home"):
        team = box[side]
        lines.append(f"{team['team_name']:<16}{team['runs']:02d}  {team['hits']:02d}  {team['errors']:02d}")
    lines.append("")
    return "\n".join(lines)


def format_line_score(box: dict) -> str:
    """Runs by inning plus R/H/E for both teams."""
    innings = box["innings"]
    header = f"{'TEAM':<10}"
    for i in range(1, innings + 1):
        header += f" {i:>2}"
    header += "  |  R  H  E"
    lines = [header, "-" * len(header)]

    for side in ("visitors", "home"):
        team = box[side]
        row = f"{team['team_name']:<10}"
        for runs in team["inning_runs"]:
            row += f" {runs:>2}"
        row += f"  | {team['runs']:>2} {team['hits']:>2} {team['errors']:>2}"
        lines.append(row)

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Live output
# ---------------------------------------------------------------------------

class ConsoleNarrator:
    """Engine listener that prints each event as it happens."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def __call__(self, event: PlayEvent) -> None:
        for line in describe_event(event):
            print(line, file=self.stream)
