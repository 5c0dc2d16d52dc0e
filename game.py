# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""BBC Baseball Simulation -- main entry point.

Run with:  uv run game.py                                  # answer the prompts
           uv run game.py --date 7/4/61 --time 1300 \\
               --lineup COBB SPEAKER RUTH 4NYY FOXX HORNSBY WAGNER TRAYNOR COCHRANE
           uv run game.py --quiet --json game.json        # box score only, dump the log
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, Iterator, TextIO

from pydantic import ValidationError

from config import get_log_level, get_play_tuning
from models import Player, PlayTuning
from narration import (
    ConsoleNarrator,
    format_final_score,
    format_header,
    format_line_score,
    format_lineup_heading,
    format_player_row,
)
from rng import DualLCG
from roster import (
    LineupError,
    RosterError,
    load_players,
    select_home_lineup,
    select_visiting_lineup,
    validate_lineups,
)
from simulation import GameState, SimulationEngine, game_state_to_dict

logger = logging.getLogger(__name__)

# Seed text used when stdin closes before the prompts are answered
DEFAULT_DATE = "111"
DEFAULT_TIME = "343"


def prompt_lines(prompt: str, input_fn: Callable[[str], str] = input) -> Iterator[str]:
    """Yield typed lines until end of input."""
    while True:
        try:
            yield input_fn(prompt)
        except EOFError:
            return


def ask(prompt: str, default: str, input_fn: Callable[[str], str] = input) -> str:
    """Return the answer exactly as typed; every character feeds the seed."""
    try:
        return input_fn(prompt)
    except EOFError:
        return default


def run_game(date_text: str, time_text: str, lineup_entries: Iterable[str],
             players: list[Player], tuning: PlayTuning | None = None,
             out: TextIO | None = None, verbose: bool = True) -> GameState:
    """Seed the engine, pick both lineups, and play one game to the end."""
    out = out or sys.stdout
    rng = DualLCG.seeded(date_text, time_text)
    logger.debug("Seeded %r", rng)

    print("\n\nENTER YOUR LINEUP BELOW", file=out)
    print(format_lineup_heading("VISITORS"), file=out)
    visiting = select_visiting_lineup(
        lineup_entries, players, rng,
        on_select=lambda p: print(format_player_row(p, with_name=False), file=out),
        on_reject=lambda _text, reason: print(reason, file=out),
    )

    home = select_home_lineup(visiting, players, rng)
    print("\n" + format_lineup_heading("HOME TEAM"), file=out)
    for player in home:
        print(format_player_row(player), file=out)
    print("\n", file=out)

    validate_lineups(visiting, home)

    listeners = [ConsoleNarrator(out)] if verbose else []
    engine = SimulationEngine(rng, tuning=tuning, listeners=listeners)
    game = engine.play_game(visiting, home)

    box = engine.generate_box_score(game)
    print(format_final_score(box), file=out)
    print(format_line_score(box), file=out)
    return game


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="BBC Baseball Simulation (1961): pick nine visitors and play a game."
    )
    parser.add_argument(
        "--date", default=None,
        help="Today's date, any text. Prompted for when omitted.",
    )
    parser.add_argument(
        "--time", default=None,
        help="The time, any text. Prompted for when omitted.",
    )
    parser.add_argument(
        "--lineup", nargs="+", default=None, metavar="PLAYER",
        help="Visiting lineup as surnames or jersey+team keys (e.g. 3NYY). "
             "Prompted for when omitted.",
    )
    parser.add_argument(
        "--roster", type=Path, default=None,
        help="Player database JSON (default: $BBC_ROSTER_PATH or data/players.json).",
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Skip the play-by-play; print only the final totals.",
    )
    parser.add_argument(
        "--json", type=Path, default=None, metavar="PATH",
        help="Write the full game log as JSON to PATH.",
    )
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=get_log_level(),
        format="%(levelname)s: %(message)s",
    )

    try:
        tuning = get_play_tuning()
        players = load_players(args.roster)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error loading game data: {e}", file=sys.stderr)
        return 1

    print(format_header())
    date_text = args.date if args.date is not None else ask("TODAYS DATE IS >", DEFAULT_DATE)
    time_text = args.time if args.time is not None else ask("\n\nTHE TIME IS >", DEFAULT_TIME)

    entries = args.lineup if args.lineup else prompt_lines(">")

    try:
        game = run_game(date_text, time_text, entries, players,
                        tuning=tuning, verbose=not args.quiet)
    except (LineupError, RosterError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        args.json.write_text(json.dumps(game_state_to_dict(game), indent=2))
        logger.info("Wrote game log to %s", args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
