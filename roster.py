# /// script
# requires-python = ">=3.12"
# dependencies = ["pydantic>=2.0"]
# ///
"""Player database and lineup selection.

The visiting lineup is picked by the user, one entry at a time, by surname
(``RUTH``) or by jersey number and team (``3NYY`` or ``3-NYY``). Every pick
is folded into the random engine. The home lineup is then drawn at random
from the players left over.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from config import get_roster_path
from models import Player
from rng import DualLCG

logger = logging.getLogger(__name__)

LINEUP_SIZE = 9

REJECT_NOT_FOUND = "NON-VALID PLAYER. RETRY."
REJECT_DUPLICATE = "PLAYER ALREADY SELECTED. RETRY."


class RosterError(ValueError):
    """Raised when the player database is inconsistent."""


class LineupError(ValueError):
    """Raised when a lineup is incomplete or repeats a player."""


# ---------------------------------------------------------------------------
# Load roster data
# ---------------------------------------------------------------------------

def load_players(path: Path | None = None) -> list[Player]:
    """Load and validate the player database from JSON."""
    p = path or get_roster_path()
    with open(p) as f:
        raw = json.load(f)

    players = [Player.model_validate(entry) for entry in raw["players"]]

    names: set[str] = set()
    jerseys: set[tuple[int, str]] = set()
    for player in players:
        if player.name in names:
            raise RosterError(f"Duplicate player name {player.name!r} in {p}")
        if (player.jersey, player.team) in jerseys:
            raise RosterError(f"Duplicate jersey {player.jersey}{player.team} in {p}")
        names.add(player.name)
        jerseys.add((player.jersey, player.team))

    logger.debug("Loaded %d players from %s", len(players), p)
    return players


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

def _parse_jersey_key(search: str) -> tuple[int, str] | None:
    """Split '99NYY' or '99-NYY' into (99, 'NYY'); None for anything else."""
    if "-" in search:
        number, _, team = search.partition("-")
    else:
        digits = len(search) - len(search.lstrip("0123456789"))
        number, team = search[:digits], search[digits:]

    if not number.isdigit() or not team or int(number) <= 0:
        return None
    return int(number), team


def find_player_index(text: str, players: Sequence[Player]) -> int | None:
    """Return the roster index of the player named by ``text``, or None.

    A jersey+team key never falls back to a name search.
    """
    search = text.strip().upper()

    key = _parse_jersey_key(search)
    if key is not None:
        jersey, team = key
        for idx, player in enumerate(players):
            if player.jersey == jersey and player.team == team:
                return idx
        return None

    for idx, player in enumerate(players):
        if player.name == search:
            return idx
    return None


def find_player(text: str, players: Sequence[Player]) -> Player | None:
    idx = find_player_index(text, players)
    return players[idx] if idx is not None else None


# ---------------------------------------------------------------------------
# Lineup selection
# ---------------------------------------------------------------------------

def select_visiting_lineup(
    entries: Iterable[str],
    players: Sequence[Player],
    rng: DualLCG,
    on_select: Callable[[Player], None] | None = None,
    on_reject: Callable[[str, str], None] | None = None,
    size: int = LINEUP_SIZE,
) -> list[Player]:
    """Build the visiting lineup from typed entries.

    Blank entries are skipped; unknown or repeated players are rejected and
    reported through ``on_reject(entry, message)``. Stops reading as soon as
    the lineup is full.

    Raises:
        LineupError: ``entries`` ran out before the lineup was full.
    """
    lineup: list[Player] = []
    chosen: set[int] = set()

    for entry in entries:
        text = entry.strip()
        if not text:
            continue

        idx = find_player_index(text, players)
        if idx is None:
            reason = REJECT_NOT_FOUND
        elif idx in chosen:
            reason = REJECT_DUPLICATE
        else:
            reason = ""

        if reason:
            logger.info("Rejected lineup entry %r: %s", text, reason)
            if on_reject:
                on_reject(text, reason)
            continue

        player = players[idx]
        lineup.append(player)
        chosen.add(idx)
        rng.mix_selection(player.batting_avg, idx, player.year, player.hand.value)
        if on_select:
            on_select(player)

        if len(lineup) == size:
            return lineup

    raise LineupError(f"Visiting lineup incomplete: {len(lineup)} of {size} players selected")


def select_home_lineup(
    visiting: Sequence[Player],
    players: Sequence[Player],
    rng: DualLCG,
    size: int = LINEUP_SIZE,
) -> list[Player]:
    """Draw the home lineup at random from the players the visitors left."""
    available = [idx for idx, player in enumerate(players) if player not in visiting]
    if len(available) < size:
        raise LineupError(
            f"Only {len(available)} players left for the home team, need {size}"
        )

    lineup: list[Player] = []
    for _ in range(size):
        selection = rng.next_int(0, len(available) - 1)
        lineup.append(players[available.pop(selection)])
    return lineup


def validate_lineups(visiting: Sequence[Player], home: Sequence[Player],
                     size: int = LINEUP_SIZE) -> None:
    """Check both lineups before a game starts.

    Raises:
        LineupError: a lineup is the wrong size, or a player appears twice.
    """
    for label, lineup in (("visiting", visiting), ("home", home)):
        if len(lineup) != size:
            raise LineupError(f"The {label} lineup has {len(lineup)} players, need {size}")

    seen: set[tuple[str, str, int]] = set()
    for player in list(visiting) + list(home):
        key = (player.name, player.team, player.jersey)
        if key in seen:
            raise LineupError(f"{player.name} appears more than once across the lineups")
        seen.add(key)
