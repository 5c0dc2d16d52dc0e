# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the player database and lineup selection.

Verifies:
1. The bundled roster loads and validates
2. Players can be found by surname or by jersey number and team
3. Unknown and repeated picks are rejected without ending selection
4. Each pick perturbs the random engine
5. The home lineup is drawn from players the visitors left
6. Lineup validation catches short or overlapping lineups
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from pydantic import ValidationError

from config import ROSTER_PATH_ENV
from models import Hand, Position
from rng import DualLCG
from roster import (
    REJECT_DUPLICATE,
    REJECT_NOT_FOUND,
    LineupError,
    RosterError,
    find_player,
    find_player_index,
    load_players,
    select_home_lineup,
    select_visiting_lineup,
    validate_lineups,
)

LINEUP = ["COBB", "SPEAKER", "RUTH", "4NYY", "FOXX", "HORNSBY", "WAGNER", "TRAYNOR", "COCHRANE"]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_roster(tmp_path, entries):
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": entries}))
    return path


def make_entry(name="TESTER", team="TST", jersey=1, **overrides):
    entry = {"name": name, "year": 1950, "team": team, "batting_avg": 300,
             "hand": "R", "position": 0, "jersey": jersey}
    entry.update(overrides)
    return entry


@pytest.fixture
def players():
    return load_players()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def test_bundled_roster_loads(players):
    assert len(players) == 45
    assert len({p.name for p in players}) == 45
    assert len({(p.jersey, p.team) for p in players}) == 45
    # five at every position
    for position in Position:
        assert sum(1 for p in players if p.position == position) == 5
    print("  test_bundled_roster_loads: PASSED")


def test_player_fields(players):
    ruth = find_player("RUTH", players)
    assert ruth.year == 1923
    assert ruth.team == "NYY"
    assert ruth.batting_avg == 393
    assert ruth.hand == Hand.L
    assert ruth.position == Position.RIGHT_FIELD
    assert ruth.position.label == "RIGHT"
    assert ruth.average_display == ".393"


def test_roster_path_from_environment(tmp_path, monkeypatch):
    path = write_roster(tmp_path, [make_entry()])
    monkeypatch.setenv(ROSTER_PATH_ENV, str(path))
    assert [p.name for p in load_players()] == ["TESTER"]


def test_text_fields_normalised(tmp_path):
    path = write_roster(tmp_path, [make_entry(name=" smith ", team="bos")])
    player = load_players(path)[0]
    assert player.name == "SMITH"
    assert player.team == "BOS"


def test_duplicate_name_rejected(tmp_path):
    path = write_roster(tmp_path, [make_entry(jersey=1), make_entry(jersey=2)])
    with pytest.raises(RosterError, match="Duplicate player name"):
        load_players(path)


def test_duplicate_jersey_rejected(tmp_path):
    path = write_roster(tmp_path, [make_entry(name="A"), make_entry(name="B")])
    with pytest.raises(RosterError, match="Duplicate jersey"):
        load_players(path)


@pytest.mark.parametrize("field,value", [
    ("batting_avg", 1200),
    ("batting_avg", -1),
    ("hand", "X"),
    ("position", 5),
    ("jersey", 100),
    ("jersey", 0),
])
def test_malformed_entry_rejected(tmp_path, field, value):
    path = write_roster(tmp_path, [make_entry(**{field: value})])
    with pytest.raises(ValidationError):
        load_players(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_players(tmp_path / "nope.json")


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text", ["RUTH", "ruth", "  Ruth ", "3NYY", "3-NYY", "3nyy", "03NYY"])
def test_find_ruth(players, text):
    assert find_player(text, players).name == "RUTH"


def test_same_number_other_team(players):
    assert find_player("3PHA", players).name == "FOXX"
    assert find_player("3NYG", players).name == "TERRY"


@pytest.mark.parametrize("text", ["99NYY", "0NYY", "3", "NYY", "3-", "-NYY", "X3NYY", "BABE RUTH", ""])
def test_lookup_misses(players, text):
    assert find_player_index(text, players) is None


def test_find_player_index_is_roster_position(players):
    idx = find_player_index("COBB", players)
    assert players[idx].name == "COBB"


# ---------------------------------------------------------------------------
# Visiting lineup
# ---------------------------------------------------------------------------

def test_select_visiting_lineup(players):
    selected = []
    lineup = select_visiting_lineup(LINEUP, players, DualLCG.seeded("a", "b"),
                                    on_select=selected.append)
    assert [p.name for p in lineup] == [
        "COBB", "SPEAKER", "RUTH", "GEHRIG", "FOXX", "HORNSBY", "WAGNER", "TRAYNOR", "COCHRANE",
    ]
    assert selected == lineup


def test_rejections_do_not_count(players):
    rejected = []
    entries = ["COBB", "BOGUS", "cobb", "", "   "] + LINEUP[1:]
    lineup = select_visiting_lineup(entries, players, DualLCG.seeded("a", "b"),
                                    on_reject=lambda text, reason: rejected.append((text, reason)))
    assert len(lineup) == 9
    assert rejected == [("BOGUS", REJECT_NOT_FOUND), ("cobb", REJECT_DUPLICATE)]


def test_selection_stops_when_full(players):
    entries = iter(LINEUP + ["MAYS", "MANTLE"])
    select_visiting_lineup(entries, players, DualLCG.seeded("a", "b"))
    assert next(entries) == "MAYS"


def test_incomplete_lineup_raises(players):
    with pytest.raises(LineupError, match="3 of 9"):
        select_visiting_lineup(["COBB", "RUTH", "MAYS"], players, DualLCG.seeded("a", "b"))


def test_each_pick_mixes_the_seed(players):
    rng = DualLCG.seeded("a", "b")
    expected = DualLCG.seeded("a", "b")
    select_visiting_lineup(LINEUP, players, rng)
    for text in LINEUP:
        idx = find_player_index(text, players)
        p = players[idx]
        expected.mix_selection(p.batting_avg, idx, p.year, p.hand.value)
    assert rng.state == expected.state


def test_seed_mixing_ignores_batting_order(players):
    forward = DualLCG.seeded("a", "b")
    backward = DualLCG.seeded("a", "b")
    select_visiting_lineup(LINEUP, players, forward)
    select_visiting_lineup(list(reversed(LINEUP)), players, backward)
    assert forward.state == backward.state


# ---------------------------------------------------------------------------
# Home lineup
# ---------------------------------------------------------------------------

def test_home_lineup_excludes_visitors(players):
    rng = DualLCG.seeded("7/4/61", "1300")
    visiting = select_visiting_lineup(LINEUP, players, rng)
    home = select_home_lineup(visiting, players, rng)
    assert len(home) == 9
    assert len({p.name for p in home}) == 9
    assert not {p.name for p in home} & {p.name for p in visiting}
    print("  test_home_lineup_excludes_visitors: PASSED")


def test_home_lineup_is_deterministic(players):
    def draw():
        rng = DualLCG.seeded("7/4/61", "1300")
        visiting = select_visiting_lineup(LINEUP, players, rng)
        return [p.name for p in select_home_lineup(visiting, players, rng)]

    assert draw() == draw()


def test_home_lineup_needs_enough_players(players):
    with pytest.raises(LineupError):
        select_home_lineup(players[:40], players, DualLCG.seeded("a", "b"))


def test_home_lineup_draws_nine_times(players):
    rng = DualLCG.seeded("a", "b")
    expected = DualLCG.from_state(rng.state)
    select_home_lineup(players[:9], players, rng)
    for _ in range(9):
        expected.next_int(0, 1)
    assert rng.state == expected.state


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_validate_lineups_accepts_disjoint(players):
    validate_lineups(players[:9], players[9:18])


def test_validate_lineups_short(players):
    with pytest.raises(LineupError, match="visiting lineup has 8"):
        validate_lineups(players[:8], players[9:18])


def test_validate_lineups_overlap(players):
    with pytest.raises(LineupError, match="more than once"):
        validate_lineups(players[:9], players[8:17])
