from __future__ import annotations

import math

import pytest

from PL_battle.engine.battle import simulate
from PL_battle.engine.rules import (
    MIN_FACTOR,
    STAT_MAX,
    STAT_MIN,
    TEAM_SIZE,
    DataUnavailable,
    InputNotFound,
    InvalidRoster,
    RuleError,
    validate_effectiveness,
    validate_roster,
    validate_stats,
    validate_team,
)

from tests.conftest import make_combatant


def test_error_kinds_carry_codes():
    assert InputNotFound("x").code == "INPUT_NOT_FOUND"
    assert InvalidRoster("x").code == "INVALID_ROSTER"
    assert DataUnavailable("x").code == "DATA_UNAVAILABLE"
    assert isinstance(DataUnavailable("x"), RuleError)
    assert str(InvalidRoster("Team is empty.")) == "Team is empty."


@pytest.mark.parametrize("power,life", [(10, 100), (100, 10), (55, None), (None, None)])
def test_stats_in_range(power, life):
    validate_stats(power, life)


@pytest.mark.parametrize("power,life,field", [(9, 50, "power"), (50, 101, "life"), (50.5, 50, "power"), (True, 50, "power")])
def test_stats_out_of_range(power, life, field):
    with pytest.raises(InvalidRoster) as exc:
        validate_stats(power, life)
    assert exc.value.code == "INVALID_STAT"
    assert exc.value.details["field"] == field


def test_team_needs_exact_size():
    ids = list(range(1, TEAM_SIZE + 1))
    validate_team("Kanto", ids, ids)

    with pytest.raises(InvalidRoster) as exc:
        validate_team("Kanto", ids[:-1], ids)
    assert exc.value.details == {"size": TEAM_SIZE - 1, "expected": TEAM_SIZE}


def test_team_rejects_blank_name_duplicates_and_unknown_members():
    ids = list(range(1, TEAM_SIZE + 1))

    with pytest.raises(InvalidRoster) as exc:
        validate_team("   ", ids, ids)
    assert exc.value.code == "MISSING_NAME"

    with pytest.raises(InvalidRoster) as exc:
        validate_team("Kanto", [1] * TEAM_SIZE, ids)
    assert exc.value.code == "DUPLICATE"

    with pytest.raises(InputNotFound) as exc:
        validate_team("Kanto", ids, ids[:-1])
    assert exc.value.details == {"pokemon_ids": [str(TEAM_SIZE)]}


def test_roster_must_not_be_empty():
    with pytest.raises(InvalidRoster) as exc:
        validate_roster("7", [])
    assert exc.value.details == {"team_id": "7"}


def test_roster_stat_error_names_the_pokemon():
    with pytest.raises(InvalidRoster) as exc:
        validate_roster("7", [make_combatant(1), make_combatant(2, power=500)])
    assert exc.value.details["pokemon_id"] == "2"
    assert exc.value.details["team_id"] == "7"


@pytest.mark.parametrize("factor", [0, -1.5, 1e-20, 0.009, math.inf, math.nan, "2.0"])
def test_effectiveness_rejects_bad_factors(factor):
    with pytest.raises(InvalidRoster) as exc:
        validate_effectiveness({("1", "2"): 2.0, ("2", "1"): factor})
    assert exc.value.code == "INVALID_EFFECTIVENESS"


def test_effectiveness_accepts_positive_factors():
    validate_effectiveness({("1", "2"): 0.5, ("2", "1"): 2, ("1", "1"): 1.0})


def test_smallest_accepted_factor_still_ends_the_battle():
    table = {("x", "y"): MIN_FACTOR, ("y", "x"): MIN_FACTOR}
    validate_effectiveness(table)

    team_a = [make_combatant(1, power=STAT_MIN, life=STAT_MAX, type="x")]
    team_b = [make_combatant(2, power=STAT_MIN, life=STAT_MAX, type="y")]
    result = simulate(team_a, team_b, table)

    assert len(result.rounds) == 1
    assert len(result.rounds[0].actions) <= STAT_MAX / (STAT_MIN * MIN_FACTOR) + 1
    assert result.log[-1].kind == "final"
