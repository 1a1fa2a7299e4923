from __future__ import annotations

from types import SimpleNamespace

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from PL_battle import loaders
from PL_battle.engine.rules import MIN_FACTOR, DataUnavailable, InputNotFound, InvalidRoster
from PL_battle.models import Team, Weakness


pytestmark = pytest.mark.django_db


def test_get_team_keeps_slot_order(make_pokemon):
    first = make_pokemon("Bulbasaur", "Grass", power=30, life=60)
    second = make_pokemon("Charmander", "Fire", power=40, life=50)
    team = Team.objects.create(name="Starters")
    team.set_members([second.pk, first.pk])

    data = loaders.get_team(team.pk)

    assert data.id == str(team.pk)
    assert data.name == "Starters"
    assert [c.name for c in data.combatants] == ["Charmander", "Bulbasaur"]
    assert data.combatants[0].type == str(second.type_id)
    assert data.combatants[0].power == 40


@pytest.mark.parametrize("team_id", ["999", "abc", None])
def test_get_team_unknown(team_id):
    with pytest.raises(InputNotFound):
        loaders.get_team(team_id)


def test_effectiveness_table_keys_by_type_id(weaknesses, pokemon_types):
    table = loaders.get_effectiveness_table()

    fire = str(pokemon_types["Fire"].pk)
    water = str(pokemon_types["Water"].pk)
    assert table[(fire, water)] == 0.5
    assert table[(water, fire)] == 2.0
    assert len(table) == 4


def test_effectiveness_table_store_down(monkeypatch):
    def _boom(*args, **kwargs):
        raise DatabaseError("connection refused")

    stub = SimpleNamespace(objects=SimpleNamespace(values_list=_boom))
    monkeypatch.setattr(loaders, "Weakness", stub)

    with pytest.raises(DataUnavailable):
        loaders.get_effectiveness_table()


def test_load_battle_inputs(fire_vs_water):
    team_a, team_b = fire_vs_water

    inputs = loaders.load_battle_inputs(str(team_a.pk), str(team_b.pk))

    assert inputs.team_a.name == "Embers"
    assert len(inputs.team_a.combatants) == 6
    assert len(inputs.team_b.combatants) == 6
    assert len(inputs.effectiveness) == 4


def test_load_battle_inputs_rejects_empty_team(fire_vs_water):
    team_a, _ = fire_vs_water
    empty = Team.objects.create(name="Nobody")

    with pytest.raises(InvalidRoster) as exc:
        loaders.load_battle_inputs(team_a.pk, empty.pk)
    assert exc.value.details == {"team_id": str(empty.pk)}


def test_load_battle_inputs_rejects_bad_factor(fire_vs_water, pokemon_types):
    team_a, team_b = fire_vs_water
    Weakness.objects.create(type1=pokemon_types["Grass"], type2=pokemon_types["Water"], factor=0)

    with pytest.raises(InvalidRoster) as exc:
        loaders.load_battle_inputs(team_a.pk, team_b.pk)
    assert exc.value.code == "INVALID_EFFECTIVENESS"


def test_list_teams_prefetches_ordered_rosters(make_team, django_assert_num_queries):
    strong = make_team("Strong", "Fire", power=90)
    weak = make_team("Weak", "Water", power=10, size=2)

    with django_assert_num_queries(3):
        teams = {t.pk: t for t in loaders.list_teams()}
        rosters = {pk: [m.pokemon.power for m in t.members.all()] for pk, t in teams.items()}

    assert loaders.total_power([m.pokemon.to_combatant() for m in teams[strong.pk].members.all()]) == 540
    assert rosters[weak.pk] == [10, 10]
    assert teams[weak.pk].pokemon_ids() == weak.pokemon_ids()


def test_list_teams_store_down(monkeypatch):
    def _boom(*args, **kwargs):
        raise DatabaseError("connection refused")

    stub = SimpleNamespace(objects=SimpleNamespace(prefetch_related=_boom))
    monkeypatch.setattr(loaders, "Team", stub)

    with pytest.raises(DataUnavailable):
        loaders.list_teams()


@pytest.mark.parametrize("factor", [0, 0.001])
def test_weakness_factor_below_minimum_fails_clean(pokemon_types, factor):
    row = Weakness(type1=pokemon_types["Fire"], type2=pokemon_types["Grass"], factor=factor)

    with pytest.raises(ValidationError):
        row.full_clean()


def test_weakness_factor_at_minimum_is_clean(pokemon_types):
    Weakness(type1=pokemon_types["Fire"], type2=pokemon_types["Grass"], factor=MIN_FACTOR).full_clean()
