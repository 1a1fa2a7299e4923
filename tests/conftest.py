from __future__ import annotations

import pytest

from PL_battle.engine.contracts import Combatant


def make_combatant(id, power=50, life=50, type="normal", name=None) -> Combatant:
    return Combatant(
        id=str(id),
        name=name or f"mon-{id}",
        image=f"https://img.example/{id}.png",
        power=power,
        life=life,
        type=type,
    )


@pytest.fixture
def pokemon_types(db):
    from PL_battle.models import PokemonType

    return {
        name: PokemonType.objects.create(name=name)
        for name in ("Fire", "Water", "Grass")
    }


@pytest.fixture
def weaknesses(pokemon_types):
    from PL_battle.models import Weakness

    fire, water, grass = (pokemon_types[n] for n in ("Fire", "Water", "Grass"))
    return [
        Weakness.objects.create(type1=fire, type2=water, factor=0.5),
        Weakness.objects.create(type1=water, type2=fire, factor=2.0),
        Weakness.objects.create(type1=fire, type2=grass, factor=2.0),
        Weakness.objects.create(type1=grass, type2=fire, factor=0.5),
    ]


@pytest.fixture
def make_pokemon(pokemon_types):
    from PL_battle.models import Pokemon

    def _make(name, type_name="Fire", power=50, life=50):
        return Pokemon.objects.create(
            name=name,
            image=f"https://img.example/{name.lower()}.png",
            type=pokemon_types[type_name],
            power=power,
            life=life,
        )

    return _make


@pytest.fixture
def make_team(make_pokemon):
    from PL_battle.models import Team

    def _make(name, type_name, power=50, life=50, size=6):
        team = Team.objects.create(name=name)
        members = [
            make_pokemon(f"{name}-{i}", type_name=type_name, power=power, life=life)
            for i in range(1, size + 1)
        ]
        team.set_members([p.pk for p in members])
        return team

    return _make


@pytest.fixture
def fire_vs_water(weaknesses, make_team):
    return make_team("Embers", "Fire"), make_team("Tides", "Water")
