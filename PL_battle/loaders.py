"""
Read side of the storage layer: turns Team / Pokemon / Weakness rows into the
plain engine inputs (ordered Combatant lists and an effectiveness table).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from django.db import DatabaseError

from .engine.contracts import Combatant
from .engine.rules import (
    DataUnavailable,
    InputNotFound,
    validate_effectiveness,
    validate_roster,
)
from .models import Team, TeamMember, Weakness

logger = logging.getLogger(__name__)


@dataclass
class TeamData:
    id: str
    name: str
    combatants: List[Combatant]


@dataclass
class BattleInputs:
    team_a: TeamData
    team_b: TeamData
    effectiveness: Dict[Tuple[str, str], float]


def get_team(team_id) -> TeamData:
    try:
        pk = int(team_id)
    except (TypeError, ValueError):
        raise InputNotFound(message=f"Could not fetch team {team_id}", details={"team_id": team_id})

    try:
        team = Team.objects.filter(pk=pk).first()
        if team is None:
            raise InputNotFound(message=f"Could not fetch team {team_id}", details={"team_id": team_id})

        members = list(
            TeamMember.objects.filter(team=team)
            .select_related("pokemon")
            .order_by("slot")
        )
    except DatabaseError as e:
        logger.exception("team %s could not be loaded", team_id)
        raise DataUnavailable(message=f"Could not fetch team {team_id}", details={"team_id": team_id}) from e

    return TeamData(
        id=str(team.pk),
        name=team.name,
        combatants=[m.pokemon.to_combatant() for m in members],
    )


def get_effectiveness_table() -> Dict[Tuple[str, str], float]:
    try:
        rows = list(Weakness.objects.values_list("type1_id", "type2_id", "factor"))
    except DatabaseError as e:
        logger.exception("weakness table could not be loaded")
        raise DataUnavailable(message="Could not fetch weakness data") from e

    return {(str(t1), str(t2)): factor for t1, t2, factor in rows}


def load_battle_inputs(team_a_id, team_b_id) -> BattleInputs:
    """
    Everything a battle needs, fully validated. Any failure here means
    the battle never starts.
    """
    team_a = get_team(team_a_id)
    team_b = get_team(team_b_id)
    effectiveness = get_effectiveness_table()

    validate_roster(team_a.id, team_a.combatants)
    validate_roster(team_b.id, team_b.combatants)
    validate_effectiveness(effectiveness)

    return BattleInputs(team_a=team_a, team_b=team_b, effectiveness=effectiveness)


def total_power(combatants: List[Combatant]) -> int:
    return sum(c.power for c in combatants)


def list_teams() -> List[Team]:
    """
    Every team with its ordered roster and members prefetched, ready for
    `TeamSerializer` to read `pokemon_ids` and `total_power` without extra queries.
    """
    try:
        teams = list(Team.objects.prefetch_related("members__pokemon"))
    except DatabaseError as e:
        logger.exception("team list could not be loaded")
        raise DataUnavailable(message="Failed to fetch teams") from e

    return teams
