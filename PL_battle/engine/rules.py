# PL_battle/engine/rules.py

import math
from dataclasses import dataclass
from typing import Optional, Dict, Any, List, Iterable, Mapping, Tuple


@dataclass
class RuleError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self):
        return self.message


class InputNotFound(RuleError):
    """Unknown team / pokemon identifier."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="INPUT_NOT_FOUND", message=message, details=details)


class InvalidRoster(RuleError):
    """Empty or malformed roster, or a bad effectiveness entry."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, code: str = "INVALID_ROSTER"):
        super().__init__(code=code, message=message, details=details)


class DataUnavailable(RuleError):
    """Backing store could not be read."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="DATA_UNAVAILABLE", message=message, details=details)


# ============================================================
# EASY TO CHANGE STUFF (keep it here)
# ============================================================

STAT_MIN = 10
STAT_MAX = 100

TEAM_SIZE = 6          # exact number of pokemon a saved team must hold

MIN_FACTOR = 0.01      # smallest accepted type multiplier


# ============================================================
# VALIDATION
# ============================================================

def validate_stats(power: Any, life: Any) -> None:
    """
    Power and life are whole numbers in STAT_MIN..STAT_MAX.
    Either may be None when doing a partial update.
    """
    for label, value in (("power", power), ("life", life)):
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRoster(
                code="INVALID_STAT",
                message=f"{label.capitalize()} must be a whole number.",
                details={"field": label, "value": value},
            )
        if not (STAT_MIN <= value <= STAT_MAX):
            raise InvalidRoster(
                code="INVALID_STAT",
                message=f"{label.capitalize()} must be between {STAT_MIN} and {STAT_MAX}.",
                details={"field": label, "value": value},
            )


def validate_team(name: str, pokemon_ids: List[Any], known_ids: Iterable[Any]) -> None:
    """
    Used by team create + update.

    Rules enforced:
    - non-blank name
    - exactly TEAM_SIZE members
    - no duplicate members
    - every member exists
    """
    if not (name or "").strip():
        raise InvalidRoster(code="MISSING_NAME", message="Team name is required.")

    ids = [str(i) for i in (pokemon_ids or [])]

    if len(ids) != TEAM_SIZE:
        raise InvalidRoster(
            message=f"Team must contain exactly {TEAM_SIZE} Pokémon.",
            details={"size": len(ids), "expected": TEAM_SIZE},
        )

    if len(set(ids)) != len(ids):
        raise InvalidRoster(code="DUPLICATE", message="Duplicate Pokémon selected.")

    known = {str(i) for i in known_ids}
    missing = [i for i in ids if i not in known]
    if missing:
        raise InputNotFound(
            message="Invalid Pokémon selected.",
            details={"pokemon_ids": missing},
        )


def validate_roster(team_id: Any, combatants: List[Any]) -> None:
    """
    Last check before a roster goes into the simulator.
    """
    if not combatants:
        raise InvalidRoster(
            message=f"Team {team_id} has no Pokémon.",
            details={"team_id": team_id},
        )
    for c in combatants:
        try:
            validate_stats(c.power, c.life)
        except InvalidRoster as e:
            e.details = {**(e.details or {}), "team_id": team_id, "pokemon_id": c.id}
            raise


def validate_effectiveness(table: Mapping[Tuple[Any, Any], Any]) -> None:
    for pair, factor in table.items():
        ok = isinstance(factor, (int, float)) and not isinstance(factor, bool)
        if not ok or not math.isfinite(factor) or factor < MIN_FACTOR:
            raise InvalidRoster(
                code="INVALID_EFFECTIVENESS",
                message="Type effectiveness data is invalid.",
                details={"types": list(pair), "factor": factor},
            )
