from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from .contracts import (
    ActionRecord,
    BattleResult,
    Combatant,
    EffectivenessTable,
    Fighter,
    FighterSnapshot,
    FinalOutcome,
    LifeSnapshot,
    RoundRecord,
)

logger = logging.getLogger(__name__)

# =========================
# CONFIG
# =========================

NEUTRAL_MULTIPLIER = 1.0

OUTCOME_MUTUAL_KO = "{a} and {b} knocked each other out!"
OUTCOME_A_WINS = "{a} defeated {b}!"
OUTCOME_B_WINS = "{b} defeated {a}!"

ATTACK_TEXT = "{attacker} attacks {defender}, dealing {damage} damage."


# =========================
# RUNTIME TYPES
# =========================

@dataclass
class BattleRun:
    """
    Everything one simulation mutates. Built fresh per call to `simulate`
    and never shared, so separate runs can execute side by side.
    """
    team_a: List[Fighter]
    team_b: List[Fighter]
    idx_a: int = 0
    idx_b: int = 0
    round_counter: int = 1
    log: list = field(default_factory=list)

    @property
    def in_progress(self) -> bool:
        return self.idx_a < len(self.team_a) and self.idx_b < len(self.team_b)

    @property
    def a_exhausted(self) -> bool:
        return self.idx_a >= len(self.team_a)

    @property
    def b_exhausted(self) -> bool:
        return self.idx_b >= len(self.team_b)


# =========================
# PUBLIC API
# =========================

def fighters_from_combatants(combatants: Sequence[Combatant]) -> List[Fighter]:
    return [Fighter(combatant=c, current_life=float(c.life)) for c in combatants]


def snapshot_team(fighters: Sequence[Fighter]) -> List[LifeSnapshot]:
    return [LifeSnapshot(id=f.id, current_life=f.current_life) for f in fighters]


def format_damage(damage: float) -> str:
    """One decimal, halves rounded up (1.25 -> "1.3")."""
    return str(Decimal(damage).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def multiplier(effectiveness: EffectivenessTable, attacker_type: str, defender_type: str) -> float:
    return effectiveness.get((attacker_type, defender_type), NEUTRAL_MULTIPLIER)


def simulate(
    team_a: Sequence[Combatant],
    team_b: Sequence[Combatant],
    effectiveness: EffectivenessTable,
    team_a_id: str = "A",
    team_b_id: str = "B",
) -> BattleResult:
    """
    Run a full battle between two ordered rosters.

    Members fight front-to-back: the active fighter of each side trades
    simultaneous blows with the other until one (or both) drops to zero,
    then the beaten side's next member steps in. Ends when a roster runs
    out. An empty roster loses immediately without any rounds.
    """
    run = BattleRun(
        team_a=fighters_from_combatants(team_a),
        team_b=fighters_from_combatants(team_b),
    )

    while run.in_progress:
        run.log.append(_fight_round(run, effectiveness))
        run.round_counter += 1

    winner = _winner(run, team_a_id, team_b_id)
    run.log.append(FinalOutcome(
        winner=winner,
        team_a_state=snapshot_team(run.team_a),
        team_b_state=snapshot_team(run.team_b),
    ))

    return BattleResult(log=run.log, winner=winner)


def summarize_battle(result: BattleResult) -> dict:
    final = result.final
    return {
        "rounds": len(result.rounds),
        "winner": result.winner,
        "team_a_survivors": sum(1 for s in final.team_a_state if s.current_life > 0),
        "team_b_survivors": sum(1 for s in final.team_b_state if s.current_life > 0),
    }


# =========================
# SERIALIZATION
# =========================

def _combatant_to_dict(c: Combatant) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "image": c.image,
        "power": c.power,
        "life": c.life,
        "type": c.type,
    }


def _fighter_to_dict(s: FighterSnapshot) -> dict:
    d = _combatant_to_dict(s.combatant)
    d["currentLife"] = s.current_life
    return d


def _state_to_list(state: Sequence[LifeSnapshot]) -> list:
    return [{"id": s.id, "currentLife": s.current_life} for s in state]


def round_to_dict(r: RoundRecord) -> dict:
    return {
        "kind": r.kind,
        "roundNumber": r.round_number,
        "fighterA": _fighter_to_dict(r.fighter_a),
        "fighterB": _fighter_to_dict(r.fighter_b),
        "actions": [
            {
                "aDescription": a.a_description,
                "bDescription": a.b_description,
                "aLifeBefore": a.a_life_before,
                "bLifeBefore": a.b_life_before,
                "aLifeAfter": a.a_life_after,
                "bLifeAfter": a.b_life_after,
            }
            for a in r.actions
        ],
        "outcome": r.outcome,
        "teamAState": _state_to_list(r.team_a_state),
        "teamBState": _state_to_list(r.team_b_state),
    }


def final_to_dict(f: FinalOutcome) -> dict:
    return {
        "kind": f.kind,
        "isFinal": True,
        "winner": f.winner,
        "teamAState": _state_to_list(f.team_a_state),
        "teamBState": _state_to_list(f.team_b_state),
    }


def battle_log_to_dicts(result: BattleResult) -> list:
    return [
        final_to_dict(e) if e.kind == "final" else round_to_dict(e)
        for e in result.log
    ]


def combatants_to_dicts(combatants: Sequence[Combatant]) -> list:
    return [_combatant_to_dict(c) for c in combatants]


# =========================
# INTERNAL LOGIC
# =========================

def _fight_round(run: BattleRun, effectiveness: EffectivenessTable) -> RoundRecord:
    fa = run.team_a[run.idx_a]
    fb = run.team_b[run.idx_b]

    rnd = RoundRecord(
        round_number=run.round_counter,
        fighter_a=FighterSnapshot(fa.combatant, fa.current_life),
        fighter_b=FighterSnapshot(fb.combatant, fb.current_life),
    )

    # Defeat is only checked here, so a fighter that drops this exchange
    # still lands its own hit in the same exchange.
    while fa.alive and fb.alive:
        rnd.actions.append(_exchange(fa, fb, effectiveness))

    if not fa.alive and not fb.alive:
        rnd.outcome = OUTCOME_MUTUAL_KO.format(a=fa.name, b=fb.name)
        run.idx_a += 1
        run.idx_b += 1
    elif not fa.alive:
        rnd.outcome = OUTCOME_B_WINS.format(a=fa.name, b=fb.name)
        run.idx_a += 1
    else:
        rnd.outcome = OUTCOME_A_WINS.format(a=fa.name, b=fb.name)
        run.idx_b += 1

    rnd.team_a_state = snapshot_team(run.team_a)
    rnd.team_b_state = snapshot_team(run.team_b)

    logger.debug(
        "round %s: %s (%d exchanges)", rnd.round_number, rnd.outcome, len(rnd.actions)
    )
    return rnd


def _exchange(fa: Fighter, fb: Fighter, effectiveness: EffectivenessTable) -> ActionRecord:
    a_before = fa.current_life
    b_before = fb.current_life

    damage_to_b = fa.combatant.power * multiplier(effectiveness, fa.combatant.type, fb.combatant.type)
    damage_to_a = fb.combatant.power * multiplier(effectiveness, fb.combatant.type, fa.combatant.type)

    fa.current_life = a_before - damage_to_a
    fb.current_life = b_before - damage_to_b

    return ActionRecord(
        a_description=ATTACK_TEXT.format(attacker=fa.name, defender=fb.name, damage=format_damage(damage_to_b)),
        b_description=ATTACK_TEXT.format(attacker=fb.name, defender=fa.name, damage=format_damage(damage_to_a)),
        a_life_before=a_before,
        b_life_before=b_before,
        a_life_after=fa.current_life,
        b_life_after=fb.current_life,
    )


def _winner(run: BattleRun, team_a_id: str, team_b_id: str) -> Optional[str]:
    if run.a_exhausted and not run.b_exhausted:
        return team_b_id
    if run.b_exhausted and not run.a_exhausted:
        return team_a_id
    return None
