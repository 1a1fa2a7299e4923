from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Mapping, Optional, Tuple, Union


EffectivenessTable = Mapping[Tuple[str, str], float]
"""
Directional lookup: (attacker_type, defender_type) -> damage multiplier.
A missing pair means neutral (1.0).
"""


@dataclass(frozen=True)
class Combatant:
    id: str
    name: str
    image: str
    power: int  # 10..100
    life: int   # 10..100
    type: str   # type-tag id, used as the effectiveness key


@dataclass
class Fighter:
    combatant: Combatant
    current_life: float

    @property
    def id(self) -> str:
        return self.combatant.id

    @property
    def name(self) -> str:
        return self.combatant.name

    @property
    def alive(self) -> bool:
        return self.current_life > 0


@dataclass(frozen=True)
class LifeSnapshot:
    id: str
    current_life: float


@dataclass(frozen=True)
class FighterSnapshot:
    combatant: Combatant
    current_life: float


@dataclass(frozen=True)
class ActionRecord:
    a_description: str
    b_description: str
    a_life_before: float
    b_life_before: float
    a_life_after: float
    b_life_after: float


@dataclass
class RoundRecord:
    round_number: int
    fighter_a: FighterSnapshot
    fighter_b: FighterSnapshot
    actions: List[ActionRecord] = field(default_factory=list)
    outcome: str = ""
    team_a_state: List[LifeSnapshot] = field(default_factory=list)
    team_b_state: List[LifeSnapshot] = field(default_factory=list)
    kind: Literal["round"] = "round"


@dataclass
class FinalOutcome:
    winner: Optional[str]
    team_a_state: List[LifeSnapshot] = field(default_factory=list)
    team_b_state: List[LifeSnapshot] = field(default_factory=list)
    kind: Literal["final"] = "final"


BattleLogEntry = Union[RoundRecord, FinalOutcome]


@dataclass
class BattleResult:
    log: List[BattleLogEntry]
    winner: Optional[str]

    @property
    def rounds(self) -> List[RoundRecord]:
        return [e for e in self.log if e.kind == "round"]

    @property
    def final(self) -> FinalOutcome:
        return self.log[-1]


BattleResponse = Dict[str, object]
"""
BattleResponse contract (what the battle endpoint returns):

{
  "battleLog": [ {kind: "round", roundNumber, fighterA, fighterB, actions,
                  outcome, teamAState, teamBState}, ...,
                 {kind: "final", isFinal: true, winner, teamAState, teamBState} ],
  "teamA": {"name": str, "pokemons": [...]},
  "teamB": {"name": str, "pokemons": [...]},
  "winner": team id | None,
}
"""
