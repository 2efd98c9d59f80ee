from pydantic import BaseModel, Field

from src.manalimit.constants import ENEMY_ID_FLAG, I32_MAX, I32_MIN
from src.manalimit.enums import Status, Team
from src.manalimit.schema.ability import Ability
from src.manalimit.utils.saturating import saturating_add

# =============================================================================
# UNIT IDS - u32, enemy ids carry the top bit
# =============================================================================


def player_unit_id(ordinal: int) -> int:
    return ordinal & ~ENEMY_ID_FLAG


def enemy_unit_id(ordinal: int) -> int:
    return (ordinal & ~ENEMY_ID_FLAG) | ENEMY_ID_FLAG


def unit_id_for(team: Team, ordinal: int) -> int:
    return player_unit_id(ordinal) if team == Team.PLAYER else enemy_unit_id(ordinal)


def team_of(unit_id: int) -> Team:
    return Team.ENEMY if unit_id & ENEMY_ID_FLAG else Team.PLAYER


class UnitView(BaseModel):
    """Snapshot of a unit as it appears in the event log"""

    instance_id: int = Field(ge=0, le=4294967295)  # u32
    card_id: int = Field(ge=0, le=4294967295)  # u32
    name: str
    attack: int  # effective attack
    health: int  # effective health
    statuses: Status = Status.NONE


class CombatUnit(BaseModel):
    """Runtime battle instance of a card"""

    instance_id: int = Field(ge=0, le=4294967295)  # u32
    team: Team
    card_id: int = Field(ge=0, le=4294967295)  # u32
    name: str = ""

    # Stats - permanent modifiers are already folded into attack/health
    attack: int = Field(ge=I32_MIN, le=I32_MAX)  # i32 base attack
    health: int = Field(ge=I32_MIN, le=I32_MAX)  # i32 current health
    attack_buff: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    health_buff: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32, tracked for display
    play_cost: int = Field(default=0, ge=0, le=255)  # u8

    abilities: list[Ability] = Field(default_factory=list)
    ability_trigger_counts: list[int] = Field(default_factory=list)  # parallel to abilities
    statuses: Status = Status.NONE
    is_token: bool = False

    def effective_attack(self) -> int:
        """Attack including buffs, floored at 0 so a debuffed unit never heals on hit"""
        return max(0, saturating_add(self.attack, self.attack_buff))

    def effective_health(self) -> int:
        return max(0, self.health)

    def is_alive(self) -> bool:
        return self.health > 0

    def has_status(self, status: Status) -> bool:
        return bool(self.statuses & status)

    def trigger_count(self, ability_index: int) -> int:
        if ability_index < len(self.ability_trigger_counts):
            return self.ability_trigger_counts[ability_index]
        return 0

    def record_trigger(self, ability_index: int) -> None:
        while len(self.ability_trigger_counts) <= ability_index:
            self.ability_trigger_counts.append(0)
        self.ability_trigger_counts[ability_index] += 1

    def view(self) -> UnitView:
        return UnitView(
            instance_id=self.instance_id,
            card_id=self.card_id,
            name=self.name,
            attack=self.effective_attack(),
            health=self.effective_health(),
            statuses=self.statuses,
        )
