from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.manalimit.enums import BattlePhase, BattleResult, LimitKind, Status, Team
from src.manalimit.schema.combat_unit import UnitView


class LimitReason(BaseModel):
    """Which ceiling was breached, and the counter value that breached it"""

    kind: LimitKind
    current: int = Field(ge=0)  # u32
    max: int = Field(ge=0)  # u32


# =============================================================================
# PHASE / FLOW
# =============================================================================


class PhaseStartEvent(BaseModel):
    type: Literal["PhaseStart"] = "PhaseStart"
    phase: BattlePhase


class PhaseEndEvent(BaseModel):
    type: Literal["PhaseEnd"] = "PhaseEnd"
    phase: BattlePhase


class BattleEndEvent(BaseModel):
    type: Literal["BattleEnd"] = "BattleEnd"
    result: BattleResult


class LimitExceededEvent(BaseModel):
    """losing_team is None for breaches no side caused (round limit)"""

    type: Literal["LimitExceeded"] = "LimitExceeded"
    losing_team: Optional[Team] = None
    reason: LimitReason


# =============================================================================
# CLASH
# =============================================================================


class ClashEvent(BaseModel):
    type: Literal["Clash"] = "Clash"
    p_dmg: int  # damage dealt by the player front unit
    e_dmg: int  # damage dealt by the enemy front unit


class DamageTakenEvent(BaseModel):
    type: Literal["DamageTaken"] = "DamageTaken"
    target_instance_id: int
    team: Team
    remaining_hp: int


class UnitDeathEvent(BaseModel):
    type: Literal["UnitDeath"] = "UnitDeath"
    team: Team
    new_board_state: list[UnitView] = Field(default_factory=list)


# =============================================================================
# ABILITIES
# =============================================================================


class AbilityTriggerEvent(BaseModel):
    type: Literal["AbilityTrigger"] = "AbilityTrigger"
    source_instance_id: int
    ability_name: str


class AbilityDamageEvent(BaseModel):
    type: Literal["AbilityDamage"] = "AbilityDamage"
    source_instance_id: int
    target_instance_id: int
    damage: int
    remaining_hp: int


class AbilityModifyStatsEvent(BaseModel):
    type: Literal["AbilityModifyStats"] = "AbilityModifyStats"
    source_instance_id: int
    target_instance_id: int
    health_change: int
    attack_change: int
    new_attack: int
    new_health: int


class AbilityModifyStatsPermanentEvent(BaseModel):
    type: Literal["AbilityModifyStatsPermanent"] = "AbilityModifyStatsPermanent"
    source_instance_id: int
    target_instance_id: int
    health_change: int
    attack_change: int
    new_attack: int
    new_health: int


class UnitSpawnEvent(BaseModel):
    type: Literal["UnitSpawn"] = "UnitSpawn"
    team: Team
    spawned_unit: UnitView
    new_board_state: list[UnitView] = Field(default_factory=list)


class StatusConsumedEvent(BaseModel):
    type: Literal["StatusConsumed"] = "StatusConsumed"
    target_instance_id: int
    status: Status


class AbilityGainManaEvent(BaseModel):
    type: Literal["AbilityGainMana"] = "AbilityGainMana"
    source_instance_id: int
    team: Team
    amount: int


class AbilityGrantStatusEvent(BaseModel):
    type: Literal["AbilityGrantStatus"] = "AbilityGrantStatus"
    source_instance_id: int
    target_instance_id: int
    status: Status
    permanent: bool = False


class AbilityRemoveStatusEvent(BaseModel):
    """Only produced by RemoveStatusPermanent, so always permanent"""

    type: Literal["AbilityRemoveStatus"] = "AbilityRemoveStatus"
    source_instance_id: int
    target_instance_id: int
    status: Status


CombatEvent = Annotated[
    Union[
        PhaseStartEvent,
        PhaseEndEvent,
        BattleEndEvent,
        LimitExceededEvent,
        ClashEvent,
        DamageTakenEvent,
        UnitDeathEvent,
        AbilityTriggerEvent,
        AbilityDamageEvent,
        AbilityModifyStatsEvent,
        AbilityModifyStatsPermanentEvent,
        UnitSpawnEvent,
        StatusConsumedEvent,
        AbilityGainManaEvent,
        AbilityGrantStatusEvent,
        AbilityRemoveStatusEvent,
    ],
    Field(discriminator="type"),
]
