from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from src.manalimit.constants import I32_MAX, I32_MIN
from src.manalimit.enums import AbilityTrigger, CompareOp, SortOrder, StatType, Status, TargetScope

# =============================================================================
# TARGETS - which units an effect lands on
# =============================================================================


class SelfUnitTarget(BaseModel):
    type: Literal["SelfUnit"] = "SelfUnit"


class AllTarget(BaseModel):
    type: Literal["All"] = "All"
    scope: TargetScope


class PositionTarget(BaseModel):
    """Index into the scope. SelfUnit scope is relative (-1 ahead, +1 behind), otherwise absolute with negatives from the back."""

    type: Literal["Position"] = "Position"
    scope: TargetScope
    index: int = Field(ge=I32_MIN, le=I32_MAX)  # i32


class RandomTarget(BaseModel):
    type: Literal["Random"] = "Random"
    scope: TargetScope
    count: int = Field(ge=0, le=255)  # u8


class StandardTarget(BaseModel):
    """Rank the scope by a stat and take the first `count` (stable, ties by board order)"""

    type: Literal["Standard"] = "Standard"
    scope: TargetScope
    stat: StatType
    order: SortOrder
    count: int = Field(ge=0, le=255)  # u8


class AdjacentTarget(BaseModel):
    """Board neighbours of every unit in the scope"""

    type: Literal["Adjacent"] = "Adjacent"
    scope: TargetScope


AbilityTarget = Annotated[
    Union[SelfUnitTarget, AllTarget, PositionTarget, RandomTarget, StandardTarget, AdjacentTarget],
    Field(discriminator="type"),
]

# =============================================================================
# CONDITIONS - gate whether a collected trigger fires
# =============================================================================


class StatValueCompare(BaseModel):
    """Any unit in scope has `stat op value`"""

    type: Literal["StatValueCompare"] = "StatValueCompare"
    scope: TargetScope
    stat: StatType
    op: CompareOp
    value: int = Field(ge=I32_MIN, le=I32_MAX)  # i32


class UnitCount(BaseModel):
    type: Literal["UnitCount"] = "UnitCount"
    scope: TargetScope
    op: CompareOp
    value: int = Field(ge=0, le=255)  # u8


class StatStatCompare(BaseModel):
    """Source unit's `source_stat op target_stat` of any unit in target_scope"""

    type: Literal["StatStatCompare"] = "StatStatCompare"
    source_stat: StatType
    op: CompareOp
    target_scope: TargetScope
    target_stat: StatType


class IsPosition(BaseModel):
    """Source unit sits at `index` within the scope (-1 is the last)"""

    type: Literal["IsPosition"] = "IsPosition"
    scope: TargetScope
    index: int = Field(ge=I32_MIN, le=I32_MAX)  # i32


Matcher = Annotated[
    Union[StatValueCompare, UnitCount, StatStatCompare, IsPosition],
    Field(discriminator="type"),
]


class IsCondition(BaseModel):
    type: Literal["Is"] = "Is"
    matcher: Matcher


class AnyOfCondition(BaseModel):
    type: Literal["AnyOf"] = "AnyOf"
    matchers: list[Matcher] = Field(default_factory=list)


Condition = Annotated[Union[IsCondition, AnyOfCondition], Field(discriminator="type")]

# =============================================================================
# EFFECTS
# =============================================================================


class DamageEffect(BaseModel):
    type: Literal["Damage"] = "Damage"
    amount: int = Field(ge=I32_MIN, le=I32_MAX)  # i32, negatives clamp to 0
    target: AbilityTarget


class ModifyStatsEffect(BaseModel):
    """Battle-only buff"""

    type: Literal["ModifyStats"] = "ModifyStats"
    health: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    attack: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    target: AbilityTarget


class ModifyStatsPermanentEffect(BaseModel):
    """Buff that is also written back to the board after the battle"""

    type: Literal["ModifyStatsPermanent"] = "ModifyStatsPermanent"
    health: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    attack: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    target: AbilityTarget


class SpawnUnitEffect(BaseModel):
    type: Literal["SpawnUnit"] = "SpawnUnit"
    card_id: int = Field(ge=0, le=4294967295)  # u32


class DestroyEffect(BaseModel):
    type: Literal["Destroy"] = "Destroy"
    target: AbilityTarget


class GainManaEffect(BaseModel):
    type: Literal["GainMana"] = "GainMana"
    amount: int = Field(ge=I32_MIN, le=I32_MAX)  # i32


class GrantStatusThisBattleEffect(BaseModel):
    type: Literal["GrantStatusThisBattle"] = "GrantStatusThisBattle"
    status: Status
    target: AbilityTarget


class GrantStatusPermanentEffect(BaseModel):
    type: Literal["GrantStatusPermanent"] = "GrantStatusPermanent"
    status: Status
    target: AbilityTarget


class RemoveStatusPermanentEffect(BaseModel):
    type: Literal["RemoveStatusPermanent"] = "RemoveStatusPermanent"
    status: Status
    target: AbilityTarget


AbilityEffect = Annotated[
    Union[
        DamageEffect,
        ModifyStatsEffect,
        ModifyStatsPermanentEffect,
        SpawnUnitEffect,
        DestroyEffect,
        GainManaEffect,
        GrantStatusThisBattleEffect,
        GrantStatusPermanentEffect,
        RemoveStatusPermanentEffect,
    ],
    Field(discriminator="type"),
]

# Effects that make sense outside a battle (they only touch persistent state)
ShopEffect = Annotated[
    Union[
        ModifyStatsPermanentEffect,
        SpawnUnitEffect,
        DestroyEffect,
        GainManaEffect,
        GrantStatusPermanentEffect,
        RemoveStatusPermanentEffect,
    ],
    Field(discriminator="type"),
]

# =============================================================================
# ABILITIES
# =============================================================================


class Ability(BaseModel):
    """Battle ability - inert data interpreted by the trigger pipeline"""

    trigger: AbilityTrigger
    effect: AbilityEffect
    conditions: list[Condition] = Field(default_factory=list)  # all must hold
    name: str = Field(default="", max_length=64)
    max_triggers: Optional[int] = Field(default=None, ge=0, le=65535)  # None = unlimited


class ShopAbility(BaseModel):
    """Shop-phase ability - same vocabulary as battle abilities, restricted to persistent effects"""

    trigger: AbilityTrigger
    effect: ShopEffect
    conditions: list[Condition] = Field(default_factory=list)
    name: str = Field(default="", max_length=64)
    max_triggers: Optional[int] = Field(default=None, ge=0, le=65535)

    @field_validator("trigger")
    @classmethod
    def _shop_trigger_only(cls, trigger: AbilityTrigger) -> AbilityTrigger:
        if not trigger.is_shop():
            raise ValueError(f"{trigger.name} is not a shop trigger")
        return trigger

    def as_ability(self) -> Ability:
        """Battle-pipeline form of this ability"""
        return Ability.model_validate(self.model_dump())
