from src.manalimit.enums import Status
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import AbilityDamageEvent, StatusConsumedEvent
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.utils.saturating import saturating_sub


def deal_ability_damage(state: BattleState, source_id: int, unit: CombatUnit, amount: int) -> int:
    """Apply one ability hit to a live unit and log it. Returns the damage actually dealt.

    A Shield absorbs the whole hit and is consumed; the hit is still logged with damage 0.
    """
    if unit.has_status(Status.SHIELD):
        unit.statuses = unit.statuses.without(Status.SHIELD)
        state.emit(StatusConsumedEvent(target_instance_id=unit.instance_id, status=Status.SHIELD))
        state.emit(AbilityDamageEvent(source_instance_id=source_id, target_instance_id=unit.instance_id, damage=0, remaining_hp=unit.effective_health()))
        return 0

    unit.health = max(0, saturating_sub(unit.health, amount))
    state.emit(AbilityDamageEvent(source_instance_id=source_id, target_instance_id=unit.instance_id, damage=amount, remaining_hp=unit.effective_health()))
    return amount


def apply_damage(state: BattleState, source_id: int, target_ids: list[int], amount: int) -> list[int]:
    """Damage every live target. Returns ids of units that actually lost health (for OnHurt)."""
    amount = max(0, amount)
    damaged: list[int] = []
    if amount == 0:
        return damaged
    for target_id in target_ids:
        unit = state.find_live_unit(target_id)
        if unit is None:
            continue  # already dead, fizzle
        if deal_ability_damage(state, source_id, unit, amount) > 0:
            damaged.append(target_id)
    return damaged


def apply_destroy(state: BattleState, source_id: int, target_ids: list[int]) -> list[int]:
    """Deal damage equal to current health. Bypasses Shield so it is always lethal."""
    destroyed: list[int] = []
    for target_id in target_ids:
        unit = state.find_live_unit(target_id)
        if unit is None:
            continue
        amount = unit.health
        unit.health = 0
        state.emit(AbilityDamageEvent(source_instance_id=source_id, target_instance_id=target_id, damage=amount, remaining_hp=0))
        destroyed.append(target_id)
    return destroyed
