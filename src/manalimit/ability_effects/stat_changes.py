from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import AbilityModifyStatsEvent, AbilityModifyStatsPermanentEvent
from src.manalimit.utils.saturating import saturating_add


def modify_stats(state: BattleState, source_id: int, target_ids: list[int], health: int, attack: int, permanent: bool = False) -> None:
    """Add attack/health deltas with saturating arithmetic.

    Permanent changes are applied in battle too; their events are what callers
    fold back into the persistent board.
    """
    for target_id in target_ids:
        unit = state.find_live_unit(target_id)
        if unit is None:
            continue
        unit.attack_buff = saturating_add(unit.attack_buff, attack)
        unit.health = saturating_add(unit.health, health)
        unit.health_buff = saturating_add(unit.health_buff, health)

        event_cls = AbilityModifyStatsPermanentEvent if permanent else AbilityModifyStatsEvent
        state.emit(
            event_cls(
                source_instance_id=source_id,
                target_instance_id=target_id,
                health_change=health,
                attack_change=attack,
                new_attack=unit.effective_attack(),
                new_health=unit.effective_health(),
            )
        )
