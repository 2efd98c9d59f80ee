from src.manalimit.enums import Status
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import AbilityGrantStatusEvent, AbilityRemoveStatusEvent


def grant_status(state: BattleState, source_id: int, target_ids: list[int], status: Status, permanent: bool) -> None:
    for target_id in target_ids:
        unit = state.find_live_unit(target_id)
        if unit is None:
            continue
        unit.statuses = unit.statuses.with_(status)
        state.emit(AbilityGrantStatusEvent(source_instance_id=source_id, target_instance_id=target_id, status=status, permanent=permanent))


def remove_status_permanent(state: BattleState, source_id: int, target_ids: list[int], status: Status) -> None:
    for target_id in target_ids:
        unit = state.find_live_unit(target_id)
        if unit is None:
            continue
        unit.statuses = unit.statuses.without(status)
        state.emit(AbilityRemoveStatusEvent(source_instance_id=source_id, target_instance_id=target_id, status=status))
