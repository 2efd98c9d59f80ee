"""Pure reducers over a battle's event log.

Callers derive everything persistent from the log rather than from engine
state: the result, permanent stat and status deltas, and shop mana.
"""

from typing import Optional

from src.manalimit.enums import BattleResult, Status, Team
from src.manalimit.schema.combat_event import (
    AbilityGainManaEvent,
    AbilityGrantStatusEvent,
    AbilityModifyStatsPermanentEvent,
    AbilityRemoveStatusEvent,
    BattleEndEvent,
    CombatEvent,
    LimitExceededEvent,
)
from src.manalimit.schema.combat_unit import team_of
from src.manalimit.utils.saturating import saturating_add


def battle_result_from_events(events: list[CombatEvent]) -> Optional[BattleResult]:
    for event in reversed(events):
        if isinstance(event, BattleEndEvent):
            return event.result
    return None


def limit_exceeded_from_events(events: list[CombatEvent]) -> Optional[LimitExceededEvent]:
    for event in events:
        if isinstance(event, LimitExceededEvent):
            return event
    return None


def permanent_stat_deltas_from_events(events: list[CombatEvent], team: Team = Team.PLAYER) -> dict[int, tuple[int, int]]:
    """Sum permanent (attack, health) changes per unit id of `team`"""
    deltas: dict[int, tuple[int, int]] = {}
    for event in events:
        if not isinstance(event, AbilityModifyStatsPermanentEvent):
            continue
        if team_of(event.target_instance_id) != team:
            continue
        attack, health = deltas.get(event.target_instance_id, (0, 0))
        deltas[event.target_instance_id] = (saturating_add(attack, event.attack_change), saturating_add(health, event.health_change))
    return deltas


def permanent_status_deltas_from_events(events: list[CombatEvent], team: Team = Team.PLAYER) -> dict[int, tuple[Status, Status]]:
    """Fold permanent status changes into (grant_mask, remove_mask) per unit id; the later change to a bit wins"""
    deltas: dict[int, tuple[Status, Status]] = {}
    for event in events:
        if isinstance(event, AbilityGrantStatusEvent):
            if not event.permanent or team_of(event.target_instance_id) != team:
                continue
            grant, remove = deltas.get(event.target_instance_id, (Status.NONE, Status.NONE))
            deltas[event.target_instance_id] = (grant.with_(event.status), remove.without(event.status))
        elif isinstance(event, AbilityRemoveStatusEvent):
            if team_of(event.target_instance_id) != team:
                continue
            grant, remove = deltas.get(event.target_instance_id, (Status.NONE, Status.NONE))
            deltas[event.target_instance_id] = (grant.without(event.status), remove.with_(event.status))
    return deltas


def shop_mana_delta_from_events(events: list[CombatEvent], team: Team = Team.PLAYER) -> int:
    total = 0
    for event in events:
        if isinstance(event, AbilityGainManaEvent) and event.team == team:
            total = saturating_add(total, event.amount)
    return total
