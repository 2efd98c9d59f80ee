"""Trigger collection, priority ordering and queue resolution.

Every trigger point funnels through resolve_trigger_queue, which orders the
queue by: attack desc, health desc, team (player first), board index asc,
ability declaration order asc.
"""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from src.manalimit.ability_effects.effect_applier import apply_ability_effect
from src.manalimit.conditions import evaluate_conditions
from src.manalimit.enums import AbilityTrigger, Team
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import AbilityTriggerEvent, UnitDeathEvent
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.targeting import AbilityContext

logger = logging.getLogger(__name__)


class PendingTrigger(BaseModel):
    """One collected (unit, ability) pair waiting in a trigger queue"""

    source: CombatUnit  # the board unit itself; for dead units, the removed instance
    team: Team
    position: int  # board index at collection time (where it stood, if dead)
    ability_index: int
    attack: int  # priority stats captured at collection time
    health: int
    trigger_target: Optional[int] = None
    is_from_dead: bool = False


class DeadUnit(BaseModel):
    unit: CombatUnit
    team: Team
    position: int


def trigger_priority_key(trigger: PendingTrigger) -> tuple[int, int, int, int, int]:
    return (-trigger.attack, -trigger.health, int(trigger.team), trigger.position, trigger.ability_index)


# =============================================================================
# COLLECTION
# =============================================================================


def unit_triggers(
    unit: CombatUnit,
    team: Team,
    position: int,
    kinds: Iterable[AbilityTrigger],
    trigger_target: Optional[int] = None,
    is_from_dead: bool = False,
) -> list[PendingTrigger]:
    """Abilities of one unit matching any of `kinds`, minus those with exhausted max_triggers"""
    kinds = set(kinds)
    pending = []
    for ability_index, ability in enumerate(unit.abilities):
        if ability.trigger not in kinds:
            continue
        if ability.max_triggers is not None and unit.trigger_count(ability_index) >= ability.max_triggers:
            continue
        pending.append(
            PendingTrigger(
                source=unit,
                team=team,
                position=position,
                ability_index=ability_index,
                attack=unit.effective_attack(),
                health=unit.effective_health(),
                trigger_target=trigger_target,
                is_from_dead=is_from_dead,
            )
        )
    return pending


def collect_phase_triggers(state: BattleState, kinds: Iterable[AbilityTrigger], front_ids: Optional[set[int]] = None) -> list[PendingTrigger]:
    """Scan both boards by position for abilities matching `kinds`.

    Unit-scoped attack triggers only fire for units in `front_ids` (defaults to
    the current front units).
    """
    kinds = set(kinds)
    if front_ids is None:
        front_ids = {board[0].instance_id for board in (state.player_units, state.enemy_units) if board}

    pending: list[PendingTrigger] = []
    for team in (Team.PLAYER, Team.ENEMY):
        for position, unit in enumerate(state.board(team)):
            if not unit.is_alive():
                continue
            eligible = {kind for kind in kinds if not kind.is_unit_scoped() or unit.instance_id in front_ids}
            if eligible:
                pending.extend(unit_triggers(unit, team, position, eligible))
    return pending


def collect_spawn_triggers(state: BattleState, spawned: CombatUnit) -> list[PendingTrigger]:
    pending: list[PendingTrigger] = []
    for team in (Team.PLAYER, Team.ENEMY):
        for position, unit in enumerate(state.board(team)):
            if not unit.is_alive():
                continue
            if unit.instance_id == spawned.instance_id:
                kind = AbilityTrigger.ON_SPAWN
            elif team == spawned.team:
                kind = AbilityTrigger.ON_ALLY_SPAWN
            else:
                kind = AbilityTrigger.ON_ENEMY_SPAWN
            pending.extend(unit_triggers(unit, team, position, [kind], trigger_target=spawned.instance_id))
    return pending


def collect_hurt_triggers(state: BattleState, hurt: list[tuple[int, Optional[int]]]) -> list[PendingTrigger]:
    """OnHurt for each (hurt unit id, aggressor id). Must run before dead units are removed."""
    pending: list[PendingTrigger] = []
    for unit_id, aggressor_id in hurt:
        unit = state.find_unit(unit_id)
        if unit is None:
            continue
        position = state.position_of(unit_id)
        pending.extend(unit_triggers(unit, unit.team, position, [AbilityTrigger.ON_HURT], trigger_target=aggressor_id, is_from_dead=not unit.is_alive()))
    return pending


def collect_faint_triggers(state: BattleState, dead: list[DeadUnit]) -> list[PendingTrigger]:
    pending: list[PendingTrigger] = []
    for entry in dead:
        pending.extend(unit_triggers(entry.unit, entry.team, entry.position, [AbilityTrigger.ON_FAINT], is_from_dead=True))
        for position, ally in enumerate(state.board(entry.team)):
            pending.extend(unit_triggers(ally, entry.team, position, [AbilityTrigger.ON_ALLY_FAINT], trigger_target=entry.unit.instance_id))
    return pending


# =============================================================================
# DEATH CHECK
# =============================================================================


def remove_dead_units(state: BattleState) -> list[DeadUnit]:
    """Remove every unit at or below 0 health, emitting one UnitDeath per side that lost units"""
    dead: list[DeadUnit] = []
    for team in (Team.PLAYER, Team.ENEMY):
        board = state.board(team)
        fallen = [DeadUnit(unit=unit, team=team, position=position) for position, unit in enumerate(board) if not unit.is_alive()]
        if not fallen:
            continue
        board[:] = [unit for unit in board if unit.is_alive()]
        state.emit(UnitDeathEvent(team=team, new_board_state=state.board_views(team)))
        dead.extend(fallen)
    return dead


# =============================================================================
# RESOLUTION
# =============================================================================


def resolve_hurt_and_faint(state: BattleState, hurt: list[tuple[int, Optional[int]]], team: Optional[Team] = None) -> None:
    """Queue OnHurt for damaged units, run the death check, queue OnFaint/OnAllyFaint, then resolve them."""
    reactions = collect_hurt_triggers(state, hurt)
    reactions.extend(collect_faint_triggers(state, remove_dead_units(state)))
    resolve_reactions(state, team, reactions)


def resolve_reactions(state: BattleState, team: Optional[Team], reactions: list[PendingTrigger]) -> None:
    """Resolve a nested reaction queue one trigger-depth level down"""
    if not reactions:
        return
    if team is None:
        team = min(reactions, key=trigger_priority_key).team
    state.limits.enter_trigger_depth(team)
    try:
        resolve_trigger_queue(state, reactions)
    finally:
        state.limits.exit_trigger_depth()


def resolve_trigger_queue(state: BattleState, queue: list[PendingTrigger]) -> None:
    for trigger in sorted(queue, key=trigger_priority_key):
        unit = trigger.source
        if trigger.is_from_dead:
            position = trigger.position
        else:
            live = state.find_live_unit(unit.instance_id)
            if live is None:
                continue  # died before its turn came
            position = state.position_of(unit.instance_id)

        ability = unit.abilities[trigger.ability_index]
        if ability.max_triggers is not None and unit.trigger_count(trigger.ability_index) >= ability.max_triggers:
            continue

        ctx = AbilityContext(source=unit, team=trigger.team, position=position, is_from_dead=trigger.is_from_dead, trigger_target=trigger.trigger_target)
        if not evaluate_conditions(ability.conditions, state, ctx):
            logger.debug("Ability %r of unit %d skipped: conditions not met", ability.name, unit.instance_id)
            continue

        state.limits.record_trigger(trigger.team)
        state.emit(AbilityTriggerEvent(source_instance_id=unit.instance_id, ability_name=ability.name))
        unit.record_trigger(trigger.ability_index)
        logger.debug("Ability %r of unit %d fired", ability.name, unit.instance_id)

        damaged = apply_ability_effect(state, ctx, ability.effect)
        resolve_hurt_and_faint(state, [(target_id, unit.instance_id) for target_id in damaged], trigger.team)
