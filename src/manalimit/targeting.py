"""Scope and target resolution.

Scopes are always relative to the source unit's side. Every scan walks the
boards by position (player board first for the All scope), never through a
hash map, so resolution order is identical on every host.
"""

from typing import Optional

from pydantic import BaseModel

from src.manalimit.enums import SortOrder, StatType, Status, TargetScope, Team
from src.manalimit.schema.ability import (
    AbilityTarget,
    AdjacentTarget,
    AllTarget,
    PositionTarget,
    RandomTarget,
    SelfUnitTarget,
    StandardTarget,
)
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.utils import rng


class AbilityContext(BaseModel):
    """Invocation context for one firing ability"""

    source: CombatUnit  # live unit, or a snapshot taken when it died
    team: Team
    position: int  # board index now, or where the unit stood when it died
    is_from_dead: bool = False
    trigger_target: Optional[int] = None  # unit that caused a reaction trigger

    @property
    def source_id(self) -> int:
        return self.source.instance_id


def get_stat_value(unit: CombatUnit, stat: StatType) -> int:
    if stat == StatType.HEALTH:
        return unit.effective_health()
    if stat == StatType.ATTACK:
        return unit.effective_attack()
    return unit.play_cost


def units_in_scope(state: BattleState, ctx: AbilityContext, scope: TargetScope) -> list[CombatUnit]:
    """Live units selected by a scope, in board order"""
    allies = [u for u in state.board(ctx.team) if u.is_alive()]
    enemies = [u for u in state.board(ctx.team.opponent()) if u.is_alive()]

    if scope == TargetScope.SELF_UNIT:
        return [u for u in allies if u.instance_id == ctx.source_id]
    if scope == TargetScope.ALLIES:
        return allies
    if scope == TargetScope.ENEMIES:
        return enemies
    if scope == TargetScope.ALL:
        return [u for u in state.player_units if u.is_alive()] + [u for u in state.enemy_units if u.is_alive()]
    if scope == TargetScope.ALLIES_OTHER:
        return [u for u in allies if u.instance_id != ctx.source_id]
    if scope in (TargetScope.TRIGGER_SOURCE, TargetScope.AGGRESSOR):
        # Only meaningful inside reaction triggers; fizzles otherwise
        unit = state.find_live_unit(ctx.trigger_target)
        return [unit] if unit is not None else []
    return []


# =============================================================================
# TARGET RESOLUTION
# =============================================================================


def resolve_targets(state: BattleState, ctx: AbilityContext, target: AbilityTarget) -> list[int]:
    """Map an ability target to concrete instance ids. Returns [] (fizzle) when nothing matches."""
    if isinstance(target, SelfUnitTarget):
        unit = state.find_live_unit(ctx.source_id)
        return [unit.instance_id] if unit is not None else []

    if isinstance(target, AllTarget):
        return [u.instance_id for u in units_in_scope(state, ctx, target.scope)]

    if isinstance(target, PositionTarget):
        if target.scope == TargetScope.SELF_UNIT:
            return _resolve_relative_position(state, ctx, target.index)
        return _resolve_absolute_position(units_in_scope(state, ctx, target.scope), target.index)

    if isinstance(target, RandomTarget):
        return _resolve_random(state, ctx, target)

    if isinstance(target, StandardTarget):
        candidates = units_in_scope(state, ctx, target.scope)
        # sorted() is stable for reverse=True as well, so ties keep board order
        ranked = sorted(candidates, key=lambda u: get_stat_value(u, target.stat), reverse=target.order == SortOrder.DESCENDING)
        return [u.instance_id for u in ranked[: target.count]]

    if isinstance(target, AdjacentTarget):
        return _resolve_adjacent(state, ctx, target.scope)

    return []


def _resolve_relative_position(state: BattleState, ctx: AbilityContext, offset: int) -> list[int]:
    """Offset from the source along its own board: negative is ahead, positive is behind."""
    allies = state.board(ctx.team)
    alive = state.position_of(ctx.source_id) is not None
    position = state.position_of(ctx.source_id) if alive else ctx.position

    if offset == 0:
        return [ctx.source_id] if alive and ctx.source.is_alive() else []

    index = position + offset
    if not alive and offset > 0:
        # The dead unit's slot was vacated, everything behind it moved up one
        index -= 1
    if 0 <= index < len(allies) and allies[index].is_alive():
        return [allies[index].instance_id]
    return []


def _resolve_absolute_position(units: list[CombatUnit], index: int) -> list[int]:
    if index < 0:
        index += len(units)
    if 0 <= index < len(units):
        return [units[index].instance_id]
    return []


def _resolve_random(state: BattleState, ctx: AbilityContext, target: RandomTarget) -> list[int]:
    candidates = units_in_scope(state, ctx, target.scope)
    if target.scope == TargetScope.ENEMIES:
        guards = [u for u in candidates if u.has_status(Status.GUARD)]
        if guards:
            candidates = guards
    if not candidates:
        return []
    ids = [u.instance_id for u in candidates]
    rng.shuffle(state.rng, ids)
    return ids[: target.count]


def _resolve_adjacent(state: BattleState, ctx: AbilityContext, scope: TargetScope) -> list[int]:
    """Board neighbours of each unit in scope, excluding the scope itself"""
    if scope == TargetScope.SELF_UNIT and state.position_of(ctx.source_id) is None:
        # Dead source: its old neighbours are now at position-1 and position
        allies = state.board(ctx.team)
        centres = [(allies, ctx.position - 1, ctx.position)]
        excluded: set[int] = set()
    else:
        in_scope = units_in_scope(state, ctx, scope)
        excluded = {u.instance_id for u in in_scope}
        centres = []
        for unit in in_scope:
            board = state.board(unit.team)
            index = state.position_of(unit.instance_id)
            centres.append((board, index - 1, index + 1))

    result: list[int] = []
    for board, before, after in centres:
        for index in (before, after):
            if 0 <= index < len(board):
                neighbour = board[index]
                if neighbour.is_alive() and neighbour.instance_id not in excluded and neighbour.instance_id not in result:
                    result.append(neighbour.instance_id)
    return result
