from src.manalimit.schema.ability import (
    AnyOfCondition,
    Condition,
    IsCondition,
    IsPosition,
    Matcher,
    StatStatCompare,
    StatValueCompare,
    UnitCount,
)
from src.manalimit.enums import TargetScope
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.targeting import AbilityContext, get_stat_value, units_in_scope


def evaluate_conditions(conditions: list[Condition], state: BattleState, ctx: AbilityContext) -> bool:
    """All conditions must hold; no conditions always holds"""
    return all(evaluate_condition(condition, state, ctx) for condition in conditions)


def evaluate_condition(condition: Condition, state: BattleState, ctx: AbilityContext) -> bool:
    if isinstance(condition, IsCondition):
        return evaluate_matcher(condition.matcher, state, ctx)
    if isinstance(condition, AnyOfCondition):
        return any(evaluate_matcher(matcher, state, ctx) for matcher in condition.matchers)
    return False


def _condition_scope(state: BattleState, ctx: AbilityContext, scope: TargetScope) -> list[CombatUnit]:
    # A dead source can still inspect its own (captured) stats
    if scope == TargetScope.SELF_UNIT:
        return [ctx.source]
    return units_in_scope(state, ctx, scope)


def evaluate_matcher(matcher: Matcher, state: BattleState, ctx: AbilityContext) -> bool:
    if isinstance(matcher, StatValueCompare):
        units = _condition_scope(state, ctx, matcher.scope)
        return any(matcher.op.compare(get_stat_value(u, matcher.stat), matcher.value) for u in units)

    if isinstance(matcher, UnitCount):
        units = units_in_scope(state, ctx, matcher.scope)
        return matcher.op.compare(len(units), matcher.value)

    if isinstance(matcher, StatStatCompare):
        source_value = get_stat_value(ctx.source, matcher.source_stat)
        units = _condition_scope(state, ctx, matcher.target_scope)
        return any(matcher.op.compare(source_value, get_stat_value(u, matcher.target_stat)) for u in units)

    if isinstance(matcher, IsPosition):
        if matcher.scope == TargetScope.SELF_UNIT:
            # A dead source still counts the slot it vacated
            size = len(state.board(ctx.team))
            if state.position_of(ctx.source_id) is None:
                size += 1
            index = matcher.index + size if matcher.index < 0 else matcher.index
            return ctx.position == index
        units = units_in_scope(state, ctx, matcher.scope)
        index = matcher.index + len(units) if matcher.index < 0 else matcher.index
        return 0 <= index < len(units) and units[index].instance_id == ctx.source_id

    return False
