from src.manalimit.ability_effects import damage, mana, spawning, stat_changes, status_effects
from src.manalimit.schema.ability import AbilityEffect
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.targeting import AbilityContext, resolve_targets


def apply_ability_effect(state: BattleState, ctx: AbilityContext, effect: AbilityEffect) -> list[int]:
    """Resolve targets and apply one effect. Returns ids of units that took damage.

    Every application is one recursion step against the battle limits; a
    breach raises LimitBreach out of here.
    """
    state.limits.enter_recursion(ctx.team)
    try:
        return _dispatch(state, ctx, effect)
    finally:
        state.limits.exit_recursion()


def _dispatch(state: BattleState, ctx: AbilityContext, effect: AbilityEffect) -> list[int]:
    source_id = ctx.source_id

    if effect.type == "Damage":
        targets = resolve_targets(state, ctx, effect.target)
        return damage.apply_damage(state, source_id, targets, effect.amount)

    elif effect.type == "Destroy":
        targets = resolve_targets(state, ctx, effect.target)
        return damage.apply_destroy(state, source_id, targets)

    elif effect.type == "ModifyStats":
        targets = resolve_targets(state, ctx, effect.target)
        stat_changes.modify_stats(state, source_id, targets, effect.health, effect.attack)

    elif effect.type == "ModifyStatsPermanent":
        targets = resolve_targets(state, ctx, effect.target)
        stat_changes.modify_stats(state, source_id, targets, effect.health, effect.attack, permanent=True)

    elif effect.type == "SpawnUnit":
        spawning.spawn_unit(state, ctx, effect.card_id)

    elif effect.type == "GainMana":
        mana.gain_mana(state, source_id, ctx.team, effect.amount)

    elif effect.type == "GrantStatusThisBattle":
        targets = resolve_targets(state, ctx, effect.target)
        status_effects.grant_status(state, source_id, targets, effect.status, permanent=False)

    elif effect.type == "GrantStatusPermanent":
        targets = resolve_targets(state, ctx, effect.target)
        status_effects.grant_status(state, source_id, targets, effect.status, permanent=True)

    elif effect.type == "RemoveStatusPermanent":
        targets = resolve_targets(state, ctx, effect.target)
        status_effects.remove_status_permanent(state, source_id, targets, effect.status)

    return []
