from src.manalimit.battle_engine import resolve_battle
from src.manalimit.enums import AbilityTrigger, TargetScope, Team
from src.manalimit.schema.ability import Ability, AllTarget, DamageEffect, ModifyStatsEffect, SelfUnitTarget
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import AbilityTriggerEvent
from src.manalimit.utils.unit_factory import create_combat_unit


def shout(name: str, trigger: AbilityTrigger = AbilityTrigger.ON_START) -> Ability:
    """Harmless ability whose only observable effect is its trigger event"""
    return Ability(trigger=trigger, effect=ModifyStatsEffect(attack=0, health=0, target=SelfUnitTarget()), name=name)


def unit(card_id: int, attack: int, health: int, abilities, team: Team = Team.PLAYER):
    card = UnitCard(id=card_id, name=f"Card{card_id}", attack=attack, health=health, abilities=abilities)
    return create_combat_unit(card, team)


def trigger_order(events) -> list[str]:
    return [e.ability_name for e in events if isinstance(e, AbilityTriggerEvent)]


def filler(team: Team = Team.ENEMY):
    return unit(50, 0, 1, [], team)


def test_higher_attack_fires_first():
    events = resolve_battle([unit(1, 1, 5, [shout("low")]), unit(2, 5, 5, [shout("high")])], [filler()], 1)
    assert trigger_order(events)[:2] == ["high", "low"]


def test_health_breaks_attack_tie():
    events = resolve_battle([unit(1, 3, 2, [shout("frail")]), unit(2, 3, 8, [shout("sturdy")])], [filler()], 1)
    assert trigger_order(events)[:2] == ["sturdy", "frail"]


def test_player_breaks_stat_tie():
    events = resolve_battle([unit(1, 3, 3, [shout("player")])], [unit(2, 3, 3, [shout("enemy")], Team.ENEMY)], 1)
    assert trigger_order(events)[:2] == ["player", "enemy"]


def test_board_index_breaks_team_tie():
    events = resolve_battle([unit(1, 3, 3, [shout("front")]), unit(2, 3, 3, [shout("back")])], [filler()], 1)
    assert trigger_order(events)[:2] == ["front", "back"]


def test_declaration_order_breaks_index_tie():
    events = resolve_battle([unit(1, 3, 3, [shout("first"), shout("second"), shout("third")])], [filler()], 1)
    assert trigger_order(events)[:3] == ["first", "second", "third"]


def test_dead_units_ordered_by_stats_at_death():
    """Two enemies killed by the same blast: the stronger one's faint ability resolves first"""
    blast = Ability(trigger=AbilityTrigger.ON_START, effect=DamageEffect(amount=10, target=AllTarget(scope=TargetScope.ENEMIES)), name="blast")
    weak = unit(2, 2, 1, [shout("weak faint", AbilityTrigger.ON_FAINT)], Team.ENEMY)
    strong = unit(3, 8, 1, [shout("strong faint", AbilityTrigger.ON_FAINT)], Team.ENEMY)

    events = resolve_battle([unit(1, 1, 1, [blast])], [weak, strong], 1)
    assert trigger_order(events) == ["blast", "strong faint", "weak faint"]
