from src.manalimit.battle_engine import resolve_battle
from src.manalimit.config import EngineConfig
from src.manalimit.enums import AbilityTrigger, Status, Team
from src.manalimit.schema.ability import Ability, GrantStatusThisBattleEffect, SelfUnitTarget
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import AbilityTriggerEvent, UnitDeathEvent
from src.manalimit.schema.combat_unit import UnitView
from src.manalimit.schema.game_state import BoardUnit, GameState
from src.manalimit.serialization import (
    bound_event,
    decode_events,
    decode_game_state,
    encode_events,
    encode_events_bounded,
    encode_game_state,
    encode_game_state_bounded,
)
from src.manalimit.utils.unit_factory import create_combat_unit


def sample_events():
    shielder = UnitCard(
        id=1,
        name="Shielder",
        attack=2,
        health=3,
        abilities=[Ability(trigger=AbilityTrigger.ON_START, effect=GrantStatusThisBattleEffect(status=Status.SHIELD, target=SelfUnitTarget()), name="Brace")],
    )
    enemy = UnitCard(id=2, name="Grunt", attack=1, health=2)
    return resolve_battle([create_combat_unit(shielder, Team.PLAYER)], [create_combat_unit(enemy, Team.ENEMY)], 7)


def test_event_log_round_trip():
    events = sample_events()
    assert decode_events(encode_events(events)) == events


def test_game_state_round_trip():
    pool = {1: UnitCard(id=1, name="Shielder", attack=2, health=3, base_statuses=Status.SHIELD)}
    state = GameState(game_seed=99, bag=[1, 1], hand=[1], card_pool=pool)
    state.board[2] = BoardUnit(card_id=1, perm_attack=2, perm_statuses=Status.POISON)
    assert decode_game_state(encode_game_state(state)) == state


def test_bounded_event_log_truncates():
    events = sample_events()
    config = EngineConfig(bounded_max_events=3)
    decoded = decode_events(encode_events_bounded(events, config))
    assert decoded == events[:3]


def test_bounded_names_are_cut():
    config = EngineConfig(bounded_max_name_length=4, bounded_max_collection=1)
    trigger = AbilityTriggerEvent(source_instance_id=1, ability_name="Very Long Name")
    assert bound_event(trigger, config).ability_name == "Very"

    views = [UnitView(instance_id=i, card_id=1, name="Shielder", attack=1, health=1) for i in (1, 2)]
    death = bound_event(UnitDeathEvent(team=Team.PLAYER, new_board_state=views), config)
    assert death.new_board_state == [UnitView(instance_id=1, card_id=1, name="Shie", attack=1, health=1)]


def test_bounded_game_state():
    pool = {1: UnitCard(id=1, name="Shielder", attack=2, health=3)}
    state = GameState(bag=[1] * 10, card_pool=pool)
    config = EngineConfig(bounded_max_collection=4, bounded_max_name_length=3)
    decoded = decode_game_state(encode_game_state_bounded(state, config))
    assert decoded.bag == [1] * 4
    assert decoded.card_pool[1].name == "Shi"
    # Source state is untouched
    assert len(state.bag) == 10
    assert state.card_pool[1].name == "Shielder"
