from src.manalimit.constants import HAND_SIZE, STARTING_LIVES, WINS_TO_VICTORY
from src.manalimit.enums import AbilityTrigger, BattleResult, GamePhase, Status
from src.manalimit.game_flow import apply_battle_deltas, calculate_mana_limit, draw_hand, finish_battle, start_round
from src.manalimit.schema.ability import GainManaEffect, ShopAbility
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import AbilityGrantStatusEvent, AbilityModifyStatsPermanentEvent
from src.manalimit.schema.combat_unit import player_unit_id
from src.manalimit.schema.game_state import BoardUnit, GameState


def make_state(bag_size: int = 10) -> GameState:
    pool = {i: UnitCard(id=i, name=f"Card{i}", attack=1, health=1) for i in range(1, bag_size + 1)}
    return GameState(game_seed=42, bag=list(pool), card_pool=pool)


def test_mana_limit_progression():
    assert calculate_mana_limit(1) == 3
    assert calculate_mana_limit(4) == 6
    assert calculate_mana_limit(8) == 10
    assert calculate_mana_limit(30) == 10


def test_draw_hand_conserves_cards():
    state = make_state(10)
    draw_hand(state)
    assert len(state.hand) == HAND_SIZE
    assert len(state.bag) == 3
    assert sorted(state.hand + state.bag) == list(range(1, 11))

    # Drawing again returns the old hand to the bag first
    state.round = 2
    draw_hand(state)
    assert len(state.hand) == HAND_SIZE
    assert sorted(state.hand + state.bag) == list(range(1, 11))


def test_draw_hand_is_deterministic():
    a = make_state(12)
    b = make_state(12)
    draw_hand(a)
    draw_hand(b)
    assert a.hand == b.hand


def test_start_round_fires_shop_start():
    state = make_state(0)
    banker = UnitCard(id=50, name="Banker", attack=1, health=1, shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_SHOP_START, effect=GainManaEffect(amount=2), name="Interest")])
    state.card_pool[50] = banker
    state.board[0] = BoardUnit(card_id=50)
    state.shop_mana = 9
    start_round(state)
    assert state.mana_limit == 3
    assert state.shop_mana == 2
    assert state.phase == GamePhase.SHOP


def test_finish_battle_transitions():
    state = make_state()
    assert finish_battle(state, BattleResult.VICTORY) == GamePhase.SHOP
    assert state.wins == 1 and state.round == 2

    assert finish_battle(state, BattleResult.DRAW) == GamePhase.SHOP
    assert state.wins == 1 and state.lives == STARTING_LIVES and state.round == 3

    for _ in range(STARTING_LIVES):
        phase = finish_battle(state, BattleResult.DEFEAT)
    assert phase == GamePhase.DEFEAT
    assert state.lives == 0


def test_finish_battle_victory_run():
    state = make_state()
    state.wins = WINS_TO_VICTORY - 1
    assert finish_battle(state, BattleResult.VICTORY) == GamePhase.VICTORY


def test_apply_battle_deltas_maps_ids_to_occupied_slots():
    state = make_state()
    state.board = [None, BoardUnit(card_id=1), None, BoardUnit(card_id=2), None]
    events = [
        AbilityModifyStatsPermanentEvent(source_instance_id=player_unit_id(1), target_instance_id=player_unit_id(2), health_change=2, attack_change=1, new_attack=2, new_health=3),
        AbilityGrantStatusEvent(source_instance_id=player_unit_id(1), target_instance_id=player_unit_id(1), status=Status.SHIELD, permanent=True),
        # Battle-only status must not persist
        AbilityGrantStatusEvent(source_instance_id=player_unit_id(1), target_instance_id=player_unit_id(2), status=Status.POISON, permanent=False),
    ]
    apply_battle_deltas(state, events)
    assert state.board[1] == BoardUnit(card_id=1, perm_statuses=Status.SHIELD)
    assert state.board[3] == BoardUnit(card_id=2, perm_attack=1, perm_health=2)
