import pytest

from src.manalimit.enums import AbilityTrigger, Status, TargetScope
from src.manalimit.errors import (
    BoardSlotOccupied,
    CardAlreadyUsed,
    InvalidBoardPitch,
    InvalidBoardSlot,
    InvalidHandIndex,
    NotEnoughMana,
    TemplateNotFound,
)
from src.manalimit.schema.ability import (
    AllTarget,
    DestroyEffect,
    GainManaEffect,
    GrantStatusPermanentEffect,
    ModifyStatsPermanentEffect,
    PositionTarget,
    SelfUnitTarget,
    ShopAbility,
    SpawnUnitEffect,
)
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.game_state import (
    BoardUnit,
    CommitTurnAction,
    GameState,
    PitchFromBoard,
    PitchFromHand,
    PlayFromHand,
    SwapBoard,
)
from src.manalimit.turn_commit import verify_and_apply_turn


def make_pool() -> dict[int, UnitCard]:
    cards = [
        UnitCard(id=1, name="Fodder", attack=1, health=1, play_cost=1, pitch_value=4),
        UnitCard(id=2, name="Knight", attack=3, health=3, play_cost=4, pitch_value=1),
        UnitCard(id=3, name="Dragon", attack=6, health=6, play_cost=5, pitch_value=2),
        UnitCard(
            id=4,
            name="Eager Recruit",
            attack=1,
            health=1,
            play_cost=1,
            pitch_value=1,
            shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_BUY, effect=ModifyStatsPermanentEffect(attack=1, health=1, target=SelfUnitTarget()), name="Eager")],
        ),
        UnitCard(
            id=5,
            name="Merchant",
            attack=1,
            health=1,
            play_cost=1,
            pitch_value=1,
            shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_SELL, effect=GainManaEffect(amount=2), name="Haggle")],
        ),
        UnitCard(
            id=6,
            name="Nest",
            attack=0,
            health=2,
            play_cost=0,
            pitch_value=1,
            shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_SELL, effect=SpawnUnitEffect(card_id=7), name="Hatch")],
        ),
        UnitCard(id=7, name="Hatchling", attack=1, health=1, is_token=True),
        UnitCard(
            id=8,
            name="Armorer",
            attack=1,
            health=1,
            play_cost=1,
            pitch_value=1,
            shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_BUY, effect=GrantStatusPermanentEffect(status=Status.SHIELD, target=AllTarget(scope=TargetScope.ALLIES_OTHER)), name="Outfit")],
        ),
        UnitCard(
            id=9,
            name="Cannibal",
            attack=1,
            health=1,
            play_cost=0,
            pitch_value=1,
            shop_abilities=[ShopAbility(trigger=AbilityTrigger.ON_BUY, effect=DestroyEffect(target=PositionTarget(scope=TargetScope.SELF_UNIT, index=1)), name="Devour")],
        ),
    ]
    return {card.id: card for card in cards}


def make_state(hand: list[int], board=None, mana_limit: int = 5) -> GameState:
    state = GameState(hand=hand, card_pool=make_pool(), mana_limit=mana_limit, game_seed=1234)
    if board is not None:
        state.board = board
    return state


def test_pitch_then_play_mana_accounting():
    state = make_state(hand=[1, 2])
    verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=0)])
    assert state.board[0] == BoardUnit(card_id=2)
    assert state.hand == []
    assert state.shop_mana == 0


def test_not_enough_mana_leaves_state_unchanged():
    state = make_state(hand=[2, 3])
    before = state.model_dump()
    with pytest.raises(NotEnoughMana) as excinfo:
        verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=0)])
    assert excinfo.value.have == 1
    assert excinfo.value.need == 5
    assert state.model_dump() == before


def test_mana_capped_at_limit():
    state = make_state(hand=[1, 1, 3], mana_limit=5)
    # 4 + 4 caps at 5, exactly enough for the dragon
    verify_and_apply_turn(state, CommitTurnAction(actions=[PitchFromHand(hand_index=0), PitchFromHand(hand_index=1), PlayFromHand(hand_index=2, board_slot=2)]))
    assert state.board[2] == BoardUnit(card_id=3)
    assert state.shop_mana == 0


def test_leftover_mana_is_stored():
    state = make_state(hand=[1])
    verify_and_apply_turn(state, [PitchFromHand(hand_index=0)])
    assert state.shop_mana == 4


def test_invalid_hand_index():
    state = make_state(hand=[1])
    with pytest.raises(InvalidHandIndex):
        verify_and_apply_turn(state, [PitchFromHand(hand_index=3)])


def test_card_already_used():
    state = make_state(hand=[1, 1])
    with pytest.raises(CardAlreadyUsed):
        verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=0, board_slot=0)])


def test_invalid_board_slot():
    state = make_state(hand=[1, 1])
    with pytest.raises(InvalidBoardSlot):
        verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=9)])
    with pytest.raises(InvalidBoardSlot):
        verify_and_apply_turn(state, [SwapBoard(slot_a=0, slot_b=5)])


def test_board_slot_occupied():
    state = make_state(hand=[1, 1], board=[BoardUnit(card_id=2), None, None, None, None])
    with pytest.raises(BoardSlotOccupied):
        verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=0)])


def test_invalid_board_pitch():
    state = make_state(hand=[])
    with pytest.raises(InvalidBoardPitch):
        verify_and_apply_turn(state, [PitchFromBoard(board_slot=0)])
    with pytest.raises(InvalidBoardPitch):
        verify_and_apply_turn(state, [PitchFromBoard(board_slot=7)])


def test_template_not_found():
    state = make_state(hand=[404])
    with pytest.raises(TemplateNotFound) as excinfo:
        verify_and_apply_turn(state, [PitchFromHand(hand_index=0)])
    assert excinfo.value.card_id == 404


def test_swap_and_pitch_from_board():
    state = make_state(hand=[], board=[BoardUnit(card_id=2), None, BoardUnit(card_id=3), None, None])
    verify_and_apply_turn(state, [SwapBoard(slot_a=0, slot_b=2), PitchFromBoard(board_slot=2)])
    assert state.board == [BoardUnit(card_id=3), None, None, None, None]
    assert state.shop_mana == 1


def test_on_buy_permanent_buff():
    state = make_state(hand=[1, 4])
    verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=1)])
    assert state.board[1] == BoardUnit(card_id=4, perm_attack=1, perm_health=1)


def test_on_buy_grants_status_to_others():
    state = make_state(hand=[1, 8], board=[BoardUnit(card_id=2), None, None, None, None])
    verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=1)])
    assert state.board[0].perm_statuses == Status.SHIELD
    assert state.board[1].perm_statuses == Status.NONE


def test_on_buy_destroy_clears_slot():
    state = make_state(hand=[9], board=[None, BoardUnit(card_id=2), None, None, None])
    verify_and_apply_turn(state, [PlayFromHand(hand_index=0, board_slot=0)])
    assert state.board[0] == BoardUnit(card_id=9)
    assert state.board[1] is None


def test_on_sell_gains_mana():
    state = make_state(hand=[], board=[BoardUnit(card_id=5), None, None, None, None])
    verify_and_apply_turn(state, [PitchFromBoard(board_slot=0)])
    assert state.board[0] is None
    assert state.shop_mana == 3


def test_on_sell_spawn_takes_empty_slot():
    state = make_state(hand=[], board=[BoardUnit(card_id=2), BoardUnit(card_id=6), None, None, None])
    verify_and_apply_turn(state, [PitchFromBoard(board_slot=1)])
    assert state.board[0] == BoardUnit(card_id=2)
    assert state.board[1] == BoardUnit(card_id=7)


def test_unit_bought_and_sold_same_turn_skips_on_buy():
    state = make_state(hand=[1, 4])
    verify_and_apply_turn(state, [PitchFromHand(hand_index=0), PlayFromHand(hand_index=1, board_slot=0), PitchFromBoard(board_slot=0)])
    assert state.board == [None] * 5
    assert state.shop_mana == 4
