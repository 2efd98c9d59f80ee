import logging
from typing import Optional, Union

from pydantic import BaseModel

from src.manalimit.constants import SHOP_BUY_SALT, SHOP_SELL_SALT
from src.manalimit.enums import AbilityTrigger
from src.manalimit.errors import (
    BoardSlotOccupied,
    CardAlreadyUsed,
    InvalidBoardPitch,
    InvalidBoardSlot,
    InvalidHandIndex,
    NotEnoughMana,
    TemplateNotFound,
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
    TurnAction,
)
from src.manalimit.shop import run_shop_triggers, shop_seed

logger = logging.getLogger(__name__)


class PendingShopTrigger(BaseModel):
    """A buy or sell recorded during validation, fired once the whole turn is valid"""

    kind: AbilityTrigger
    action_index: int
    unit: BoardUnit  # the board object itself, tracked by identity through swaps
    position: int = 0  # compacted board index a sold unit left from


def verify_and_apply_turn(state: GameState, turn: Union[CommitTurnAction, list[TurnAction]]) -> None:
    """
    Replay a turn's shop actions against the game state

    Actions are validated in order against a turn-scoped mana counter that
    starts at the carried shop mana and is capped at the mana limit. Any
    invalid action raises a GameError and leaves `state` untouched; on
    success the board, hand and shop mana are updated in place.
    """
    actions = turn.actions if isinstance(turn, CommitTurnAction) else turn
    work = state.model_copy(deep=True)
    mana = min(max(work.shop_mana, 0), work.mana_limit)
    used: set[int] = set()
    shop_triggers: list[PendingShopTrigger] = []

    for action_index, action in enumerate(actions):
        if isinstance(action, PitchFromHand):
            card = _hand_card(work, used, action.hand_index)
            mana = min(mana + card.pitch_value, work.mana_limit)
            used.add(action.hand_index)

        elif isinstance(action, PlayFromHand):
            card = _hand_card(work, used, action.hand_index)
            slot = action.board_slot
            if slot >= len(work.board):
                raise InvalidBoardSlot(slot)
            if work.board[slot] is not None:
                raise BoardSlotOccupied(slot)
            if mana < card.play_cost:
                raise NotEnoughMana(have=mana, need=card.play_cost)
            mana -= card.play_cost
            unit = BoardUnit(card_id=card.id)
            work.board[slot] = unit
            used.add(action.hand_index)
            shop_triggers.append(PendingShopTrigger(kind=AbilityTrigger.ON_BUY, action_index=action_index, unit=unit))

        elif isinstance(action, PitchFromBoard):
            slot = action.board_slot
            if slot >= len(work.board) or work.board[slot] is None:
                raise InvalidBoardPitch(slot)
            unit = work.board[slot]
            card = work.get_card(unit.card_id)
            if card is None:
                raise TemplateNotFound(unit.card_id)
            position = sum(1 for other in work.board[:slot] if other is not None)
            work.board[slot] = None
            mana = min(mana + card.pitch_value, work.mana_limit)
            shop_triggers.append(PendingShopTrigger(kind=AbilityTrigger.ON_SELL, action_index=action_index, unit=unit, position=position))

        elif isinstance(action, SwapBoard):
            for slot in (action.slot_a, action.slot_b):
                if slot >= len(work.board):
                    raise InvalidBoardSlot(slot)
            work.board[action.slot_a], work.board[action.slot_b] = work.board[action.slot_b], work.board[action.slot_a]

    # Every action is valid; fire buy/sell abilities in action order
    for trigger in shop_triggers:
        mana = min(max(mana + _fire_shop_trigger(work, trigger), 0), work.mana_limit)

    for hand_index in sorted(used, reverse=True):
        work.hand.pop(hand_index)
    work.shop_mana = mana

    for name in GameState.model_fields:
        setattr(state, name, getattr(work, name))
    logger.debug("Turn committed: %d actions, %d mana left", len(actions), mana)


def _hand_card(state: GameState, used: set[int], hand_index: int) -> UnitCard:
    if hand_index >= len(state.hand):
        raise InvalidHandIndex(hand_index)
    if hand_index in used:
        raise CardAlreadyUsed(hand_index)
    card = state.get_card(state.hand[hand_index])
    if card is None:
        raise TemplateNotFound(state.hand[hand_index])
    return card


def _fire_shop_trigger(state: GameState, trigger: PendingShopTrigger) -> int:
    if trigger.kind == AbilityTrigger.ON_BUY:
        slot = _slot_of(state, trigger.unit)
        if slot is None:
            return 0  # sold again later in the same turn
        seed = shop_seed(state.game_seed, state.round, SHOP_BUY_SALT + trigger.action_index)
        return run_shop_triggers(state, AbilityTrigger.ON_BUY, seed, slot=slot)
    seed = shop_seed(state.game_seed, state.round, SHOP_SELL_SALT + trigger.action_index)
    return run_shop_triggers(state, AbilityTrigger.ON_SELL, seed, sold=trigger.unit, sold_position=trigger.position)


def _slot_of(state: GameState, unit: BoardUnit) -> Optional[int]:
    for slot, board_unit in enumerate(state.board):
        if board_unit is unit:
            return slot
    return None
