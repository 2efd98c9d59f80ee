from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from src.manalimit.constants import BOARD_SIZE, I32_MAX, I32_MIN, STARTING_LIVES, STARTING_MANA_LIMIT
from src.manalimit.enums import GamePhase, Status
from src.manalimit.schema.card import UnitCard


class BoardUnit(BaseModel):
    """A card sitting on the persistent board, with its accumulated permanent modifiers"""

    card_id: int = Field(ge=0, le=4294967295)  # u32
    perm_attack: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    perm_health: int = Field(default=0, ge=I32_MIN, le=I32_MAX)  # i32
    perm_statuses: Status = Status.NONE


# =============================================================================
# TURN ACTIONS
# =============================================================================


class PitchFromHand(BaseModel):
    type: Literal["PitchFromHand"] = "PitchFromHand"
    hand_index: int = Field(ge=0, le=255)  # u8


class PlayFromHand(BaseModel):
    type: Literal["PlayFromHand"] = "PlayFromHand"
    hand_index: int = Field(ge=0, le=255)  # u8
    board_slot: int = Field(ge=0, le=255)  # u8


class PitchFromBoard(BaseModel):
    type: Literal["PitchFromBoard"] = "PitchFromBoard"
    board_slot: int = Field(ge=0, le=255)  # u8


class SwapBoard(BaseModel):
    type: Literal["SwapBoard"] = "SwapBoard"
    slot_a: int = Field(ge=0, le=255)  # u8
    slot_b: int = Field(ge=0, le=255)  # u8


TurnAction = Annotated[
    Union[PitchFromHand, PlayFromHand, PitchFromBoard, SwapBoard],
    Field(discriminator="type"),
]


class CommitTurnAction(BaseModel):
    actions: list[TurnAction] = Field(default_factory=list)


# =============================================================================
# GAME STATE
# =============================================================================


class GameState(BaseModel):
    """Everything that persists between rounds of one run"""

    game_seed: int = Field(default=0, ge=0, le=0xFFFFFFFFFFFFFFFF)  # u64
    round: int = Field(default=1, ge=1, le=65535)  # u16
    lives: int = Field(default=STARTING_LIVES, ge=0, le=255)  # u8
    wins: int = Field(default=0, ge=0, le=255)  # u8
    phase: GamePhase = GamePhase.SHOP

    mana_limit: int = Field(default=STARTING_MANA_LIMIT, ge=0, le=255)  # u8
    shop_mana: int = Field(default=0, ge=0, le=255)  # u8, carried from shop-start effects into the turn

    bag: list[int] = Field(default_factory=list)  # card ids not yet drawn
    hand: list[int] = Field(default_factory=list)  # card ids
    board: list[Optional[BoardUnit]] = Field(default_factory=lambda: [None] * BOARD_SIZE)

    card_pool: dict[int, UnitCard] = Field(default_factory=dict)

    def get_card(self, card_id: int) -> Optional[UnitCard]:
        return self.card_pool.get(card_id)

    def first_empty_slot(self) -> Optional[int]:
        for slot, unit in enumerate(self.board):
            if unit is None:
                return slot
        return None
