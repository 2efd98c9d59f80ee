from pydantic import BaseModel, Field

from src.manalimit.constants import I32_MAX
from src.manalimit.enums import Status
from src.manalimit.schema.ability import Ability, ShopAbility


class UnitCard(BaseModel):
    """Immutable card template, loaded read-only into the card pool keyed by `id`"""

    id: int = Field(ge=0, le=4294967295)  # u32
    name: str = Field(max_length=64)
    attack: int = Field(ge=0, le=I32_MAX)  # i32
    health: int = Field(ge=0, le=I32_MAX)  # i32

    # Economy - never read during a battle except as the MANA stat
    play_cost: int = Field(default=0, ge=0, le=255)  # u8
    pitch_value: int = Field(default=0, ge=0, le=255)  # u8

    abilities: list[Ability] = Field(default_factory=list)
    shop_abilities: list[ShopAbility] = Field(default_factory=list)
    is_token: bool = False  # battle-only, never drawn
    base_statuses: Status = Status.NONE


CardPool = dict[int, UnitCard]
