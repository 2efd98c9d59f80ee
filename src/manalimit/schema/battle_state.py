from typing import Optional

from pydantic import BaseModel, Field

from src.manalimit.battle_limits import BattleLimits
from src.manalimit.config import DEFAULT_CONFIG, EngineConfig
from src.manalimit.enums import Team
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import CombatEvent
from src.manalimit.schema.combat_unit import CombatUnit, UnitView
from src.manalimit.utils.rng import XorShiftRng


class BattleState(BaseModel):
    """Everything one battle owns: both boards, its rng, its limits and the event log.

    Threaded explicitly through every pipeline call. Nothing here is shared
    between battles.
    """

    player_units: list[CombatUnit] = Field(default_factory=list)  # index 0 is the front
    enemy_units: list[CombatUnit] = Field(default_factory=list)
    rng: XorShiftRng = Field(default_factory=XorShiftRng)
    limits: BattleLimits = Field(default_factory=BattleLimits)
    card_pool: dict[int, UnitCard] = Field(default_factory=dict)  # read-only lookup for spawns
    config: EngineConfig = DEFAULT_CONFIG
    events: list[CombatEvent] = Field(default_factory=list)

    def board(self, team: Team) -> list[CombatUnit]:
        return self.player_units if team == Team.PLAYER else self.enemy_units

    def emit(self, event: CombatEvent) -> None:
        self.events.append(event)

    def find_unit(self, instance_id: Optional[int]) -> Optional[CombatUnit]:
        """Board lookup by id. Units that already left the board are not found."""
        if instance_id is None:
            return None
        for unit in self.player_units:
            if unit.instance_id == instance_id:
                return unit
        for unit in self.enemy_units:
            if unit.instance_id == instance_id:
                return unit
        return None

    def find_live_unit(self, instance_id: Optional[int]) -> Optional[CombatUnit]:
        unit = self.find_unit(instance_id)
        if unit is None or not unit.is_alive():
            return None
        return unit

    def position_of(self, instance_id: int) -> Optional[int]:
        for board in (self.player_units, self.enemy_units):
            for index, unit in enumerate(board):
                if unit.instance_id == instance_id:
                    return index
        return None

    def board_views(self, team: Team) -> list[UnitView]:
        return [unit.view() for unit in self.board(team)]

    def is_over(self) -> bool:
        return not self.player_units or not self.enemy_units
