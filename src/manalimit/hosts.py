"""Host adapters around the one resolution core.

SandboxHost is the unconstrained client: plain card ids in, full log out.
LedgerHost is the metered side: it persists only permanent deltas and
stores a bounded encoding of the log.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from src.manalimit.battle_engine import BattleEngine, resolve_battle
from src.manalimit.config import DEFAULT_CONFIG, EngineConfig
from src.manalimit.enums import BattleResult, GamePhase, Status, Team
from src.manalimit.event_log import (
    battle_result_from_events,
    permanent_stat_deltas_from_events,
    permanent_status_deltas_from_events,
    shop_mana_delta_from_events,
)
from src.manalimit.game_flow import apply_battle_deltas, finish_battle, start_round
from src.manalimit.opponents import build_combat_units, build_opponent_units, create_unit_from_pool
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import CombatEvent
from src.manalimit.schema.combat_unit import CombatUnit, UnitView
from src.manalimit.schema.game_state import GameState
from src.manalimit.serialization import encode_events, encode_events_bounded

logger = logging.getLogger(__name__)


class SandboxResult(BaseModel):
    events: list[CombatEvent] = Field(default_factory=list)
    initial_player_units: list[UnitView] = Field(default_factory=list)
    initial_enemy_units: list[UnitView] = Field(default_factory=list)


class LedgerBattleOutcome(BaseModel):
    result: BattleResult
    phase: GamePhase
    encoded_events: bytes  # bounded encoding
    stat_deltas: dict[int, tuple[int, int]] = Field(default_factory=dict)
    status_deltas: dict[int, tuple[Status, Status]] = Field(default_factory=dict)
    mana_delta: int = 0


class SandboxHost:
    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def run_battle(self, player_card_ids: list[int], enemy_card_ids: list[int], seed: int, card_pool: dict[int, UnitCard]) -> SandboxResult:
        """Build both boards from card ids and resolve the battle (raises TemplateNotFound for unknown ids)"""
        player_units = [create_unit_from_pool(card_pool, card_id, Team.PLAYER) for card_id in player_card_ids]
        enemy_units = build_opponent_units(enemy_card_ids, card_pool)

        engine = BattleEngine(self.config)
        engine.initialize_battle(player_units, enemy_units, seed, card_pool)
        initial_player = engine.battle_state.board_views(Team.PLAYER)
        initial_enemy = engine.battle_state.board_views(Team.ENEMY)
        events = engine.run()
        return SandboxResult(events=events, initial_player_units=initial_player, initial_enemy_units=initial_enemy)

    def encode(self, result: SandboxResult) -> bytes:
        return encode_events(result.events)


class LedgerHost:
    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def run_battle(self, state: GameState, enemy_units: list[CombatUnit], seed: int) -> LedgerBattleOutcome:
        """
        Resolve the player's board against an opponent and persist the outcome

        Only the permanent portion of the battle is written to `state`: stat
        and status deltas, the round result, and battle-earned mana carried
        into the next shop phase.
        """
        player_units = build_combat_units(state.board, state.card_pool, Team.PLAYER)
        events = resolve_battle(player_units, enemy_units, seed, state.card_pool, self.config)
        result = battle_result_from_events(events)

        apply_battle_deltas(state, events)
        mana_delta = shop_mana_delta_from_events(events, Team.PLAYER)
        phase = finish_battle(state, result)
        if phase == GamePhase.SHOP:
            start_round(state)
            state.shop_mana = min(max(state.shop_mana + mana_delta, 0), state.mana_limit)

        return LedgerBattleOutcome(
            result=result,
            phase=phase,
            encoded_events=encode_events_bounded(events, self.config),
            stat_deltas=permanent_stat_deltas_from_events(events, Team.PLAYER),
            status_deltas=permanent_status_deltas_from_events(events, Team.PLAYER),
            mana_delta=mana_delta,
        )
