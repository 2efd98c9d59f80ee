"""JSON encodings for event logs and game state.

The unbounded encoding is a plain pydantic dump. The bounded encoding is for
hosts with storage ceilings: collections and names are cut to the configured
capacity. Truncation is never an error.
"""

import logging
from typing import Optional

from pydantic import TypeAdapter

from src.manalimit.config import DEFAULT_CONFIG, EngineConfig
from src.manalimit.schema.combat_event import AbilityTriggerEvent, CombatEvent, UnitDeathEvent, UnitSpawnEvent
from src.manalimit.schema.combat_unit import UnitView
from src.manalimit.schema.game_state import GameState

logger = logging.getLogger(__name__)

_EVENT_LOG = TypeAdapter(list[CombatEvent])


# =============================================================================
# UNBOUNDED
# =============================================================================


def encode_events(events: list[CombatEvent]) -> bytes:
    return _EVENT_LOG.dump_json(events)


def decode_events(data: bytes | str) -> list[CombatEvent]:
    return _EVENT_LOG.validate_json(data)


def encode_game_state(state: GameState) -> bytes:
    return state.model_dump_json().encode()


def decode_game_state(data: bytes | str) -> GameState:
    return GameState.model_validate_json(data)


# =============================================================================
# BOUNDED
# =============================================================================


def _truncate(items: list, capacity: int, what: str) -> list:
    if len(items) > capacity:
        logger.warning("Bounded encoding truncated %s from %d to %d entries", what, len(items), capacity)
        return items[:capacity]
    return items


def _bound_view(view: UnitView, config: EngineConfig) -> UnitView:
    return view.model_copy(update={"name": view.name[: config.bounded_max_name_length]})


def _bound_views(views: list[UnitView], config: EngineConfig) -> list[UnitView]:
    return [_bound_view(view, config) for view in _truncate(views, config.bounded_max_collection, "board views")]


def bound_event(event: CombatEvent, config: EngineConfig = DEFAULT_CONFIG) -> CombatEvent:
    if isinstance(event, UnitDeathEvent):
        return event.model_copy(update={"new_board_state": _bound_views(event.new_board_state, config)})
    if isinstance(event, UnitSpawnEvent):
        return event.model_copy(
            update={
                "spawned_unit": _bound_view(event.spawned_unit, config),
                "new_board_state": _bound_views(event.new_board_state, config),
            }
        )
    if isinstance(event, AbilityTriggerEvent):
        return event.model_copy(update={"ability_name": event.ability_name[: config.bounded_max_name_length]})
    return event


def bound_events(events: list[CombatEvent], config: EngineConfig = DEFAULT_CONFIG) -> list[CombatEvent]:
    return [bound_event(event, config) for event in _truncate(events, config.bounded_max_events, "event log")]


def bound_game_state(state: GameState, config: EngineConfig = DEFAULT_CONFIG) -> GameState:
    bounded = state.model_copy(deep=True)
    bounded.hand = _truncate(bounded.hand, config.bounded_max_collection, "hand")
    bounded.bag = _truncate(bounded.bag, config.bounded_max_collection, "bag")
    bounded.board = _truncate(bounded.board, config.board_size, "board")
    for card in bounded.card_pool.values():
        card.name = card.name[: config.bounded_max_name_length]
        for ability in card.abilities:
            ability.name = ability.name[: config.bounded_max_name_length]
        for ability in card.shop_abilities:
            ability.name = ability.name[: config.bounded_max_name_length]
    return bounded


def encode_events_bounded(events: list[CombatEvent], config: Optional[EngineConfig] = None) -> bytes:
    return encode_events(bound_events(events, config or DEFAULT_CONFIG))


def encode_game_state_bounded(state: GameState, config: Optional[EngineConfig] = None) -> bytes:
    return encode_game_state(bound_game_state(state, config or DEFAULT_CONFIG))
