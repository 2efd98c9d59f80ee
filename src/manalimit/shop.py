"""Shop-phase ability resolution.

Shop abilities run through the battle trigger pipeline over a one-sided
battle state built from the persistent board. Only permanent effects
survive: they are folded back into the board through the event reducers.
"""

import logging
from typing import Optional

from src.manalimit.battle_limits import BattleLimits, LimitBreach
from src.manalimit.constants import SHOP_ROUND_MULTIPLIER, U64_MASK
from src.manalimit.enums import AbilityTrigger, Team
from src.manalimit.errors import TemplateNotFound
from src.manalimit.event_log import permanent_stat_deltas_from_events, permanent_status_deltas_from_events, shop_mana_delta_from_events
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.schema.game_state import BoardUnit, GameState
from src.manalimit.triggers import PendingTrigger, collect_phase_triggers, resolve_trigger_queue, unit_triggers
from src.manalimit.utils import rng
from src.manalimit.utils.saturating import saturating_add
from src.manalimit.utils.unit_factory import create_combat_unit

logger = logging.getLogger(__name__)


def shop_seed(game_seed: int, round_number: int, salt: int) -> int:
    """Per-round, per-purpose 64-bit seed for shop-phase randomness"""
    return (game_seed ^ ((round_number * SHOP_ROUND_MULTIPLIER) & U64_MASK) ^ salt) & U64_MASK


def _shop_unit(state: GameState, board_unit: BoardUnit, instance_id: int) -> CombatUnit:
    card = state.get_card(board_unit.card_id)
    if card is None:
        raise TemplateNotFound(board_unit.card_id)
    unit = create_combat_unit(
        card,
        Team.PLAYER,
        instance_id=instance_id,
        perm_attack=board_unit.perm_attack,
        perm_health=board_unit.perm_health,
        perm_statuses=board_unit.perm_statuses,
    )
    unit.abilities = [ability.as_ability() for ability in card.shop_abilities]
    unit.ability_trigger_counts = [0] * len(unit.abilities)
    return unit


def run_shop_triggers(
    state: GameState,
    kind: AbilityTrigger,
    seed: int,
    slot: Optional[int] = None,
    sold: Optional[BoardUnit] = None,
    sold_position: int = 0,
) -> int:
    """Fire shop abilities and write their permanent effects back to `state.board`.

    kind ON_SHOP_START fires for every boarded unit, ON_BUY for the unit in
    `slot`, ON_SELL for the `sold` unit (already off the board) as if it had
    just died at `sold_position`. Returns the mana gained.
    """
    limits = BattleLimits()
    battle = BattleState(rng=rng.seed_from_u64(seed), limits=limits, card_pool=state.card_pool)
    board_units: dict[int, BoardUnit] = {}
    slot_ids: dict[int, int] = {}
    for board_slot, board_unit in enumerate(state.board):
        if board_unit is None:
            continue
        unit = _shop_unit(state, board_unit, limits.generate_instance_id(Team.PLAYER))
        battle.player_units.append(unit)
        board_units[unit.instance_id] = board_unit
        slot_ids[board_slot] = unit.instance_id

    queue: list[PendingTrigger] = []
    if kind == AbilityTrigger.ON_SHOP_START:
        queue = collect_phase_triggers(battle, [kind])
    elif kind == AbilityTrigger.ON_BUY and slot in slot_ids:
        unit = battle.find_unit(slot_ids[slot])
        queue = unit_triggers(unit, Team.PLAYER, battle.position_of(unit.instance_id), [kind])
    elif kind == AbilityTrigger.ON_SELL and sold is not None:
        unit = _shop_unit(state, sold, limits.generate_instance_id(Team.PLAYER))
        queue = unit_triggers(unit, Team.PLAYER, sold_position, [kind], is_from_dead=True)

    if not queue:
        return 0

    try:
        resolve_trigger_queue(battle, queue)
    except LimitBreach as breach:
        logger.warning("Shop %s abilities stopped early: %s", kind.name, breach)

    _write_back(state, battle, board_units, slot_ids)
    return shop_mana_delta_from_events(battle.events)


def _write_back(state: GameState, battle: BattleState, board_units: dict[int, BoardUnit], slot_ids: dict[int, int]) -> None:
    """Fold the shop battle's outcome into the slotted board"""
    surviving = {unit.instance_id for unit in battle.player_units}

    # Destroyed or killed units leave their slot
    for board_slot, instance_id in slot_ids.items():
        if instance_id not in surviving:
            state.board[board_slot] = None

    # Spawned units take the first empty slot, in board order
    for unit in battle.player_units:
        if unit.instance_id in board_units:
            continue
        empty = state.first_empty_slot()
        if empty is None:
            logger.warning("Shop spawn of card %d dropped: board is full", unit.card_id)
            continue
        spawned = BoardUnit(card_id=unit.card_id)
        state.board[empty] = spawned
        board_units[unit.instance_id] = spawned

    for instance_id, (attack, health) in permanent_stat_deltas_from_events(battle.events).items():
        board_unit = board_units.get(instance_id)
        if board_unit is None or instance_id not in surviving:
            continue
        board_unit.perm_attack = saturating_add(board_unit.perm_attack, attack)
        board_unit.perm_health = saturating_add(board_unit.perm_health, health)

    for instance_id, (grant, remove) in permanent_status_deltas_from_events(battle.events).items():
        board_unit = board_units.get(instance_id)
        if board_unit is None or instance_id not in surviving:
            continue
        board_unit.perm_statuses = board_unit.perm_statuses.with_(grant).without(remove)
