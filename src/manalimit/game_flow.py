import logging

from src.manalimit.constants import HAND_SIZE, MAX_MANA_LIMIT, SHOP_START_SALT, STARTING_MANA_LIMIT, WINS_TO_VICTORY
from src.manalimit.enums import AbilityTrigger, BattleResult, GamePhase, Team
from src.manalimit.event_log import permanent_stat_deltas_from_events, permanent_status_deltas_from_events
from src.manalimit.schema.combat_event import CombatEvent
from src.manalimit.schema.combat_unit import player_unit_id
from src.manalimit.schema.game_state import GameState
from src.manalimit.shop import run_shop_triggers, shop_seed
from src.manalimit.utils import rng
from src.manalimit.utils.saturating import saturating_add

logger = logging.getLogger(__name__)


def calculate_mana_limit(round_number: int) -> int:
    return min(STARTING_MANA_LIMIT + round_number - 1, MAX_MANA_LIMIT)


def derive_hand_indices(game_seed: int, round_number: int, bag_len: int, hand_size: int = HAND_SIZE) -> list[int]:
    """Pick hand_size distinct bag indices with a partial Fisher-Yates seeded from (game_seed ^ round)"""
    generator = rng.seed_from_u64(game_seed ^ round_number)
    indices = list(range(bag_len))
    count = min(hand_size, bag_len)
    for i in range(count):
        j = i + rng.gen_range(generator, bag_len - i)
        indices[i], indices[j] = indices[j], indices[i]
    return indices[:count]


def draw_hand(state: GameState) -> None:
    """Return the current hand to the bag and draw a fresh one. Hand order follows bag order."""
    state.bag.extend(state.hand)
    state.hand = []
    drawn = []
    for index in sorted(derive_hand_indices(state.game_seed, state.round, len(state.bag)), reverse=True):
        drawn.append(state.bag.pop(index))
    drawn.reverse()
    state.hand = drawn


def apply_shop_start_triggers(state: GameState) -> None:
    gained = run_shop_triggers(state, AbilityTrigger.ON_SHOP_START, shop_seed(state.game_seed, state.round, SHOP_START_SALT))
    state.shop_mana = min(max(state.shop_mana + gained, 0), state.mana_limit)


def start_round(state: GameState) -> None:
    """Enter the shop phase of the current round"""
    state.phase = GamePhase.SHOP
    state.mana_limit = calculate_mana_limit(state.round)
    state.shop_mana = 0
    draw_hand(state)
    apply_shop_start_triggers(state)
    logger.info("Round %d: mana limit %d, hand %s", state.round, state.mana_limit, state.hand)


def apply_battle_deltas(state: GameState, events: list[CombatEvent]) -> None:
    """Persist permanent stat/status changes from a battle into the board.

    Player unit n of the battle is the n-th occupied slot, matching build_combat_units.
    Units spawned during the battle have no slot and are ignored.
    """
    stat_deltas = permanent_stat_deltas_from_events(events, Team.PLAYER)
    status_deltas = permanent_status_deltas_from_events(events, Team.PLAYER)
    occupied = [board_unit for board_unit in state.board if board_unit is not None]
    for ordinal, board_unit in enumerate(occupied, start=1):
        instance_id = player_unit_id(ordinal)
        if instance_id in stat_deltas:
            attack, health = stat_deltas[instance_id]
            board_unit.perm_attack = saturating_add(board_unit.perm_attack, attack)
            board_unit.perm_health = saturating_add(board_unit.perm_health, health)
        if instance_id in status_deltas:
            grant, remove = status_deltas[instance_id]
            board_unit.perm_statuses = board_unit.perm_statuses.with_(grant).without(remove)


def finish_battle(state: GameState, result: BattleResult) -> GamePhase:
    """Apply a round outcome and move to the next round (or end the run)"""
    if result == BattleResult.VICTORY:
        state.wins += 1
    elif result == BattleResult.DEFEAT:
        state.lives = max(0, state.lives - 1)

    if state.wins >= WINS_TO_VICTORY:
        state.phase = GamePhase.VICTORY
    elif state.lives == 0:
        state.phase = GamePhase.DEFEAT
    else:
        state.round += 1
        state.phase = GamePhase.SHOP
    logger.info("Battle result %s: wins=%d lives=%d phase=%s", result.name, state.wins, state.lives, state.phase.name)
    return state.phase
