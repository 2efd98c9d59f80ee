import logging

from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import UnitSpawnEvent
from src.manalimit.targeting import AbilityContext
from src.manalimit.utils.unit_factory import create_combat_unit

logger = logging.getLogger(__name__)


def spawn_unit(state: BattleState, ctx: AbilityContext, card_id: int) -> None:
    """Insert a fresh unit at the source's slot and fire the spawn triggers it causes.

    A full board or an unknown card id is a no-op; the spawn still counts
    against the per-battle spawn ceiling.
    """
    # Local import: triggers -> effect_applier -> spawning -> triggers
    from src.manalimit.triggers import collect_spawn_triggers, resolve_reactions

    team = ctx.team
    state.limits.record_spawn(team)

    board = state.board(team)
    if len(board) >= state.config.board_size:
        logger.warning("Spawn of card %d skipped: %s board is full", card_id, team.name)
        return

    card = state.card_pool.get(card_id)
    if card is None:
        logger.warning("Spawn of card %d skipped: not in card pool", card_id)
        return

    unit = create_combat_unit(card, team, instance_id=state.limits.generate_instance_id(team))
    insert_at = min(max(ctx.position, 0), len(board))
    board.insert(insert_at, unit)

    state.emit(UnitSpawnEvent(team=team, spawned_unit=unit.view(), new_board_state=state.board_views(team)))

    resolve_reactions(state, team, collect_spawn_triggers(state, unit))
