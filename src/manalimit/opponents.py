from typing import Optional

from src.manalimit.errors import TemplateNotFound
from src.manalimit.enums import Team
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.schema.game_state import BoardUnit
from src.manalimit.utils.unit_factory import create_combat_unit


def create_unit_from_pool(card_pool: dict[int, UnitCard], card_id: int, team: Team = Team.ENEMY) -> CombatUnit:
    card = card_pool.get(card_id)
    if card is None:
        raise TemplateNotFound(card_id)
    return create_combat_unit(card, team)


def build_opponent_units(card_ids: list[int], card_pool: dict[int, UnitCard]) -> list[CombatUnit]:
    """Enemy roster from plain card ids, front first"""
    return [create_unit_from_pool(card_pool, card_id, Team.ENEMY) for card_id in card_ids]


def build_combat_units(board: list[Optional[BoardUnit]], card_pool: dict[int, UnitCard], team: Team = Team.PLAYER) -> list[CombatUnit]:
    """Compact a slotted board into combat units with permanent modifiers applied.

    Empty slots are skipped, so the n-th unit gets instance ordinal n+1 in battle.
    """
    units = []
    for board_unit in board:
        if board_unit is None:
            continue
        card = card_pool.get(board_unit.card_id)
        if card is None:
            raise TemplateNotFound(board_unit.card_id)
        units.append(
            create_combat_unit(
                card,
                team,
                perm_attack=board_unit.perm_attack,
                perm_health=board_unit.perm_health,
                perm_statuses=board_unit.perm_statuses,
            )
        )
    return units
