from src.manalimit.enums import Status, Team
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.utils.saturating import saturating_add


def create_combat_unit(
    card: UnitCard,
    team: Team,
    instance_id: int = 0,
    perm_attack: int = 0,
    perm_health: int = 0,
    perm_statuses: Status = Status.NONE,
) -> CombatUnit:
    """Build a battle instance of a card with permanent modifiers folded into its base stats.

    instance_id defaults to 0; resolve_battle assigns the real ids.
    """
    return CombatUnit(
        instance_id=instance_id,
        team=team,
        card_id=card.id,
        name=card.name,
        attack=saturating_add(card.attack, perm_attack),
        health=saturating_add(card.health, perm_health),
        play_cost=card.play_cost,
        abilities=[ability.model_copy(deep=True) for ability in card.abilities],
        ability_trigger_counts=[0] * len(card.abilities),
        statuses=Status(card.base_statuses | perm_statuses),
        is_token=card.is_token,
    )
