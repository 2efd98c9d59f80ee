from src.manalimit.enums import Team
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.combat_event import AbilityGainManaEvent


def gain_mana(state: BattleState, source_id: int, team: Team, amount: int) -> None:
    """Mana has no meaning inside a battle; the event is summed by the shop-mana reducer"""
    if amount == 0:
        return
    state.emit(AbilityGainManaEvent(source_instance_id=source_id, team=team, amount=amount))
