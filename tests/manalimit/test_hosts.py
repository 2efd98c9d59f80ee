import pytest

from src.manalimit.enums import AbilityTrigger, BattleResult, GamePhase, Status
from src.manalimit.errors import TemplateNotFound
from src.manalimit.hosts import LedgerHost, SandboxHost
from src.manalimit.opponents import build_opponent_units
from src.manalimit.schema.ability import Ability, GainManaEffect, GrantStatusPermanentEffect, ModifyStatsPermanentEffect, SelfUnitTarget
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import BattleEndEvent
from src.manalimit.schema.combat_unit import player_unit_id
from src.manalimit.schema.game_state import BoardUnit, GameState
from src.manalimit.serialization import decode_events


def make_pool() -> dict[int, UnitCard]:
    grower = UnitCard(
        id=1,
        name="Grower",
        attack=5,
        health=5,
        abilities=[
            Ability(trigger=AbilityTrigger.ON_START, effect=ModifyStatsPermanentEffect(attack=1, health=1, target=SelfUnitTarget()), name="Grow"),
            Ability(trigger=AbilityTrigger.ON_START, effect=GrantStatusPermanentEffect(status=Status.SHIELD, target=SelfUnitTarget()), name="Harden"),
        ],
    )
    miser = UnitCard(
        id=2,
        name="Miser",
        attack=1,
        health=1,
        abilities=[Ability(trigger=AbilityTrigger.ON_FAINT, effect=GainManaEffect(amount=2), name="Savings")],
    )
    grunt = UnitCard(id=3, name="Grunt", attack=1, health=1)
    return {card.id: card for card in (grower, miser, grunt)}


def test_sandbox_battle():
    result = SandboxHost().run_battle([1], [3, 3], 5, make_pool())
    assert result.events[-1] == BattleEndEvent(result=BattleResult.VICTORY)
    assert [view.name for view in result.initial_player_units] == ["Grower"]
    assert len(result.initial_enemy_units) == 2
    assert decode_events(SandboxHost().encode(result)) == result.events


def test_sandbox_unknown_card():
    with pytest.raises(TemplateNotFound):
        SandboxHost().run_battle([1], [404], 5, make_pool())


def test_ledger_persists_permanent_deltas():
    pool = make_pool()
    state = GameState(game_seed=3, card_pool=pool)
    state.board[2] = BoardUnit(card_id=1)

    outcome = LedgerHost().run_battle(state, build_opponent_units([3], pool), seed=11)

    assert outcome.result == BattleResult.VICTORY
    assert outcome.phase == GamePhase.SHOP
    assert outcome.stat_deltas == {player_unit_id(1): (1, 1)}
    assert state.board[2] == BoardUnit(card_id=1, perm_attack=1, perm_health=1, perm_statuses=Status.SHIELD)
    assert state.wins == 1
    assert state.round == 2
    assert state.mana_limit == 4
    assert decode_events(outcome.encoded_events)[-1] == BattleEndEvent(result=BattleResult.VICTORY)


def test_ledger_carries_battle_mana_into_shop():
    pool = make_pool()
    state = GameState(card_pool=pool)
    state.board[0] = BoardUnit(card_id=2)

    outcome = LedgerHost().run_battle(state, build_opponent_units([1], pool), seed=1)

    assert outcome.result == BattleResult.DEFEAT
    assert outcome.mana_delta == 2
    assert state.lives == 2
    assert state.shop_mana == 2
    # Dead units keep their slot; only permanent effects change the board
    assert state.board[0] == BoardUnit(card_id=2)
