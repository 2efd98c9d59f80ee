import logging
from typing import Optional

from src.manalimit.battle_limits import BattleLimits, LimitBreach
from src.manalimit.config import DEFAULT_CONFIG, EngineConfig
from src.manalimit.enums import AbilityTrigger, BattlePhase, BattleResult, Status, Team
from src.manalimit.schema.battle_state import BattleState
from src.manalimit.schema.card import UnitCard
from src.manalimit.schema.combat_event import (
    BattleEndEvent,
    ClashEvent,
    CombatEvent,
    DamageTakenEvent,
    LimitExceededEvent,
    PhaseEndEvent,
    PhaseStartEvent,
)
from src.manalimit.schema.combat_unit import CombatUnit
from src.manalimit.triggers import collect_phase_triggers, resolve_hurt_and_faint, resolve_trigger_queue
from src.manalimit.utils import rng
from src.manalimit.utils.saturating import saturating_sub

logger = logging.getLogger(__name__)


class BattleEngine:
    """
    Deterministic battle resolver

    Flow:
    1. Start phase: OnStart triggers
    2. Clash loop while both boards have units:
       - BeforeAttack: BeforeUnitAttack (front units) + BeforeAnyAttack, one priority queue
       - Attack: simultaneous front-line hit, then hurt/faint reactions
       - AfterAttack: AfterUnitAttack (surviving clashers) + AfterAnyAttack
    3. End: BattleEnd (preceded by LimitExceeded if a ceiling was breached)

    The returned event log is the only output; identical inputs give identical logs.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.battle_state = BattleState(config=self.config)

    def initialize_battle(self, player_units: list[CombatUnit], enemy_units: list[CombatUnit], seed: int, card_pool: Optional[dict[int, UnitCard]] = None) -> None:
        """
        Prepare a fresh battle

        Args:
            player_units: Player board, index 0 fights first. Copied, never mutated.
            enemy_units: Enemy board, index 0 fights first. Copied, never mutated.
            seed: 64-bit seed, the only source of randomness
            card_pool: Card lookup for spawn effects
        """
        limits = BattleLimits(config=self.config)
        self.battle_state = BattleState(
            player_units=self._prepare_board(player_units, Team.PLAYER, limits),
            enemy_units=self._prepare_board(enemy_units, Team.ENEMY, limits),
            rng=rng.seed_from_u64(seed),
            limits=limits,
            card_pool=dict(card_pool or {}),
            config=self.config,
        )

    def run(self) -> list[CombatEvent]:
        """Run the initialized battle to completion and return its event log"""
        state = self.battle_state
        logger.info("Battle started: %d player units vs %d enemy units", len(state.player_units), len(state.enemy_units))

        try:
            self._start_phase()
            while not state.is_over():
                state.limits.record_round()
                # Front units at the start of the iteration are the ones eligible for unit-scoped triggers
                front_ids = {board[0].instance_id for board in (state.player_units, state.enemy_units) if board}
                self._before_attack_phase(front_ids)
                clashers = self._attack_phase()
                self._after_attack_phase(clashers)
        except LimitBreach as breach:
            state.emit(LimitExceededEvent(losing_team=breach.losing_team, reason=breach.reason))
            result = BattleResult.DRAW
        else:
            result = self.battle_result()

        state.emit(BattleEndEvent(result=result))
        logger.info("Battle ended: %s after %d rounds, %d events", result.name, state.limits.rounds, len(state.events))
        return state.events

    def is_battle_over(self) -> bool:
        return self.battle_state.is_over()

    def battle_result(self) -> BattleResult:
        state = self.battle_state
        if not state.player_units and not state.enemy_units:
            return BattleResult.DRAW
        if not state.enemy_units:
            return BattleResult.VICTORY
        if not state.player_units:
            return BattleResult.DEFEAT
        return BattleResult.DRAW

    # =========================================================================
    # PHASES
    # =========================================================================

    def _begin_phase(self, phase: BattlePhase) -> None:
        self.battle_state.limits.reset_phase_counters()
        self.battle_state.emit(PhaseStartEvent(phase=phase))

    def _end_phase(self, phase: BattlePhase) -> None:
        self.battle_state.emit(PhaseEndEvent(phase=phase))

    def _start_phase(self) -> None:
        self._begin_phase(BattlePhase.START)
        resolve_trigger_queue(self.battle_state, collect_phase_triggers(self.battle_state, [AbilityTrigger.ON_START]))
        self._end_phase(BattlePhase.START)

    def _before_attack_phase(self, front_ids: set[int]) -> None:
        self._begin_phase(BattlePhase.BEFORE_ATTACK)
        kinds = [AbilityTrigger.BEFORE_UNIT_ATTACK, AbilityTrigger.BEFORE_ANY_ATTACK]
        resolve_trigger_queue(self.battle_state, collect_phase_triggers(self.battle_state, kinds, front_ids))
        self._end_phase(BattlePhase.BEFORE_ATTACK)

    def _attack_phase(self) -> set[int]:
        """Clash the two front units. Returns the ids of the units that clashed."""
        self._begin_phase(BattlePhase.ATTACK)
        state = self.battle_state
        clashers: set[int] = set()

        if state.player_units and state.enemy_units:
            player = state.player_units[0]
            enemy = state.enemy_units[0]
            clashers = {player.instance_id, enemy.instance_id}
            p_dmg = player.effective_attack()
            e_dmg = enemy.effective_attack()
            state.emit(ClashEvent(p_dmg=p_dmg, e_dmg=e_dmg))

            # Both hits land before either unit is removed
            self._apply_clash_hit(enemy, p_dmg, poisoned=player.has_status(Status.POISON))
            self._apply_clash_hit(player, e_dmg, poisoned=enemy.has_status(Status.POISON))

            state.emit(DamageTakenEvent(target_instance_id=player.instance_id, team=Team.PLAYER, remaining_hp=player.effective_health()))
            state.emit(DamageTakenEvent(target_instance_id=enemy.instance_id, team=Team.ENEMY, remaining_hp=enemy.effective_health()))

            hurt: list[tuple[int, Optional[int]]] = []
            if e_dmg > 0:
                hurt.append((player.instance_id, enemy.instance_id))
            if p_dmg > 0:
                hurt.append((enemy.instance_id, player.instance_id))
            resolve_hurt_and_faint(state, hurt)

        self._end_phase(BattlePhase.ATTACK)
        return clashers

    def _after_attack_phase(self, clashers: set[int]) -> None:
        self._begin_phase(BattlePhase.AFTER_ATTACK)
        kinds = [AbilityTrigger.AFTER_UNIT_ATTACK, AbilityTrigger.AFTER_ANY_ATTACK]
        resolve_trigger_queue(self.battle_state, collect_phase_triggers(self.battle_state, kinds, clashers))
        self._end_phase(BattlePhase.AFTER_ATTACK)

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    @staticmethod
    def _apply_clash_hit(target: CombatUnit, damage: int, poisoned: bool) -> None:
        if damage <= 0:
            return
        if poisoned:
            target.health = 0
        else:
            target.health = saturating_sub(target.health, damage)

    def _prepare_board(self, units: list[CombatUnit], team: Team, limits: BattleLimits) -> list[CombatUnit]:
        """Copy the caller's units and assign battle-unique instance ids in board order"""
        if len(units) > self.config.board_size:
            logger.warning("%s board has %d units, keeping the first %d", team.name, len(units), self.config.board_size)
        prepared = []
        for unit in units[: self.config.board_size]:
            copy = unit.model_copy(deep=True)
            copy.team = team
            copy.instance_id = limits.generate_instance_id(team)
            copy.ability_trigger_counts = [0] * len(copy.abilities)
            prepared.append(copy)
        return prepared


def resolve_battle(
    player_units: list[CombatUnit],
    enemy_units: list[CombatUnit],
    rng_seed: int,
    card_pool: Optional[dict[int, UnitCard]] = None,
    config: Optional[EngineConfig] = None,
) -> list[CombatEvent]:
    """Resolve one battle and return its complete, ordered event log"""
    engine = BattleEngine(config)
    engine.initialize_battle(player_units, enemy_units, rng_seed, card_pool)
    return engine.run()
