import logging
from typing import Optional

from pydantic import BaseModel, Field

from src.manalimit.config import DEFAULT_CONFIG, EngineConfig
from src.manalimit.enums import LimitKind, Team
from src.manalimit.schema.combat_event import LimitReason
from src.manalimit.schema.combat_unit import unit_id_for

logger = logging.getLogger(__name__)


class LimitBreach(Exception):
    """Raised at the boundary that breached a ceiling; unwinds to the battle state machine"""

    def __init__(self, losing_team: Optional[Team], reason: LimitReason):
        self.losing_team = losing_team
        self.reason = reason
        super().__init__(f"{reason.kind.name} ({reason.current}/{reason.max}) caused by {losing_team.name if losing_team is not None else 'neither team'}")


class BattleLimits(BaseModel):
    """Per-battle execution counters and unit-id allocator.

    Created fresh for every battle and passed explicitly through the pipeline;
    never shared between battles.
    """

    config: EngineConfig = DEFAULT_CONFIG

    recursion_depth: int = Field(default=0, ge=0)
    total_spawns: int = Field(default=0, ge=0)
    phase_triggers: int = Field(default=0, ge=0)
    trigger_depth: int = Field(default=0, ge=0)
    rounds: int = Field(default=0, ge=0)

    current_executing_team: Optional[Team] = None

    # Latched on the first breach and never overwritten
    exceeded_by: Optional[Team] = None
    exceeded_reason: Optional[LimitReason] = None

    # Per-team ordinals for instance ids, 1-based
    next_player_ordinal: int = Field(default=1, ge=1)
    next_enemy_ordinal: int = Field(default=1, ge=1)

    # =========================================================================
    # BREACH HANDLING
    # =========================================================================

    def is_exceeded(self) -> bool:
        return self.exceeded_reason is not None

    def _breach(self, team: Optional[Team], kind: LimitKind, current: int, maximum: int) -> None:
        if self.exceeded_reason is None:
            self.exceeded_by = team
            self.exceeded_reason = LimitReason(kind=kind, current=current, max=maximum)
            logger.warning("Battle limit breached: %s %d/%d (team=%s)", kind.name, current, maximum, team.name if team is not None else None)
        raise LimitBreach(self.exceeded_by, self.exceeded_reason)

    # =========================================================================
    # COUNTERS
    # =========================================================================

    def enter_recursion(self, team: Team) -> None:
        self.current_executing_team = team
        self.recursion_depth += 1
        if self.recursion_depth > self.config.max_recursion_depth:
            self._breach(team, LimitKind.RECURSION_LIMIT, self.recursion_depth, self.config.max_recursion_depth)

    def exit_recursion(self) -> None:
        self.recursion_depth = max(0, self.recursion_depth - 1)

    def record_spawn(self, team: Team) -> None:
        self.total_spawns += 1
        if self.total_spawns > self.config.max_spawns_per_battle:
            self._breach(team, LimitKind.SPAWN_LIMIT, self.total_spawns, self.config.max_spawns_per_battle)

    def record_trigger(self, team: Team) -> None:
        self.phase_triggers += 1
        if self.phase_triggers > self.config.max_triggers_per_phase:
            self._breach(team, LimitKind.TRIGGER_LIMIT, self.phase_triggers, self.config.max_triggers_per_phase)

    def enter_trigger_depth(self, team: Team) -> None:
        self.trigger_depth += 1
        if self.trigger_depth > self.config.max_trigger_depth:
            self._breach(team, LimitKind.TRIGGER_DEPTH_LIMIT, self.trigger_depth, self.config.max_trigger_depth)

    def exit_trigger_depth(self) -> None:
        self.trigger_depth = max(0, self.trigger_depth - 1)

    def record_round(self) -> None:
        """Count one clash iteration. The round limit is nobody's fault, so no losing team."""
        self.rounds += 1
        if self.rounds > self.config.max_battle_rounds:
            self._breach(None, LimitKind.ROUND_LIMIT, self.rounds, self.config.max_battle_rounds)

    def reset_phase_counters(self) -> None:
        self.phase_triggers = 0
        self.trigger_depth = 0

    # =========================================================================
    # INSTANCE IDS
    # =========================================================================

    def generate_instance_id(self, team: Team) -> int:
        if team == Team.PLAYER:
            ordinal = self.next_player_ordinal
            self.next_player_ordinal += 1
        else:
            ordinal = self.next_enemy_ordinal
            self.next_enemy_ordinal += 1
        return unit_id_for(team, ordinal)
