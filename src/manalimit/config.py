from pydantic import BaseModel, ConfigDict, Field

from src.manalimit.constants import (
    BOARD_SIZE,
    MAX_BATTLE_ROUNDS,
    MAX_BOUNDED_COLLECTION,
    MAX_BOUNDED_EVENTS,
    MAX_NAME_LENGTH,
    MAX_RECURSION_DEPTH,
    MAX_SPAWNS_PER_BATTLE,
    MAX_TRIGGER_DEPTH,
    MAX_TRIGGERS_PER_PHASE,
)


class EngineConfig(BaseModel):
    """Tunable ceilings for one battle / encoding host.

    Two hosts only produce identical logs when they share the same config.
    """

    model_config = ConfigDict(frozen=True)

    # Execution limits
    max_recursion_depth: int = Field(default=MAX_RECURSION_DEPTH, ge=1, le=10_000)
    max_spawns_per_battle: int = Field(default=MAX_SPAWNS_PER_BATTLE, ge=0, le=10_000)
    max_triggers_per_phase: int = Field(default=MAX_TRIGGERS_PER_PHASE, ge=1, le=100_000)
    max_trigger_depth: int = Field(default=MAX_TRIGGER_DEPTH, ge=1, le=1_000)
    max_battle_rounds: int = Field(default=MAX_BATTLE_ROUNDS, ge=1, le=100_000)

    # Board
    board_size: int = Field(default=BOARD_SIZE, ge=1, le=32)

    # Bounded encoding capacities
    bounded_max_events: int = Field(default=MAX_BOUNDED_EVENTS, ge=0)
    bounded_max_name_length: int = Field(default=MAX_NAME_LENGTH, ge=0)
    bounded_max_collection: int = Field(default=MAX_BOUNDED_COLLECTION, ge=0)


DEFAULT_CONFIG = EngineConfig()
