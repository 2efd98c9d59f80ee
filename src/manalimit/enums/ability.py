from enum import IntEnum


class AbilityTrigger(IntEnum):
    """Points in the battle state machine (and the shop phase) at which abilities fire"""

    ON_START = 0
    ON_FAINT = 1
    ON_ALLY_FAINT = 2
    ON_HURT = 3
    ON_SPAWN = 4
    ON_ALLY_SPAWN = 5
    ON_ENEMY_SPAWN = 6
    BEFORE_UNIT_ATTACK = 7  # front unit only
    AFTER_UNIT_ATTACK = 8  # front unit only
    BEFORE_ANY_ATTACK = 9
    AFTER_ANY_ATTACK = 10

    # Shop phase - never collected during a battle
    ON_BUY = 11
    ON_SELL = 12
    ON_SHOP_START = 13

    def is_unit_scoped(self) -> bool:
        """Unit-scoped attack triggers only fire for the unit at the front of its board"""
        return self in (AbilityTrigger.BEFORE_UNIT_ATTACK, AbilityTrigger.AFTER_UNIT_ATTACK)

    def is_shop(self) -> bool:
        return self in (AbilityTrigger.ON_BUY, AbilityTrigger.ON_SELL, AbilityTrigger.ON_SHOP_START)


class TargetScope(IntEnum):
    """Unit selections relative to the source unit's side"""

    SELF_UNIT = 0
    ALLIES = 1
    ENEMIES = 2
    ALL = 3
    ALLIES_OTHER = 4
    TRIGGER_SOURCE = 5  # unit that caused a reaction trigger
    AGGRESSOR = 6  # same lookup as TRIGGER_SOURCE, named for OnHurt abilities


class StatType(IntEnum):
    HEALTH = 0
    ATTACK = 1
    MANA = 2  # play cost


class SortOrder(IntEnum):
    ASCENDING = 0
    DESCENDING = 1


class CompareOp(IntEnum):
    GREATER_THAN = 0
    LESS_THAN = 1
    EQUAL = 2
    GREATER_THAN_OR_EQUAL = 3
    LESS_THAN_OR_EQUAL = 4

    def compare(self, left: int, right: int) -> bool:
        if self == CompareOp.GREATER_THAN:
            return left > right
        if self == CompareOp.LESS_THAN:
            return left < right
        if self == CompareOp.EQUAL:
            return left == right
        if self == CompareOp.GREATER_THAN_OR_EQUAL:
            return left >= right
        return left <= right
