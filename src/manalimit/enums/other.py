from enum import IntEnum


class Team(IntEnum):
    PLAYER = 0
    ENEMY = 1

    def opponent(self) -> "Team":
        return Team.ENEMY if self == Team.PLAYER else Team.PLAYER


class BattlePhase(IntEnum):
    START = 0
    BEFORE_ATTACK = 1
    ATTACK = 2
    AFTER_ATTACK = 3
    END = 4


class BattleResult(IntEnum):
    VICTORY = 0
    DEFEAT = 1
    DRAW = 2


class LimitKind(IntEnum):
    """Which execution ceiling was breached"""

    ROUND_LIMIT = 0
    RECURSION_LIMIT = 1
    SPAWN_LIMIT = 2
    TRIGGER_LIMIT = 3
    TRIGGER_DEPTH_LIMIT = 4


class GamePhase(IntEnum):
    SHOP = 0
    BATTLE = 1
    VICTORY = 2
    DEFEAT = 3
