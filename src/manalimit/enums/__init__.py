from src.manalimit.enums.ability import AbilityTrigger, TargetScope, StatType, SortOrder, CompareOp
from src.manalimit.enums.status import Status
from src.manalimit.enums.other import Team, BattlePhase, BattleResult, LimitKind, GamePhase
