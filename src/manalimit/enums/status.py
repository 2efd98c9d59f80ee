from enum import IntFlag


class Status(IntFlag):
    """Per-unit status bits - stored as a u8 mask on board and combat units"""

    NONE = 0
    SHIELD = 1 << 0  # negates the next positive damage hit
    POISON = 1 << 1  # any positive clash hit from this unit is lethal
    GUARD = 1 << 2  # enemy Random targeting prefers guard bearers

    # =========================================================================
    # MASK HELPERS
    # =========================================================================

    def has(self, status: "Status") -> bool:
        return bool(self & status)

    def with_(self, status: "Status") -> "Status":
        return Status(self | status)

    def without(self, status: "Status") -> "Status":
        return Status(self & ~status)

    @classmethod
    def all_bits(cls) -> "Status":
        return cls.SHIELD | cls.POISON | cls.GUARD
