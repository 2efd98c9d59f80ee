from src.manalimit.constants import I32_MAX, I32_MIN


def clamp_i32(value: int) -> int:
    if value > I32_MAX:
        return I32_MAX
    if value < I32_MIN:
        return I32_MIN
    return value


def saturating_add(a: int, b: int) -> int:
    """i32 addition clamped at the type bounds instead of wrapping"""
    return clamp_i32(a + b)


def saturating_sub(a: int, b: int) -> int:
    return clamp_i32(a - b)
