from typing import MutableSequence, TypeVar

from pydantic import BaseModel, Field

from src.manalimit.constants import U32_MAX, U64_MASK

T = TypeVar("T")


class XorShiftRng(BaseModel):
    """32-bit xorshift generator state. Never zero once seeded."""

    state: int = Field(default=1, ge=1, le=U32_MAX)  # u32


def seed_from_u64(seed: int) -> XorShiftRng:
    """Fold a 64-bit seed into the 32-bit state (low ^ high), substituting 1 for 0."""
    seed &= U64_MASK
    folded = (seed & U32_MAX) ^ (seed >> 32)
    return XorShiftRng(state=max(folded, 1))


def seed_from_u32(seed: int) -> XorShiftRng:
    return XorShiftRng(state=max(seed & U32_MAX, 1))


def next_u32(rng: XorShiftRng) -> int:
    """Advance the generator and return the new 32-bit state.

    x ^= x << 13; x ^= x >> 17; x ^= x << 5 (all mod 2^32)
    """
    x = rng.state
    x ^= (x << 13) & U32_MAX
    x ^= x >> 17
    x ^= (x << 5) & U32_MAX
    rng.state = x
    return x


def gen_range(rng: XorShiftRng, max_value: int) -> int:
    """Return a value in [0, max_value) by plain modulo. 0 when max_value is 0 (no draw is made)."""
    if max_value <= 0:
        return 0
    return next_u32(rng) % max_value


def shuffle(rng: XorShiftRng, items: MutableSequence[T]) -> None:
    """In-place Fisher-Yates walking from the last element down to index 1."""
    for i in range(len(items) - 1, 0, -1):
        j = gen_range(rng, i + 1)
        items[i], items[j] = items[j], items[i]
