"""
Seeded pseudo-random generator shared by every participant.

The generator is sfc32 operating on four 32-bit words. Recorded games depend
on it being reproduced bit for bit, so all arithmetic is masked to 32 bits.
"""

from typing import List, Sequence, TypeVar

T = TypeVar('T')

MASK_32 = 0xFFFFFFFF
TWO_POW_32 = 4294967296


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & MASK_32


class Sfc32:
    """Small fast counting generator seeded from four unsigned 32-bit words."""

    def __init__(self, a: int, b: int, c: int, d: int):
        self.a = a & MASK_32
        self.b = b & MASK_32
        self.c = c & MASK_32
        self.d = d & MASK_32

    def next_uint32(self) -> int:
        t = (self.a + self.b + self.d) & MASK_32
        self.d = (self.d + 1) & MASK_32
        self.a = self.b ^ (self.b >> 9)
        self.b = (self.c + (self.c << 3)) & MASK_32
        self.c = (_rotl(self.c, 21) + t) & MASK_32
        return t

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        return self.next_uint32() / TWO_POW_32


def shuffle(items: Sequence[T], rng: Sfc32) -> List[T]:
    """
    Return a shuffled copy of ``items``.

    Walks left to right, swapping each position with a uniformly drawn
    position at or after it.

    Args:
        items: Sequence to permute (left untouched)
        rng: Generator supplying the draws

    Returns:
        New list holding the permutation
    """
    shuffled = list(items)
    length = len(shuffled)
    for i in range(length):
        idx = i + int(rng.next_float() * (length - i))
        shuffled[i], shuffled[idx] = shuffled[idx], shuffled[i]
    return shuffled
