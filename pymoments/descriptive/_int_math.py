"""
64-bit limb arithmetic helpers for the exact integer accumulators.

Python integers are unbounded, so fixed-width limbs are emulated by masking.
A limb is always held as an unsigned value in [0, 2^64).
"""

from __future__ import annotations

MASK32 = 0xFFFF_FFFF
MASK64 = 0xFFFF_FFFF_FFFF_FFFF
SIGN64 = 1 << 63


def to_signed64(x: int) -> int:
    """Interpret the low 64 bits of ``x`` as a two's-complement long."""
    x &= MASK64
    return x - (1 << 64) if x & SIGN64 else x


def sign_extend64(x: int) -> int:
    """High limb of a signed long sign-extended to 128 bits."""
    return MASK64 if x < 0 else 0


def square_limbs(x: int) -> tuple[int, int]:
    """
    Exact 64x64 -> 128-bit square of a signed long.

    Returns:
        (hi, lo) unsigned 64-bit limbs of ``x * x``
    """
    sq = x * x
    return sq >> 64, sq & MASK64

