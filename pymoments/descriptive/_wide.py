"""
Fixed-width wide integers built from 64-bit limbs.

Int128 is a mutable signed two's-complement 128-bit accumulator for sums of
longs. UInt192 is a mutable unsigned 192-bit accumulator for sums of squared
longs. Both are sized so that 2^63 inputs cannot overflow them:

    |sum(x)|    <= 2^63 * 2^63       = 2^126  < 2^127
    sum(x * x)  <= 2^63 * (2^63)^2   = 2^189  < 2^192

Every limb combination is a valid value; arithmetic is carry-propagating
and any bits beyond the fixed width are discarded.
"""

from __future__ import annotations

from pymoments.core.exceptions import ArithmeticOverflowError, ValidationError
from pymoments.core.validation import check_long, INT_MIN, INT_MAX
from pymoments.descriptive._int_math import (
    MASK32, MASK64, SIGN64, to_signed64, sign_extend64, square_limbs,
)


def _check_int_range(v: int) -> int:
    if v < INT_MIN or v > INT_MAX:
        raise ArithmeticOverflowError("integer overflow", value=v, bits=32)
    return v


class Int128:
    """
    A mutable 128-bit signed integer.

    Stored as two unsigned 64-bit limbs with value
    ``(hi * 2^64 + lo)`` interpreted as two's complement over 128 bits.
    """

    __slots__ = ('_hi', '_lo')

    def __init__(self, hi: int = 0, lo: int = 0):
        # Direct binary representation; limbs are truncated to 64 bits
        self._hi = hi & MASK64
        self._lo = lo & MASK64

    @classmethod
    def create(cls) -> Int128:
        """Create an instance with the value zero."""
        return cls()

    @classmethod
    def of(cls, x: int) -> Int128:
        """Create an instance holding the long value ``x``."""
        x = check_long(x, 'x')
        return cls(sign_extend64(x), x)

    def add(self, x: int | Int128) -> None:
        """
        Add a long value, or merge another Int128.

        Raises:
            ValidationError: If ``x`` is an integer outside the long range
        """
        if isinstance(x, Int128):
            # Read both limbs first so that x may be self
            hi, lo = x._hi, x._lo
            s = self._lo + lo
            self._lo = s & MASK64
            self._hi = (self._hi + hi + (s >> 64)) & MASK64
        else:
            self.add_long(check_long(x, 'x'))

    def add_long(self, x: int) -> None:
        """Add a long value. No range check is performed."""
        s = self._lo + (x & MASK64)
        self._lo = s & MASK64
        self._hi = (self._hi + sign_extend64(x) + (s >> 64)) & MASK64

    def fits_long(self) -> bool:
        """True if the value is in [-2^63, 2^63)."""
        if self._lo & SIGN64:
            return self._hi == MASK64
        return self._hi == 0

    def square_low(self) -> UInt128:
        """
        Square of the low 64 bits read as a signed long.

        Warning: This ignores the upper 64 bits. It equals the square of
        the value only when ``fits_long()`` is True.
        """
        return UInt128(*square_limbs(to_signed64(self._lo)))

    def to_big_integer(self) -> int:
        """Exact value as a Python int."""
        v = (self._hi << 64) | self._lo
        if self._hi & SIGN64:
            v -= 1 << 128
        return v

    def to_double(self) -> float:
        """Value rounded to the nearest double."""
        return float(self.to_big_integer())

    def to_long_exact(self) -> int:
        """
        Value as a long.

        Raises:
            ArithmeticOverflowError: If the value is outside [-2^63, 2^63)
        """
        if not self.fits_long():
            raise ArithmeticOverflowError(
                "long integer overflow", value=self.to_big_integer(), bits=64
            )
        return to_signed64(self._lo)

    def to_int_exact(self) -> int:
        """
        Value as an int.

        Raises:
            ArithmeticOverflowError: If the value is outside [-2^31, 2^31)
        """
        if not self.fits_long():
            raise ArithmeticOverflowError(
                "integer overflow", value=self.to_big_integer(), bits=32
            )
        return _check_int_range(to_signed64(self._lo))

    def lo64(self) -> int:
        """Low 64 bits as an unsigned value."""
        return self._lo

    def hi64(self) -> int:
        """High 64 bits as an unsigned value (holds the sign bit)."""
        return self._hi

    def copy(self) -> Int128:
        return Int128(self._hi, self._lo)

    def __repr__(self) -> str:
        return f"Int128({self.to_big_integer()})"


class UInt128:
    """An immutable unsigned 128-bit integer."""

    __slots__ = ('_hi', '_lo')

    def __init__(self, hi: int, lo: int):
        self._hi = hi & MASK64
        self._lo = lo & MASK64

    def hi64(self) -> int:
        return self._hi

    def lo64(self) -> int:
        return self._lo

    def lo32(self) -> int:
        return self._lo & MASK32

    def mid32(self) -> int:
        return self._lo >> 32

    def to_big_integer(self) -> int:
        return (self._hi << 64) | self._lo

    def __repr__(self) -> str:
        return f"UInt128({self.to_big_integer()})"


class UInt192:
    """
    A mutable unsigned 192-bit integer.

    Stored as three unsigned 64-bit limbs (hi, mid, lo).
    """

    __slots__ = ('_hi', '_mid', '_lo')

    def __init__(self, hi: int = 0, mid: int = 0, lo: int = 0):
        # Direct binary representation; limbs are truncated to 64 bits
        self._hi = hi & MASK64
        self._mid = mid & MASK64
        self._lo = lo & MASK64

    @classmethod
    def create(cls) -> UInt192:
        """Create an instance with the value zero."""
        return cls()

    def add_square(self, x: int) -> None:
        """
        Add the square ``x * x`` of a long value.

        Raises:
            ValidationError: If ``x`` is outside the long range
        """
        self.add_square_long(check_long(x, 'x'))

    def add_square_long(self, x: int) -> None:
        """Add the square of a long value. No range check is performed."""
        hi, lo = square_limbs(x)
        s = self._lo + lo
        self._lo = s & MASK64
        s = (s >> 64) + self._mid + hi
        self._mid = s & MASK64
        self._hi = (self._hi + (s >> 64)) & MASK64

    def add(self, x: UInt192) -> None:
        """Merge another UInt192."""
        if not isinstance(x, UInt192):
            raise ValidationError(
                f"x: expected UInt192, got {type(x).__name__}; use add_square for values"
            )
        # Read all limbs first so that x may be self
        hi, mid, lo = x._hi, x._mid, x._lo
        s = self._lo + lo
        self._lo = s & MASK64
        s = (s >> 64) + self._mid + mid
        self._mid = s & MASK64
        self._hi = (self._hi + hi + (s >> 64)) & MASK64

    def unsigned_multiply(self, m: int) -> UInt192:
        """
        Multiply by an unsigned 32-bit value.

        Any overflow bits are lost.
        """
        if m < 0 or m > MASK32:
            raise ValidationError(f"m: {m} is not an unsigned 32-bit value")
        p = self._lo * m
        lo = p & MASK64
        p = (p >> 64) + self._mid * m
        mid = p & MASK64
        hi = (p >> 64) + self._hi * m
        return UInt192(hi, mid, lo)

    def subtract(self, x: UInt128) -> UInt192:
        """
        Subtract an unsigned 128-bit value.

        Any overflow bits (negative result) are lost.
        """
        d = self._lo - x.lo64()
        lo = d & MASK64
        borrow = 1 if d < 0 else 0
        d = self._mid - x.hi64() - borrow
        mid = d & MASK64
        borrow = 1 if d < 0 else 0
        return UInt192(self._hi - borrow, mid, lo)

    def to_big_integer(self) -> int:
        """Exact value as a Python int."""
        return (self._hi << 128) | (self._mid << 64) | self._lo

    def to_double(self) -> float:
        """Value rounded to the nearest double."""
        return float(self.to_big_integer())

    def to_long_exact(self) -> int:
        """
        Value as a long.

        Raises:
            ArithmeticOverflowError: If the value is 2^63 or more
        """
        if self._hi or self._mid or self._lo & SIGN64:
            raise ArithmeticOverflowError(
                "long integer overflow", value=self.to_big_integer(), bits=64
            )
        return self._lo

    def to_int_exact(self) -> int:
        """
        Value as an int.

        Raises:
            ArithmeticOverflowError: If the value is 2^31 or more
        """
        if self._hi or self._mid or self._lo & SIGN64:
            raise ArithmeticOverflowError(
                "integer overflow", value=self.to_big_integer(), bits=32
            )
        return _check_int_range(self._lo)

    def lo64(self) -> int:
        return self._lo

    def mid64(self) -> int:
        return self._mid

    def hi64(self) -> int:
        return self._hi

    def copy(self) -> UInt192:
        return UInt192(self._hi, self._mid, self._lo)

    def __repr__(self) -> str:
        return f"UInt192({self.to_big_integer()})"
