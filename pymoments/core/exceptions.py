"""
Exception hierarchy for PyMoments.

All exceptions inherit from PyMomentsError to allow catching any
library-specific error. Each class also derives from the closest builtin
exception so callers can catch the standard Python category
(ValueError, IndexError, OverflowError).

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyMomentsError(Exception):
    """Base exception for all PyMoments errors."""
    pass


class ValidationError(PyMomentsError, ValueError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks, e.g. a
    non-positive number of trials or an error rate outside (0, 1).
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect.

    Raised when an array does not have the number of dimensions an
    operation requires.
    """
    pass


class IndexBoundsError(ValidationError, IndexError):
    """
    A sub-range is out of the bounds of an array.

    Raised by the ``of_range`` constructors before any value is accumulated.

    Attributes:
        from_index: Inclusive start of the requested range
        to_index: Exclusive end of the requested range
        length: Length of the array
    """

    def __init__(
        self,
        message: str,
        from_index: int | None = None,
        to_index: int | None = None,
        length: int | None = None,
    ):
        super().__init__(message)
        self.from_index = from_index
        self.to_index = to_index
        self.length = length


class NumericalError(PyMomentsError, ArithmeticError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class ArithmeticOverflowError(NumericalError, OverflowError):
    """
    An exact value does not fit the requested narrow integer type.

    Raised only by the narrow read (``get_as_long``, ``get_as_int``,
    ``to_long_exact``, ``to_int_exact``). The accumulator that produced the
    value is left unchanged and remains exact.

    Attributes:
        value: The exact value that could not be represented
        bits: Width of the requested signed integer type
    """

    def __init__(
        self,
        message: str,
        value: int | None = None,
        bits: int | None = None,
    ):
        super().__init__(message)
        self.value = value
        self.bits = bits
