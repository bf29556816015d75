"""
Input validation utilities for PyMoments.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pymoments.core.exceptions import (
    ValidationError, DimensionError, IndexBoundsError,
)

LONG_MIN = -(1 << 63)
LONG_MAX = (1 << 63) - 1
INT_MIN = -(1 << 31)
INT_MAX = (1 << 31) - 1


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a floating-point numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    result = check_numeric(array, name)

    # Ensure floating point for the moment accumulators
    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_numeric(array: ArrayLike, name: str) -> NDArray[Any]:
    """
    Validate input converts to a numeric numpy array, preserving its dtype.

    Integer inputs keep their integer dtype so the exact accumulators can
    be selected by the caller. Booleans are rejected.

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == np.bool_ or not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex dtype {result.dtype} is not supported")

    return result


def check_long_array(array: ArrayLike, name: str) -> NDArray[np.int64]:
    """
    Validate and convert input to an int64 numpy array.

    An empty sequence is accepted. Unsigned arrays are accepted only when
    every value fits a signed 64-bit integer.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with dtype int64

    Raises:
        ValidationError: If input is not integer data in the long range
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.size == 0:
        return np.zeros(0, dtype=np.int64)

    if result.dtype == np.int64:
        return result

    if result.dtype == object:
        # Python ints beyond 64 bits end up as object arrays
        for v in result.ravel().tolist():
            check_long(v, name)
        return result.astype(np.int64)

    if not isinstance(array, np.ndarray) and np.issubdtype(result.dtype, np.floating):
        # A sequence mixing Python ints beyond 64 bits may be promoted to float
        items = np.asarray(array, dtype=object)
        values = items.ravel().tolist()
        if all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in values):
            for v in values:
                check_long(v, name)
            return items.astype(np.int64)

    if result.dtype == np.bool_ or not np.issubdtype(result.dtype, np.integer):
        raise ValidationError(
            f"{name}: expected integer data, got dtype {result.dtype}"
        )

    if result.dtype == np.uint64 and np.any(result > np.uint64(LONG_MAX)):
        raise ValidationError(
            f"{name}: values exceed the signed 64-bit range (max {int(result.max())})"
        )

    return result.astype(np.int64)


def check_long(value: Any, name: str) -> int:
    """
    Verify a scalar is an integer in the signed 64-bit range.

    Returns:
        The value as a Python int

    Raises:
        ValidationError: If value is not an integer or is out of range
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ValidationError(
            f"{name}: expected an integer, got {type(value).__name__}"
        )
    v = int(value)
    if v < LONG_MIN or v > LONG_MAX:
        raise ValidationError(
            f"{name}: {v} is outside the signed 64-bit range [{LONG_MIN}, {LONG_MAX}]"
        )
    return v


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[Any], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    check_ndim(array, 1, name)


def check_from_to_index(from_index: int, to_index: int, length: int) -> None:
    """
    Verify the sub-range [from_index, to_index) is within [0, length).

    Args:
        from_index: Inclusive start
        to_index: Exclusive end
        length: Array length

    Raises:
        IndexBoundsError: If from_index < 0, from_index > to_index,
            or to_index > length
    """
    if from_index < 0 or from_index > to_index or to_index > length:
        raise IndexBoundsError(
            f"Range [{from_index}, {to_index}) out of bounds for length {length}",
            from_index=from_index,
            to_index=to_index,
            length=length,
        )


def check_error_rate(alpha: float) -> None:
    """
    Verify the error rate is in the open interval (0, 1).

    The negated comparison rejects NaN.

    Raises:
        ValidationError: If alpha is not a real number in (0, 1)
    """
    if isinstance(alpha, (bool, np.bool_)) or not isinstance(
        alpha, (int, float, np.integer, np.floating)
    ):
        raise ValidationError(
            f"Error rate: expected a real number, got {type(alpha).__name__}"
        )
    if not (0 < alpha < 1):
        raise ValidationError(f"Error rate is not in (0, 1): {alpha}")


def check_positive_int(value: int, name: str) -> None:
    """
    Verify an integer count is strictly positive.

    Raises:
        ValidationError: If value <= 0
    """
    if value <= 0:
        raise ValidationError(f"{name} is not strictly positive: {value}")
