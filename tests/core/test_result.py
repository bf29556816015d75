"""
Tests for the Result[P] envelope and the compute helpers.

Validates:
    - Generic type parameter works with arbitrary payload types
    - Frozen immutability
    - Default warnings and has_warning()
    - Timer sections and tolerance tier selection
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pymoments.core.result import Result
from pymoments.core.compute.timing import Timer, timed
from pymoments.core.compute.tolerances import (
    EXACT, HIGHER_MOMENT, STREAMING, select_tolerance,
)


# ═══════════════════════════════════════════════════════════════════════
# Test payload types
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


def _result(**kwargs):
    defaults = dict(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
    defaults.update(kwargs)
    return Result(**defaults)


# ═══════════════════════════════════════════════════════════════════════
# Construction and defaults
# ═══════════════════════════════════════════════════════════════════════


class TestConstruction:

    def test_params_access(self):
        assert _result().params.value == 1.0

    def test_timing_with_breakdown(self):
        result = _result(timing={"total_seconds": 1.0, "partition": 0.6, "combine": 0.4})
        assert result.timing["partition"] == 0.6

    def test_warnings_default_empty(self):
        result = _result()
        assert result.warnings == ()
        assert isinstance(result.warnings, tuple)

    def test_has_warning_substring(self):
        result = _result(warnings=("column 0: data are essentially constant",))
        assert result.has_warning("essentially constant")
        assert not result.has_warning("overflow")


class TestImmutability:
    """Result is frozen; no attribute mutation allowed."""

    def test_cannot_set_params(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(value=2.0)

    def test_cannot_set_warnings(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.warnings = ("new warning",)


# ═══════════════════════════════════════════════════════════════════════
# Timing and tolerances
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('combine'):
            pass
        with timer.section('combine'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'combine'}
        assert result['combine'] >= 0.0
        assert timer.calls('combine') == 2
        assert timer.calls('read') == 0

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_timed_context(self):
        with timed() as timer:
            pass
        assert timer.result()['total_seconds'] >= 0.0


class TestTolerances:

    def test_exact(self):
        assert select_tolerance('variance', exact=True) is EXACT

    def test_higher_moments(self):
        assert select_tolerance('skewness') is HIGHER_MOMENT
        assert select_tolerance('kurtosis') is HIGHER_MOMENT

    def test_default_streaming(self):
        assert select_tolerance('mean') is STREAMING
