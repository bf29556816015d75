"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def normal_data(rng):
    """1000 draws from N(3, 2^2)."""
    return rng.normal(3.0, 2.0, size=1000)


@pytest.fixture
def skewed_data(rng):
    """500 draws from a gamma distribution (positive skew)."""
    return rng.gamma(2.0, 1.5, size=500)


@pytest.fixture
def long_data(rng):
    """400 signed 64-bit integers spread over the full range."""
    return rng.integers(-(1 << 62), 1 << 62, size=400, dtype=np.int64)
