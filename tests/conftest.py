import os
import sys

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from fft_engine import set_precision


@pytest.fixture
def double_precision():
    """Run a test with float64 scalars, restoring the previous precision afterwards."""
    previous = set_precision('f64')
    yield np.float64
    set_precision(previous)


@pytest.fixture
def rng():
    return np.random.default_rng(12304)
