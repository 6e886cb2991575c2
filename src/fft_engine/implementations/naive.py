"""
Naive O(N^2) DFT.

Slow but obviously correct; used as the ground-truth oracle for the fast
algorithm. Not intended for large N.
"""

import math

import numpy as np
from numba import jit

from ..errors import PreconditionViolation
from ..numeric import is_complex
from .base import Implementation


@jit(nopython=True, cache=True)
def _naive_dft_complex(x: np.ndarray, X: np.ndarray):
    """X[k] = sum_n x[n] * exp(-2j*pi*k*n/N)"""
    N = x.shape[0]
    for k in range(N):
        s = 0j
        for n in range(N):
            # k*n mod N keeps the angle small without changing the root
            angle = -2.0 * math.pi * ((k * n) % N) / N
            s += x[n] * complex(math.cos(angle), math.sin(angle))
        X[k] = s


@jit(nopython=True, cache=True)
def _naive_dft_real(x: np.ndarray, X: np.ndarray):
    """Real element types keep only the real part of each rotation."""
    N = x.shape[0]
    for k in range(N):
        s = 0.0
        for n in range(N):
            s += x[n] * math.cos(2.0 * math.pi * ((k * n) % N) / N)
        X[k] = s


class Naive(Implementation):
    """Direct evaluation of the DFT sum for every output bin."""

    name = 'naive'

    def check_length(self, n: int):
        if n < 1:
            raise PreconditionViolation(f"Transform length must be positive, got {n}")

    def fft(self, samples, spectrum, allocator, cache=None):
        spectrum = allocator.as_mut(spectrum)
        buffer = self.materialize(samples, allocator.allocate())

        if is_complex(allocator.dtype):
            _naive_dft_complex(buffer, spectrum)
        else:
            _naive_dft_real(buffer, spectrum)
        return spectrum
