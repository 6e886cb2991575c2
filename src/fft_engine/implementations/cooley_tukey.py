"""
Radix-2 Cooley-Tukey FFT using Numba JIT

Iterative decimation-in-time transform over a single output buffer:
1. The windowed input is materialised once into a scratch buffer
2. Bit-reversal permutation is fused with the first (length-2) butterfly
   stage, so results land directly in natural order
3. The remaining log2(N) - 1 stages run in place on the output buffer
4. Twiddle factors come from a TwiddleCache when the allocator allows one,
   otherwise they are recomputed on the fly

For real element types the same structure is used with the real part of
each rotation.
"""

import logging
import math

import numpy as np
from numba import jit

from ..errors import PreconditionViolation
from ..numeric import bit_reverse, is_complex, log2_exact
from ..twiddle import TwiddleCache
from .base import Implementation

logger = logging.getLogger(__name__)


@jit(nopython=True, cache=True)
def _bit_reversed_first_stage(x: np.ndarray, X: np.ndarray, n_bits: int):
    """Length-2 butterflies reading x in bit-reversed order, writing X in natural order."""
    N = x.shape[0]
    for i in range(0, N, 2):
        j = bit_reverse(i, n_bits)
        k = bit_reverse(i + 1, n_bits)
        even = x[j]
        odd = x[k]
        X[i] = even + odd
        X[i + 1] = even - odd


@jit(nopython=True, cache=True)
def _butterfly_stages_cached(X: np.ndarray, table: np.ndarray):
    """Stages of size 4, 8, ..., N with twiddles read from table (length N/2)."""
    N = X.shape[0]
    stride = 2
    while stride < N:
        step = N // (2 * stride)
        for start in range(0, N, 2 * stride):
            for k in range(stride):
                w = table[k * step]
                top = start + k
                bottom = top + stride

                a = X[bottom] * w
                b = X[top]
                X[top] = b + a
                X[bottom] = b - a
        stride *= 2


@jit(nopython=True, cache=True)
def _butterfly_stages_complex(X: np.ndarray):
    """Same as _butterfly_stages_cached, computing each twiddle on the fly."""
    N = X.shape[0]
    stride = 2
    while stride < N:
        for k in range(stride):
            angle = -math.pi * k / stride
            w = complex(math.cos(angle), math.sin(angle))
            for start in range(0, N, 2 * stride):
                top = start + k
                bottom = top + stride

                a = X[bottom] * w
                b = X[top]
                X[top] = b + a
                X[bottom] = b - a
        stride *= 2


@jit(nopython=True, cache=True)
def _butterfly_stages_real(X: np.ndarray):
    N = X.shape[0]
    stride = 2
    while stride < N:
        for k in range(stride):
            w = math.cos(math.pi * k / stride)
            for start in range(0, N, 2 * stride):
                top = start + k
                bottom = top + stride

                a = X[bottom] * w
                b = X[top]
                X[top] = b + a
                X[bottom] = b - a
        stride *= 2


class CooleyTukey(Implementation):
    """Iterative radix-2 decimation-in-time FFT."""

    name = 'cooley_tukey'

    def check_length(self, n: int):
        log2_exact(n)

    def build_cache(self, allocator, cache_twiddles=None):
        """
        Build the twiddle table for the allocator's (n, dtype).

        By default only heap allocators keep a table; the allocation-free
        mode recomputes twiddles instead.
        """
        self.check_length(allocator.n)
        if cache_twiddles is None:
            cache_twiddles = allocator.heap
        if not cache_twiddles or allocator.n < 2:
            logger.debug("No twiddle cache for %r, recomputing per stage", allocator)
            return None
        return TwiddleCache(allocator.n, allocator.dtype)

    def fft(self, samples, spectrum, allocator, cache=None):
        n_bits = log2_exact(allocator.n)
        spectrum = allocator.as_mut(spectrum)
        scratch = self.materialize(samples, allocator.allocate())

        if allocator.n == 1:
            spectrum[0] = scratch[0]
            return spectrum

        _bit_reversed_first_stage(scratch, spectrum, n_bits)

        if cache is not None:
            if cache.n != allocator.n or cache.dtype != allocator.dtype:
                raise PreconditionViolation(f"{cache!r} does not match {allocator!r}")
            _butterfly_stages_cached(spectrum, cache.table)
        elif is_complex(allocator.dtype):
            _butterfly_stages_complex(spectrum)
        else:
            _butterfly_stages_real(spectrum)

        return spectrum


if __name__ == "__main__":
    # python -m fft_engine.implementations.cooley_tukey
    from rich.console import Console
    from rich.table import Table
    from scipy.fft import fft as scipy_fft

    from ..allocators import ArrayAllocator, BoxedAllocator
    from ..utils import setup_logging

    setup_logging(level=logging.DEBUG)
    console = Console()
    table = Table(title="Cooley-Tukey vs scipy (complex128)")
    table.add_column("N", justify="right")
    table.add_column("Allocator")
    table.add_column("Max error", justify="right")
    table.add_column("Status")

    rng = np.random.default_rng(0)
    impl = CooleyTukey()
    for N in [2, 32, 256, 1024, 4096]:
        x = rng.standard_normal(N) + 1j * rng.standard_normal(N)
        for allocator_cls in (BoxedAllocator, ArrayAllocator):
            allocator = allocator_cls(N, np.complex128)
            cache = impl.build_cache(allocator)
            X = impl.fft(x, allocator.allocate(), allocator, cache)
            error = np.abs(X - scipy_fft(x)).max()
            status = "[green]PASS" if error < 1e-9 else "[red]FAIL"
            table.add_row(str(N), allocator.name, f"{error:.2e}", status)

    console.print(table)
