"""
Twiddle factors: the roots of unity exp(-2*pi*i*m/N) that rotate partial
sums inside a butterfly.

For real element types only the real part cos(2*pi*m/N) is used.
"""

import logging

import numpy as np

from .numeric import is_complex, log2_exact

logger = logging.getLogger(__name__)


def twiddle(m: int, n: int, dtype=np.complex128):
    """
    Single twiddle factor for index m of a length-n transform.

    Scalar reference for the rotation that TwiddleCache tabulates and that
    the jitted Cooley-Tukey stages recompute inline when no cache is held.
    """
    angle = -2.0 * np.pi * m / n
    if is_complex(dtype):
        return np.dtype(dtype).type(complex(np.cos(angle), np.sin(angle)))
    return np.dtype(dtype).type(np.cos(angle))


class TwiddleCache:
    """
    Precomputed N/2 twiddle factors for one (dtype, N) pair.

    The table is built once in float64 and cast to ``dtype``; it is read-only
    afterwards, so several threads may share one cache.

    Args:
        n: Transform length (power of two)
        dtype: Element dtype of the transform
    """

    def __init__(self, n: int, dtype):
        log2_exact(n)
        self.n = int(n)
        self.dtype = np.dtype(dtype)

        angles = -2.0 * np.pi * np.arange(self.n // 2, dtype=np.float64) / self.n
        if is_complex(self.dtype):
            table = np.exp(1j * angles)
        else:
            table = np.cos(angles)
        self._table = np.ascontiguousarray(table, dtype=self.dtype)
        self._table.flags.writeable = False

        logger.debug("Built twiddle cache n=%d dtype=%s", self.n, self.dtype)

    @property
    def table(self) -> np.ndarray:
        return self._table

    def __len__(self):
        return len(self._table)

    def __getitem__(self, m):
        return self._table[m]

    def __repr__(self):
        return f"TwiddleCache(n={self.n}, dtype={self.dtype})"
