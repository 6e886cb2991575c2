"""
Numeric helpers shared by every transform strategy.

Scalar precision is a single process-wide setting (float32 or float64).
It is read from the ``FFT_ENGINE_PRECISION`` environment variable at import
time and can be changed with :func:`set_precision`. Engines capture the
precision when they are built.
"""

import os
from typing import Union

import numpy as np
from numba import jit

from .errors import PreconditionViolation

REAL = 'real'
COMPLEX = 'complex'
ELEMENT_KINDS = (REAL, COMPLEX)

_PRECISION_ALIASES = {
    'f32': np.float32,
    'float32': np.float32,
    'single': np.float32,
    'f64': np.float64,
    'float64': np.float64,
    'double': np.float64,
}


def parse_precision(precision: Union[str, type, np.dtype]) -> np.dtype:
    """Resolve a precision name or dtype to a real numpy dtype."""
    if isinstance(precision, str):
        key = precision.strip().lower()
        if key not in _PRECISION_ALIASES:
            raise PreconditionViolation(f"Unknown precision: {precision}")
        return np.dtype(_PRECISION_ALIASES[key])

    dtype = np.dtype(precision)
    if dtype == np.float32 or dtype == np.complex64:
        return np.dtype(np.float32)
    if dtype == np.float64 or dtype == np.complex128:
        return np.dtype(np.float64)
    raise PreconditionViolation(f"Unsupported precision: {dtype}")


_precision = parse_precision(os.environ.get('FFT_ENGINE_PRECISION', 'f32'))


def get_precision() -> np.dtype:
    """Return the current global scalar precision."""
    return _precision


def set_precision(precision: Union[str, type, np.dtype]) -> np.dtype:
    """
    Set the global scalar precision.

    Returns the previous value so callers can restore it.
    """
    global _precision
    previous = _precision
    _precision = parse_precision(precision)
    return previous


def element_dtype(element: str = COMPLEX, precision=None) -> np.dtype:
    """
    Map an element kind and precision to the numpy dtype of a buffer element.

    >>> element_dtype('complex', 'f32')
    dtype('complex64')
    """
    if element not in ELEMENT_KINDS:
        raise PreconditionViolation(f"Unknown element kind: {element}")

    real = get_precision() if precision is None else parse_precision(precision)
    if element == REAL:
        return real
    return np.dtype(np.complex64) if real == np.float32 else np.dtype(np.complex128)


def is_complex(dtype) -> bool:
    return np.issubdtype(np.dtype(dtype), np.complexfloating)


def img_unit(dtype):
    """Imaginary unit for a complex element type."""
    if not is_complex(dtype):
        raise PreconditionViolation(f"{np.dtype(dtype)} has no imaginary unit")
    return np.dtype(dtype).type(1j)


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def log2_exact(n: int) -> int:
    """Number of radix-2 stages for a length ``n`` transform."""
    if not is_power_of_two(n):
        raise PreconditionViolation(f"Transform length must be a power of two, got {n}")
    return int(n).bit_length() - 1


@jit(nopython=True, cache=True)
def bit_reverse(x: int, n_bits: int) -> int:
    """Reverse the lowest n_bits bits of x."""
    result = 0
    for _ in range(n_bits):
        result = (result << 1) | (x & 1)
        x >>= 1
    return result
