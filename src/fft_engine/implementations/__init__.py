"""
Transform algorithms.

- CooleyTukey: iterative radix-2 FFT, O(N log N), power-of-two lengths
- Naive: direct DFT sum, O(N^2), reference oracle
"""

from typing import Union

from ..errors import PreconditionViolation
from .base import Implementation
from .cooley_tukey import CooleyTukey
from .naive import Naive

IMPLEMENTATIONS = {
    'cooley_tukey': CooleyTukey,
    'cooley-tukey': CooleyTukey,
    'fft': CooleyTukey,
    'naive': Naive,
    'dft': Naive,
}


def get_implementation(implementation: Union[str, type, Implementation]) -> Implementation:
    """Resolve an implementation name, class or instance."""
    if isinstance(implementation, Implementation):
        return implementation
    if isinstance(implementation, type) and issubclass(implementation, Implementation):
        return implementation()
    if isinstance(implementation, str) and implementation.lower() in IMPLEMENTATIONS:
        return IMPLEMENTATIONS[implementation.lower()]()
    raise PreconditionViolation(f"Unknown implementation: {implementation!r}")


__all__ = [
    'Implementation',
    'CooleyTukey',
    'Naive',
    'IMPLEMENTATIONS',
    'get_implementation',
]
