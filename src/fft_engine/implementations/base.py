"""
Base class for transform algorithms.
"""

import itertools
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

from ..allocators import Allocator
from ..errors import PreconditionViolation

_END = object()


class Implementation(ABC):
    """
    Base class for DFT algorithms.

    An implementation is a stateless strategy. Any lookup table it needs is
    built by ``build_cache()`` and handed back on every ``fft()`` call; the
    caller (normally an Engine) owns it.

    All implementations must implement:
    - check_length(): reject transform lengths the algorithm cannot handle
    - fft(): transform a sample sequence into an output buffer
    """

    name = 'implementation'

    @abstractmethod
    def check_length(self, n: int):
        """Raise PreconditionViolation if ``n`` is not a valid transform length."""

    def build_cache(self, allocator: Allocator, cache_twiddles: Optional[bool] = None):
        """Build the algorithm's lookup table for ``allocator``'s (n, dtype), if any."""
        return None

    @abstractmethod
    def fft(
        self,
        samples: Iterable,
        spectrum: np.ndarray,
        allocator: Allocator,
        cache=None
    ) -> np.ndarray:
        """
        Transform ``samples`` into ``spectrum``.

        Args:
            samples: Exactly n input values; may be a single-pass iterator
            spectrum: Output buffer from ``allocator``, fully overwritten
            allocator: Provides the scratch buffer and the (n, dtype) pair
            cache: Table returned by ``build_cache()`` (optional)

        Returns:
            The ``spectrum`` buffer
        """

    @staticmethod
    def materialize(samples: Iterable, scratch: np.ndarray) -> np.ndarray:
        """
        Copy a possibly single-pass sequence into ``scratch``, preserving order.

        Fails fast when the sequence holds fewer or more than len(scratch) values,
        or complex values when ``scratch`` holds real elements.
        """
        n = len(scratch)
        it = iter(samples)
        values = np.array(list(itertools.islice(it, n)))
        if len(values) != n or next(it, _END) is not _END:
            raise PreconditionViolation(f"Expected exactly {n} samples")
        if np.iscomplexobj(values) and not np.iscomplexobj(scratch):
            raise PreconditionViolation(f"Complex samples given to a {scratch.dtype} transform")
        scratch[:] = values
        return scratch

    def __repr__(self):
        return f"{type(self).__name__}()"
