"""
Transform engine: binds one allocator, one window function and one
algorithm to a fixed transform length and element type.
"""

import logging
import operator
from functools import lru_cache
from typing import Optional, Sequence, Union

import numpy as np

from .allocators import Allocator, default_allocator_name, get_allocator
from .errors import PreconditionViolation
from .implementations import Implementation, get_implementation
from .numeric import COMPLEX, element_dtype, get_precision
from .windows import WindowFunction, get_window

logger = logging.getLogger(__name__)


class Engine:
    """
    Reusable DFT handle for signals of exactly ``n`` elements.

    Any algorithm cache is built eagerly here and is read-only afterwards,
    so an engine can serve any number of sequential (or concurrent
    read-only) transforms.

    Args:
        n: Transform length
        implementation: 'cooley_tukey' (default) or 'naive', or an Implementation
        window: 'rect' (default), 'hamming', 'hanning', 'blackman', or a WindowFunction
        allocator: 'boxed' or 'array', or an Allocator; None uses FFT_ENGINE_ALLOCATOR
        element: 'complex' (default) or 'real'
        precision: 'f32' or 'f64'; None uses the global precision
        cache_twiddles: Force the twiddle table on or off; None lets the
            allocator decide (boxed caches, array recomputes)

    Examples
    --------
    >>> engine = Engine(8, window='hann')
    >>> spectrum = engine.transform(np.ones(8))
    >>> spectrum.shape
    (8,)
    """

    def __init__(
        self,
        n: int,
        implementation: Union[str, Implementation] = 'cooley_tukey',
        window: Union[str, WindowFunction, None] = 'rect',
        allocator: Union[str, Allocator, None] = None,
        element: str = COMPLEX,
        precision=None,
        cache_twiddles: Optional[bool] = None
    ):
        try:
            n = operator.index(n)
        except TypeError:
            raise PreconditionViolation(f"Transform length must be an integer, got {n!r}") from None

        self._implementation = get_implementation(implementation)
        self._implementation.check_length(n)

        self._n = n
        self._dtype = element_dtype(element, precision)
        self._window = get_window(window)
        self._allocator = get_allocator(allocator, self._n, self._dtype)
        self._cache = self._implementation.build_cache(self._allocator, cache_twiddles)

        logger.debug(
            "Engine ready: n=%d dtype=%s implementation=%s window=%s allocator=%s cache=%s",
            self._n, self._dtype, self._implementation.name, self._window.name,
            self._allocator.name, self._cache is not None
        )

    @classmethod
    def default(cls, n: int) -> 'Engine':
        """Single-precision complex Cooley-Tukey engine with no windowing."""
        return cls(n, 'cooley_tukey', 'rect', default_allocator_name(), COMPLEX, 'f32')

    @property
    def n(self) -> int:
        return self._n

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def implementation(self) -> Implementation:
        return self._implementation

    @property
    def window(self) -> WindowFunction:
        return self._window

    @property
    def allocator(self) -> Allocator:
        return self._allocator

    @property
    def cache(self):
        return self._cache

    def allocate(self) -> np.ndarray:
        """Fresh zeroed output buffer for ``transform_into``."""
        return self._allocator.allocate()

    def transform(self, signal: Sequence) -> np.ndarray:
        """
        Window ``signal`` and compute its DFT.

        Parameters
        ----------
        signal : sequence of length n
            Input samples; never modified.

        Returns
        -------
        np.ndarray
            Newly allocated spectrum of length n with the engine's dtype.
        """
        return self.transform_into(signal, self.allocate())

    __call__ = transform

    def transform_into(self, signal: Sequence, spectrum: np.ndarray) -> np.ndarray:
        """Like ``transform`` but writes into ``spectrum``, which is fully overwritten."""
        if len(signal) != self._n:
            raise PreconditionViolation(f"Expected a signal of length {self._n}, got {len(signal)}")

        samples = self._window.windowed(signal)
        return self._implementation.fft(samples, spectrum, self._allocator, self._cache)

    def __repr__(self):
        return (f"Engine(n={self._n}, dtype={self._dtype}, "
                f"implementation={self._implementation.name}, window={self._window.name}, "
                f"allocator={self._allocator.name})")


@lru_cache(maxsize=32)
def _cached_engine(n, implementation, window, element, precision) -> Engine:
    return Engine(n, implementation, window, None, element, precision)


def fft(
    x: Sequence,
    window: str = 'rect',
    implementation: str = 'cooley_tukey',
    element: Optional[str] = None
) -> np.ndarray:
    """
    Compute the 1-D DFT of ``x`` with a shared engine.

    Engines are reused per (length, implementation, window, element kind,
    precision), so repeated calls of the same shape build their twiddle
    table only once.

    Parameters
    ----------
    x : sequence
        Input signal
    window : str
        Window name applied before transforming (default: 'rect')
    implementation : str
        'cooley_tukey' or 'naive'
    element : str, optional
        'real' or 'complex'. Defaults to 'complex'; real-valued elements use
        only the real part of each twiddle.

    Returns
    -------
    np.ndarray
        The spectrum

    Examples
    --------
    >>> X = fft([1.0, 0.0, 0.0, 0.0])
    >>> np.allclose(X, 1.0)
    True
    """
    if element is None:
        element = COMPLEX
    engine = _cached_engine(len(x), implementation, window, element, get_precision().name)
    return engine.transform(x)
