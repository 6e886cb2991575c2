"""
Window functions applied to a signal before transforming it.

Window functions reduce spectral leakage by smoothly tapering the signal
at frame boundaries. All windows here are the periodic ("DFT-even") form,
normalised by N rather than N-1.
"""

import math
from functools import lru_cache
from typing import Iterator, Sequence, Union

import numpy as np

from .errors import PreconditionViolation


class WindowFunction:
    """
    Base class for per-sample window weights.

    Subclasses implement ``weight(i, n)``. ``weights(n)`` memoises the full
    table for a length, ``windowed(signal)`` produces the lazy weighted view.
    """

    name = 'window'

    @staticmethod
    def weight(i: float, n: float) -> float:
        raise NotImplementedError

    @classmethod
    def weights(cls, n: int) -> np.ndarray:
        """Read-only float64 weight table of length n."""
        return _weight_table(cls, int(n))

    @classmethod
    def windowed(cls, signal: Sequence) -> Iterator:
        """
        Lazily weight a signal.

        Yields ``signal[i] * weight(i, n)`` for i in [0, n). The returned
        generator is single-pass and never writes to ``signal``.
        """
        n = len(signal)
        table = cls.weights(n)
        return (x * w for x, w in zip(signal, table))

    def __repr__(self):
        return f"{type(self).__name__}()"


@lru_cache(maxsize=64)
def _weight_table(window: type, n: int) -> np.ndarray:
    table = np.array([window.weight(float(i), float(n)) for i in range(n)], dtype=np.float64)
    table.flags.writeable = False
    return table


class Rect(WindowFunction):
    """Rectangular window: every weight is 1."""

    name = 'rect'

    @staticmethod
    def weight(i: float, n: float) -> float:
        return 1.0

    @classmethod
    def windowed(cls, signal: Sequence) -> Iterator:
        return iter(signal)


class Hamming(WindowFunction):
    """Hamming window: w[i] = 0.54 - 0.46 * cos(2*pi*i / n)"""

    name = 'hamming'

    @staticmethod
    def weight(i: float, n: float) -> float:
        return 0.54 - 0.46 * math.cos(2.0 * math.pi * i / n)


class Hanning(WindowFunction):
    """Hann window: w[i] = 0.5 - 0.5 * cos(2*pi*i / n)"""

    name = 'hanning'

    @staticmethod
    def weight(i: float, n: float) -> float:
        return 0.5 - 0.5 * math.cos(2.0 * math.pi * i / n)


class Blackman(WindowFunction):
    """Blackman window: w[i] = 0.42 - 0.5*cos(2*pi*i/n) + 0.08*cos(4*pi*i/n)"""

    name = 'blackman'

    @staticmethod
    def weight(i: float, n: float) -> float:
        return (0.42
                - 0.5 * math.cos(2.0 * math.pi * i / n)
                + 0.08 * math.cos(4.0 * math.pi * i / n))


WINDOWS = {
    'rect': Rect,
    'rectangular': Rect,
    'boxcar': Rect,
    'hamming': Hamming,
    'hanning': Hanning,
    'hann': Hanning,
    'blackman': Blackman,
}


def get_window(window: Union[str, type, WindowFunction, None]) -> WindowFunction:
    """
    Resolve a window specification.

    Parameters
    ----------
    window : str, WindowFunction subclass or instance, or None
        - 'rect' / 'rectangular' / 'boxcar': no weighting (also None)
        - 'hamming': Hamming window
        - 'hann' / 'hanning': Hann window
        - 'blackman': Blackman window

    Returns
    -------
    WindowFunction
    """
    if window is None:
        return Rect()
    if isinstance(window, WindowFunction):
        return window
    if isinstance(window, type) and issubclass(window, WindowFunction):
        return window()
    if isinstance(window, str) and window.lower() in WINDOWS:
        return WINDOWS[window.lower()]()
    raise PreconditionViolation(f"Unknown window type: {window}")
