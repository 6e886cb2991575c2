"""
fft_engine - Fixed-length DFT engines with pluggable strategies

An Engine composes three independent capabilities for one transform length
and element type:

    - allocators: where buffers come from (heap-backed or allocation-free)
    - windows: per-sample weighting applied before the transform
    - implementations: the algorithm (radix-2 Cooley-Tukey FFT or naive DFT)

Example:
    >>> from fft_engine import Engine
    >>> engine = Engine(1024, window='hann')
    >>> spectrum = engine.transform(signal)
"""

from .errors import PreconditionViolation
from .numeric import (
    REAL,
    COMPLEX,
    get_precision,
    set_precision,
    element_dtype,
    img_unit,
    is_power_of_two,
)
from .allocators import Allocator, BoxedAllocator, ArrayAllocator, get_allocator
from .windows import WindowFunction, Rect, Hamming, Hanning, Blackman, get_window
from .twiddle import TwiddleCache, twiddle
from .implementations import Implementation, CooleyTukey, Naive, get_implementation
from .engine import Engine, fft
from .config import EngineConfig, load_config, build_engine

__all__ = [
    # Engine
    'Engine',
    'fft',
    'EngineConfig',
    'load_config',
    'build_engine',
    # Strategies
    'Allocator',
    'BoxedAllocator',
    'ArrayAllocator',
    'get_allocator',
    'WindowFunction',
    'Rect',
    'Hamming',
    'Hanning',
    'Blackman',
    'get_window',
    'Implementation',
    'CooleyTukey',
    'Naive',
    'get_implementation',
    'TwiddleCache',
    'twiddle',
    # Numerics
    'REAL',
    'COMPLEX',
    'get_precision',
    'set_precision',
    'element_dtype',
    'img_unit',
    'is_power_of_two',
    'PreconditionViolation',
]

__version__ = '1.0.0'
