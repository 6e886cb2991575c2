"""
Buffer allocators.

An allocator hands out owned, zero-initialised buffers of exactly N elements.
Two interchangeable variants exist:

- BoxedAllocator: heap-backed buffers, allowed to hold precomputed tables.
- ArrayAllocator: allocation-free mode for constrained targets; buffers are
  copies of a fixed zero template and no lookup tables are kept, so twiddle
  factors are recomputed on access.

Running out of memory is fatal: numpy's MemoryError is never caught here.
"""

import os
from abc import ABC, abstractmethod
from typing import Union

import numpy as np

from .errors import PreconditionViolation


class Allocator(ABC):
    """
    Base class for buffer allocation strategies.

    Args:
        n: Buffer length
        dtype: Element dtype of every buffer
    """

    name = 'allocator'
    heap = True

    def __init__(self, n: int, dtype):
        if n < 1:
            raise PreconditionViolation(f"Buffer length must be positive, got {n}")
        self.n = int(n)
        self.dtype = np.dtype(dtype)

    @abstractmethod
    def allocate(self) -> np.ndarray:
        """Return a fresh zero-initialised buffer of length n."""

    def as_mut(self, element: np.ndarray) -> np.ndarray:
        self.check(element)
        return element

    def as_ref(self, element: np.ndarray) -> np.ndarray:
        self.check(element)
        view = element.view()
        view.flags.writeable = False
        return view

    def check(self, element: np.ndarray):
        """Fail fast when a buffer does not belong to this allocator's shape/dtype."""
        if not isinstance(element, np.ndarray) or element.shape != (self.n,):
            shape = getattr(element, 'shape', None)
            raise PreconditionViolation(f"Expected a buffer of shape ({self.n},), got {shape}")
        if element.dtype != self.dtype:
            raise PreconditionViolation(f"Expected a {self.dtype} buffer, got {element.dtype}")

    def __repr__(self):
        return f"{type(self).__name__}(n={self.n}, dtype={self.dtype})"


class BoxedAllocator(Allocator):
    """Heap-backed buffers."""

    name = 'boxed'
    heap = True

    def allocate(self) -> np.ndarray:
        return np.zeros(self.n, dtype=self.dtype)


class ArrayAllocator(Allocator):
    """Fixed-size buffers stamped from a zero template built once."""

    name = 'array'
    heap = False

    def __init__(self, n: int, dtype):
        super().__init__(n, dtype)
        self._template = np.zeros(self.n, dtype=self.dtype)
        self._template.flags.writeable = False

    def allocate(self) -> np.ndarray:
        return self._template.copy()


ALLOCATORS = {
    BoxedAllocator.name: BoxedAllocator,
    ArrayAllocator.name: ArrayAllocator,
}


def default_allocator_name() -> str:
    """Allocation mode from ``FFT_ENGINE_ALLOCATOR`` (``boxed`` when unset)."""
    return os.environ.get('FFT_ENGINE_ALLOCATOR', BoxedAllocator.name).strip().lower()


def get_allocator(allocator: Union[str, type, Allocator, None], n: int, dtype) -> Allocator:
    """
    Resolve an allocator specification.

    Args:
        allocator: 'boxed', 'array', an Allocator subclass, an instance,
            or None for the configured default
        n: Buffer length
        dtype: Element dtype

    Returns:
        Allocator instance for (n, dtype)
    """
    if isinstance(allocator, Allocator):
        if allocator.n != n or allocator.dtype != np.dtype(dtype):
            raise PreconditionViolation(
                f"{allocator!r} does not match n={n}, dtype={np.dtype(dtype)}"
            )
        return allocator

    if allocator is None:
        allocator = default_allocator_name()

    if isinstance(allocator, str):
        if allocator not in ALLOCATORS:
            raise PreconditionViolation(f"Unknown allocator: {allocator}")
        return ALLOCATORS[allocator](n, dtype)

    if isinstance(allocator, type) and issubclass(allocator, Allocator):
        return allocator(n, dtype)

    raise PreconditionViolation(f"Unknown allocator: {allocator!r}")
