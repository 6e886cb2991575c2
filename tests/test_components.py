"""
Unit tests for the building blocks: numerics, allocators, twiddle cache
and the algorithm strategies used directly.
"""

import numpy as np
import pytest

from fft_engine import (
    ArrayAllocator,
    BoxedAllocator,
    CooleyTukey,
    Naive,
    PreconditionViolation,
    TwiddleCache,
    element_dtype,
    get_allocator,
    get_implementation,
    get_precision,
    img_unit,
    is_power_of_two,
    set_precision,
    twiddle,
)
from fft_engine.implementations.cooley_tukey import _bit_reversed_first_stage, _butterfly_stages_cached
from fft_engine.numeric import bit_reverse, log2_exact


class TestNumeric:

    def test_bit_reverse(self):
        assert bit_reverse(1, 3) == 4
        assert bit_reverse(3, 3) == 6
        assert bit_reverse(6, 4) == 6
        assert [bit_reverse(i, 2) for i in range(4)] == [0, 2, 1, 3]

    def test_power_of_two(self):
        assert [n for n in range(20) if is_power_of_two(n)] == [1, 2, 4, 8, 16]
        assert log2_exact(1024) == 10
        assert log2_exact(1) == 0
        with pytest.raises(PreconditionViolation):
            log2_exact(48)

    @pytest.mark.parametrize('element, precision, expected', [
        ('real', 'f32', np.float32),
        ('real', 'float64', np.float64),
        ('complex', 'single', np.complex64),
        ('complex', 'f64', np.complex128),
        ('complex', np.complex128, np.complex128),
    ])
    def test_element_dtype(self, element, precision, expected):
        assert element_dtype(element, precision) == expected

    def test_global_precision(self):
        previous = set_precision('f64')
        try:
            assert get_precision() == np.float64
            assert element_dtype('complex') == np.complex128
        finally:
            set_precision(previous)
        assert get_precision() == previous

    def test_img_unit(self):
        unit = img_unit(np.complex64)
        assert unit == 1j
        assert unit.dtype == np.complex64
        with pytest.raises(PreconditionViolation):
            img_unit(np.float32)


class TestAllocators:

    @pytest.mark.parametrize('allocator_cls', [BoxedAllocator, ArrayAllocator])
    def test_allocate_zeroed(self, allocator_cls):
        allocator = allocator_cls(16, np.complex64)
        buffer = allocator.allocate()
        assert buffer.shape == (16,)
        assert buffer.dtype == np.complex64
        assert not buffer.any()

    @pytest.mark.parametrize('allocator_cls', [BoxedAllocator, ArrayAllocator])
    def test_buffers_are_independent(self, allocator_cls):
        allocator = allocator_cls(8, np.float32)
        first = allocator.allocate()
        first[:] = 1.0
        second = allocator.allocate()
        assert not second.any()
        assert not np.shares_memory(first, second)

    def test_views(self):
        allocator = BoxedAllocator(4, np.float64)
        buffer = allocator.allocate()
        allocator.as_mut(buffer)[0] = 3.0
        view = allocator.as_ref(buffer)
        assert view[0] == 3.0
        with pytest.raises(ValueError):
            view[0] = 1.0
        assert buffer.flags.writeable

    def test_check(self):
        allocator = ArrayAllocator(4, np.float64)
        with pytest.raises(PreconditionViolation):
            allocator.as_mut(np.zeros(5))
        with pytest.raises(PreconditionViolation):
            allocator.as_mut(np.zeros(4, dtype=np.float32))
        with pytest.raises(PreconditionViolation):
            allocator.as_ref([0.0] * 4)

    def test_heap_flag(self):
        assert BoxedAllocator.heap
        assert not ArrayAllocator.heap

    def test_get_allocator(self, monkeypatch):
        assert isinstance(get_allocator('array', 8, np.float32), ArrayAllocator)
        assert isinstance(get_allocator(BoxedAllocator, 8, np.float32), BoxedAllocator)

        monkeypatch.setenv('FFT_ENGINE_ALLOCATOR', 'array')
        assert isinstance(get_allocator(None, 8, np.float32), ArrayAllocator)

        existing = BoxedAllocator(8, np.float32)
        assert get_allocator(existing, 8, np.float32) is existing
        with pytest.raises(PreconditionViolation):
            get_allocator(existing, 16, np.float32)
        with pytest.raises(PreconditionViolation):
            get_allocator('stack', 8, np.float32)

    def test_non_positive_length(self):
        with pytest.raises(PreconditionViolation):
            BoxedAllocator(0, np.float32)


class TestTwiddleCache:

    @pytest.mark.parametrize('n', [2, 8, 1024])
    def test_length_and_unit_magnitude(self, n):
        cache = TwiddleCache(n, np.complex128)
        assert len(cache) == n // 2
        np.testing.assert_allclose(np.abs(cache.table), 1.0, atol=1e-12)

    def test_values(self):
        cache = TwiddleCache(8, np.complex128)
        assert cache[0] == pytest.approx(1.0)
        assert cache[2] == pytest.approx(-1j)
        for m in range(4):
            assert cache[m] == pytest.approx(np.exp(-2j * np.pi * m / 8))
            assert cache[m] == pytest.approx(twiddle(m, 8))

    def test_real_cache_is_cosine(self):
        cache = TwiddleCache(16, np.float32)
        assert cache.table.dtype == np.float32
        expected = np.cos(2 * np.pi * np.arange(8) / 16)
        np.testing.assert_allclose(cache.table, expected, atol=1e-6)
        assert twiddle(3, 16, np.float64) == pytest.approx(np.cos(2 * np.pi * 3 / 16))

    def test_dtype(self):
        assert TwiddleCache(32, np.complex64).table.dtype == np.complex64
        assert twiddle(1, 4, np.complex64).dtype == np.complex64

    def test_immutable(self):
        cache = TwiddleCache(8, np.complex64)
        with pytest.raises(ValueError):
            cache.table[0] = 0.0

    def test_requires_power_of_two(self):
        with pytest.raises(PreconditionViolation):
            TwiddleCache(12, np.complex64)

    @pytest.mark.parametrize('dtype', [np.complex128, np.float64])
    def test_table_matches_scalar_twiddle(self, dtype):
        n = 64
        cache = TwiddleCache(np.int64(n), dtype)
        expected = np.array([twiddle(m, n, dtype) for m in range(n // 2)])
        np.testing.assert_allclose(cache.table, expected, rtol=0, atol=1e-12)

    @pytest.mark.parametrize('dtype', [np.complex128, np.float64])
    def test_recomputed_stages_match_scalar_twiddle(self, dtype, rng):
        n = 64
        x = rng.standard_normal(n).astype(dtype)
        allocator = BoxedAllocator(n, dtype)
        impl = CooleyTukey()

        table = np.array([twiddle(m, n, dtype) for m in range(n // 2)], dtype=dtype)
        reference = allocator.allocate()
        _bit_reversed_first_stage(x.copy(), reference, 6)
        _butterfly_stages_cached(reference, table)

        recomputed = impl.fft(x, allocator.allocate(), allocator, None)
        np.testing.assert_allclose(recomputed, reference, rtol=0, atol=1e-9)


class TestImplementations:

    def test_registry(self):
        assert isinstance(get_implementation('cooley_tukey'), CooleyTukey)
        assert isinstance(get_implementation('naive'), Naive)
        assert isinstance(get_implementation(Naive), Naive)
        with pytest.raises(PreconditionViolation):
            get_implementation('bluestein')

    def test_single_pass_input(self):
        allocator = BoxedAllocator(8, np.complex128)
        impl = CooleyTukey()
        samples = (float(i) for i in range(8))
        X = impl.fft(samples, allocator.allocate(), allocator, impl.build_cache(allocator))
        np.testing.assert_allclose(X, np.fft.fft(np.arange(8.0)), atol=1e-9)

    @pytest.mark.parametrize('count', [7, 9])
    def test_materialize_wrong_count(self, count):
        allocator = BoxedAllocator(8, np.complex64)
        with pytest.raises(PreconditionViolation):
            Naive().fft(iter(range(count)), allocator.allocate(), allocator)

    def test_materialize_rejects_complex_for_real_scratch(self):
        scratch = np.zeros(4, dtype=np.float32)
        with pytest.raises(PreconditionViolation):
            CooleyTukey.materialize(iter([1.0, 2.0, 3.0 + 0j, 4.0]), scratch)
        assert not scratch.any()

        complex_scratch = np.zeros(4, dtype=np.complex64)
        CooleyTukey.materialize(iter([1, 2.0, 3j, 4.0]), complex_scratch)
        np.testing.assert_allclose(complex_scratch, [1, 2, 3j, 4])

    @pytest.mark.parametrize('dtype', [np.complex128, np.float64])
    def test_cached_matches_recomputed(self, dtype, rng):
        n = 512
        x = rng.standard_normal(n).astype(dtype)
        allocator = BoxedAllocator(n, dtype)
        impl = CooleyTukey()

        cached = impl.fft(x, allocator.allocate(), allocator, TwiddleCache(n, dtype))
        recomputed = impl.fft(x, allocator.allocate(), allocator, None)

        np.testing.assert_allclose(cached, recomputed, rtol=0, atol=1e-9)

    def test_cache_decided_by_allocator(self):
        impl = CooleyTukey()
        assert impl.build_cache(BoxedAllocator(16, np.complex64)) is not None
        assert impl.build_cache(ArrayAllocator(16, np.complex64)) is None
        assert impl.build_cache(ArrayAllocator(16, np.complex64), cache_twiddles=True) is not None
        assert Naive().build_cache(BoxedAllocator(16, np.complex64)) is None

    def test_mismatched_cache(self):
        allocator = BoxedAllocator(16, np.complex64)
        with pytest.raises(PreconditionViolation):
            CooleyTukey().fft(np.zeros(16), allocator.allocate(), allocator, TwiddleCache(8, np.complex64))
        with pytest.raises(PreconditionViolation):
            CooleyTukey().fft(np.zeros(16), allocator.allocate(), allocator, TwiddleCache(16, np.complex128))

    def test_fully_overwrites_spectrum(self):
        allocator = ArrayAllocator(8, np.complex64)
        spectrum = allocator.allocate()
        spectrum[:] = 99.0
        for impl in (CooleyTukey(), Naive()):
            impl.fft(np.zeros(8), spectrum, allocator)
            assert not spectrum.any()
