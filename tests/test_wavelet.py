"""
Unit tests for Module 2: Wavelet Transform
"""

import numpy as np
import pytest

from src.module2_wavelet import (
    WaveletTransform,
    haar_forward_1d,
    haar_forward_2d,
    haar_inverse_1d,
    haar_inverse_2d,
)


class TestHaar1D:
    """Test the 1-D building block."""

    def test_averages_then_differences(self):
        out = haar_forward_1d(np.array([3.0, 1.0, 4.0, 4.0]))
        s = np.sqrt(2.0)
        np.testing.assert_allclose(out, [4 / s, 8 / s, 2 / s, 0.0])

    def test_axis_argument(self):
        data = np.arange(12, dtype=np.float64).reshape(3, 4)
        by_rows = haar_forward_1d(data, axis=1)
        by_cols = haar_forward_1d(data.T, axis=0).T
        np.testing.assert_allclose(by_rows, by_cols)

    def test_inverse(self):
        data = np.random.default_rng(0).normal(size=(5, 8))
        np.testing.assert_allclose(haar_inverse_1d(haar_forward_1d(data)), data, atol=1e-12)


class TestHaar2D:
    """Test the 2-D transform used on luminance blocks."""

    @pytest.mark.parametrize("size", [2, 8, 64, 128])
    def test_invertible(self, size):
        rng = np.random.default_rng(size)
        matrix = rng.uniform(-1000, 1000, size=(size, size))
        restored = haar_inverse_2d(haar_forward_2d(matrix))
        relative = np.abs(restored - matrix).max() / np.abs(matrix).max()
        assert relative < 1e-9

    def test_energy_preserved(self):
        matrix = np.random.default_rng(1).uniform(0, 255, size=(64, 64))
        coefficients = haar_forward_2d(matrix)
        assert np.isclose(np.sum(coefficients ** 2), np.sum(matrix ** 2))

    def test_constant_block_only_has_approximation(self):
        coefficients = haar_forward_2d(np.full((8, 8), 10.0))
        np.testing.assert_allclose(coefficients[:4, :4], 20.0)
        coefficients[:4, :4] = 0.0
        np.testing.assert_allclose(coefficients, 0.0, atol=1e-12)

    def test_shape_and_dtype(self):
        coefficients = haar_forward_2d(np.zeros((16, 16), dtype=np.uint8))
        assert coefficients.shape == (16, 16)
        assert coefficients.dtype == np.float64

    def test_input_not_modified(self):
        matrix = np.random.default_rng(2).normal(size=(8, 8))
        original = matrix.copy()
        haar_inverse_2d(haar_forward_2d(matrix))
        np.testing.assert_array_equal(matrix, original)

    @pytest.mark.parametrize("shape", [(8, 4), (7, 7), (0, 0), (8,)])
    def test_invalid_shapes(self, shape):
        with pytest.raises(ValueError):
            haar_forward_2d(np.zeros(shape))
        with pytest.raises(ValueError):
            haar_inverse_2d(np.zeros(shape))

    def test_wavelet_transform_class(self):
        transform = WaveletTransform()
        matrix = np.random.default_rng(3).normal(size=(32, 32))
        np.testing.assert_allclose(transform.inverse(transform.forward(matrix)), matrix, atol=1e-9)
