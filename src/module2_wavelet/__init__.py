"""
Module 2: Wavelet Transform

Forward/inverse single-level orthonormal 2-D Haar transform over a square
luminance block.
"""

from .haar import haar_forward_1d, haar_forward_2d, haar_inverse_1d, haar_inverse_2d


class WaveletTransform:
    """2-D Haar transform with the forward/inverse pair as methods."""

    def forward(self, matrix):
        return haar_forward_2d(matrix)

    def inverse(self, coefficients):
        return haar_inverse_2d(coefficients)


__all__ = [
    'WaveletTransform',
    'haar_forward_1d',
    'haar_inverse_1d',
    'haar_forward_2d',
    'haar_inverse_2d',
]
