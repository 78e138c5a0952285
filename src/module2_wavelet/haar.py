"""
Single-level 2-D Haar wavelet transform.

Each 1-D line of length N becomes N/2 averages followed by N/2 differences,
scaled by 1/sqrt(2) so the transform is orthonormal and exactly invertible.
The 2-D forward transform runs along rows, then columns; the inverse undoes
columns, then rows. The coefficient matrix keeps the input's dimensions.

    [ LL | HL ]
    [----+----]
    [ LH | HH ]
"""

import numpy as np


SQRT2 = np.sqrt(2.0)


def _validate(matrix: np.ndarray) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Expected a square 2-D matrix, got shape {matrix.shape}")
    if matrix.shape[0] == 0 or matrix.shape[0] % 2 != 0:
        raise ValueError(f"Matrix size must be even and non-zero, got {matrix.shape[0]}")
    return matrix


def haar_forward_1d(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Forward 1-D Haar step along one axis.

    Args:
        data: Array whose length along axis is even
        axis: Axis to transform

    Returns:
        Array of the same shape: [averages | differences] along axis
    """
    lines = np.moveaxis(np.asarray(data, dtype=np.float64), axis, -1)
    even = lines[..., 0::2]
    odd = lines[..., 1::2]
    out = np.concatenate([(even + odd) / SQRT2, (even - odd) / SQRT2], axis=-1)
    return np.moveaxis(out, -1, axis)


def haar_inverse_1d(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """Inverse of haar_forward_1d along the same axis."""
    lines = np.moveaxis(np.asarray(data, dtype=np.float64), axis, -1)
    half = lines.shape[-1] // 2
    avg = lines[..., :half]
    diff = lines[..., half:]

    out = np.empty_like(lines)
    out[..., 0::2] = (avg + diff) / SQRT2
    out[..., 1::2] = (avg - diff) / SQRT2
    return np.moveaxis(out, -1, axis)


def haar_forward_2d(matrix: np.ndarray) -> np.ndarray:
    """
    Forward single-level 2-D Haar transform.

    Args:
        matrix: Real N x N matrix, N even

    Returns:
        N x N float64 coefficient matrix

    Raises:
        ValueError: If the matrix is not square with an even size
    """
    matrix = _validate(matrix)
    rows_done = haar_forward_1d(matrix, axis=1)
    return haar_forward_1d(rows_done, axis=0)


def haar_inverse_2d(coefficients: np.ndarray) -> np.ndarray:
    """
    Inverse single-level 2-D Haar transform.

    Raises:
        ValueError: If the matrix is not square with an even size
    """
    coefficients = _validate(coefficients)
    columns_done = haar_inverse_1d(coefficients, axis=0)
    return haar_inverse_1d(columns_done, axis=1)
