"""
Bit-level comparison metrics for extracted bitstreams.
"""

import numpy as np


def bit_error_rate(original: np.ndarray, received: np.ndarray) -> float:
    """
    Fraction of positions where two bit arrays differ.

    Raises:
        ValueError: If inputs have different lengths
    """
    original = np.asarray(original, dtype=np.uint8)
    received = np.asarray(received, dtype=np.uint8)
    if original.shape != received.shape:
        raise ValueError(
            f"Length mismatch: original={original.shape}, received={received.shape}"
        )
    if original.size == 0:
        return 0.0
    return float(np.count_nonzero(original != received)) / original.size
