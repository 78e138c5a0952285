"""
Core Quantization Index Modulation (QIM) operations on scalar coefficients.

Embedding:
    q = round(c / step) * step
    c' = q            if bit == 0
    c' = q + step / 2 if bit == 1

Extraction:
    dev = c - round(c / step) * step
    bit = 1 if |dev| > decision_boundary * step else 0
"""

import numpy as np


def qim_embed(values: np.ndarray, bits: np.ndarray, step: float) -> np.ndarray:
    """
    Embed one bit per value.

    Args:
        values: Coefficients (N,)
        bits: Bits to embed (N,), values 0 or 1
        step: Quantization step size

    Returns:
        Modified coefficients (N,)
    """
    if step <= 0:
        raise ValueError(f"QIM step must be positive, got {step}")
    quantized = np.round(np.asarray(values, dtype=np.float64) / step) * step
    return quantized + (np.asarray(bits, dtype=np.float64) * step / 2.0)


def qim_extract(values: np.ndarray, step: float, decision_boundary: float = 0.25) -> np.ndarray:
    """
    Extract one bit per value.

    A value sitting on the bit-1 lattice is half a step from the nearest
    bit-0 level, so the deviation is compared in absolute value.

    Args:
        values: Coefficients (N,)
        step: Quantization step size used at embed time
        decision_boundary: Threshold as a fraction of step

    Returns:
        uint8 bits (N,)
    """
    if step <= 0:
        raise ValueError(f"QIM step must be positive, got {step}")
    values = np.asarray(values, dtype=np.float64)
    deviation = values - np.round(values / step) * step
    return (np.abs(deviation) > decision_boundary * step).astype(np.uint8)
