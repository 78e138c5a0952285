"""
Corruption helpers for robustness tests.

WARNING: these introduce randomness and are meant for tests and
evaluation only, never for the embedding or extraction path.
"""

from typing import Iterable, Optional

import numpy as np


def flip_bits(bits: np.ndarray, positions: Iterable[int]) -> np.ndarray:
    """Copy of bits with the given positions inverted."""
    flipped = np.array(bits, dtype=np.uint8, copy=True)
    for pos in positions:
        flipped[pos] ^= 1
    return flipped


def randomize_candidates(
    candidates: np.ndarray,
    corrupted_fraction: float,
    seed: Optional[int] = None
) -> np.ndarray:
    """
    Replace a fraction of frame candidates with uniformly random bits.

    Simulates frames whose watermark was destroyed (re-encoding, scene cut,
    cropping) while others still carry it.

    Args:
        candidates: (F, B) bit array
        corrupted_fraction: Share of frames to replace, in [0, 1]
        seed: Random seed for reproducibility

    Returns:
        New (F, B) array
    """
    if not 0.0 <= corrupted_fraction <= 1.0:
        raise ValueError(f"corrupted_fraction must be in [0, 1], got {corrupted_fraction}")

    rng = np.random.default_rng(seed)
    corrupted = np.array(candidates, dtype=np.uint8, copy=True)
    num_frames, num_bits = corrupted.shape
    count = int(round(corrupted_fraction * num_frames))

    for frame_idx in rng.choice(num_frames, size=count, replace=False):
        corrupted[frame_idx] = rng.integers(0, 2, size=num_bits, dtype=np.uint8)

    return corrupted
