"""
Cross-frame majority voting.

Candidates are stacked into an (F, B) array: F sampled frames, B bit
positions. Each position takes the majority value across frames (ties
resolved to 0).
"""

import numpy as np


def stack_candidates(candidates) -> np.ndarray:
    """Stack per-frame bit arrays of equal length into an (F, B) uint8 array."""
    lengths = {len(bits) for bits in candidates}
    if len(lengths) > 1:
        raise ValueError(f"Candidate bit arrays differ in length: {sorted(lengths)}")
    return np.vstack([np.asarray(bits, dtype=np.uint8) & 1 for bits in candidates])


def majority_vote(candidates: np.ndarray) -> np.ndarray:
    """
    Per-position majority across frames.

    Args:
        candidates: (F, B) bit array, F >= 1

    Returns:
        uint8 bits (B,)
    """
    num_frames = candidates.shape[0]
    ones = candidates.sum(axis=0, dtype=np.int64)
    return (2 * ones > num_frames).astype(np.uint8)


def vote_confidence(
    candidates: np.ndarray,
    final_bits: np.ndarray,
    agreement_threshold: float = 0.7
) -> float:
    """
    Share of positions where frames agree strongly with the vote.

    A position counts as consistent when more than agreement_threshold of
    the frames carry the voted value.

    Returns:
        Confidence in [0, 100]
    """
    num_frames, num_bits = candidates.shape
    if num_bits == 0:
        return 0.0
    agreeing = (candidates == final_bits[np.newaxis, :]).sum(axis=0)
    consistent = np.count_nonzero(agreeing > agreement_threshold * num_frames)
    return float(consistent) / num_bits * 100.0
