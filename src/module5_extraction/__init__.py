"""
Module 5: Multi-Frame Extraction

Extracts candidate bitstreams from several sampled frames, combines them by
per-position majority vote, scores the agreement and decodes the payload.

Does NOT sample frames from a video (handled by Module 7).
"""

from .extractor import MultiFrameExtractor
from .metrics import bit_error_rate
from .results import ExtractionResult
from .voting import majority_vote, stack_candidates, vote_confidence


__all__ = [
    'MultiFrameExtractor',
    'ExtractionResult',
    'majority_vote',
    'stack_candidates',
    'vote_confidence',
    'bit_error_rate',
]
