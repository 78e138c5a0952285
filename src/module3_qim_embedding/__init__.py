"""
Module 3: QIM Coefficient Embedding

Quantization-index-modulation embedding and extraction of a bitstream into
fixed zones of a wavelet coefficient matrix.
"""

from .embedder import CoefficientEmbedder
from .qim_core import qim_embed, qim_extract
from .zones import SHARED_ZONE_BANDS, distinct_capacity, tile_slices


__all__ = [
    'CoefficientEmbedder',
    'qim_embed',
    'qim_extract',
    'SHARED_ZONE_BANDS',
    'distinct_capacity',
    'tile_slices',
]
