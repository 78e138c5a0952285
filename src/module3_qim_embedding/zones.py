"""
Embedding-zone layout inside the coefficient matrix.

The N x N coefficient matrix is viewed as a 4x4 grid of square tiles of
side N/4. Each configured band names one tile by (row, col); tile (1, 1)
spans N/4..N/2 on both axes. Bands are visited in configured order and
each tile is scanned row-major.

Listing the same tile more than once revisits the same coefficients, which
reproduces the legacy layout where every band wrote to one region.
"""

from typing import Sequence, Tuple


SHARED_ZONE_BANDS = ((1, 1), (1, 1), (1, 1), (1, 1))


def tile_slices(band: Tuple[int, int], zone_size: int) -> Tuple[slice, slice]:
    row, col = band
    return (
        slice(row * zone_size, (row + 1) * zone_size),
        slice(col * zone_size, (col + 1) * zone_size),
    )


def distinct_capacity(bands: Sequence[Tuple[int, int]], zone_size: int) -> int:
    """Number of bits that can be embedded without overwriting each other."""
    return len(set(bands)) * zone_size * zone_size
