"""
Coefficient embedder.

Writes a bitstream into the configured embedding zones of a wavelet
coefficient matrix with QIM, and reads it back.
"""

from typing import Optional

import numpy as np

from ..config import EmbeddingConfig
from .qim_core import qim_embed, qim_extract
from .zones import distinct_capacity, tile_slices


class CoefficientEmbedder:
    """
    QIM embedder over square tiles of a coefficient matrix.

    Notes:
        - Bits are written tile by tile in configured band order, row-major
          inside each tile, until the bits or the tiles run out
        - Each tile is read from the matrix as already modified by earlier
          tiles, so repeated tiles overwrite earlier bits
        - Deterministic: same inputs -> same outputs
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        self.config = config if config is not None else EmbeddingConfig()
        self.block_size = self.config.block_size
        self.zone_size = self.config.zone_size
        self.bands = self.config.bands
        self.decision_boundary = self.config.decision_boundary

    @property
    def capacity(self) -> int:
        """Bits that survive embedding without being overwritten."""
        return distinct_capacity(self.bands, self.zone_size)

    def _check_shape(self, coefficients: np.ndarray) -> None:
        if coefficients.shape != (self.block_size, self.block_size):
            raise ValueError(
                f"Coefficient matrix must be {self.block_size}x{self.block_size}, "
                f"got {coefficients.shape}"
            )

    def embed(
        self,
        coefficients: np.ndarray,
        bits: np.ndarray,
        strength: Optional[float] = None
    ) -> int:
        """
        Embed bits into coefficients in place.

        Args:
            coefficients: N x N float coefficient matrix (modified in place)
            bits: Bit array (0/1)
            strength: Embedding strength; step = strength * step_scale

        Returns:
            Number of bits written (min(len(bits), total zone positions))
        """
        self._check_shape(coefficients)
        step = self.config.step_for(strength)
        bits = np.asarray(bits, dtype=np.uint8)
        tile_area = self.zone_size * self.zone_size

        bit_index = 0
        for band in self.bands:
            if bit_index >= len(bits):
                break

            rows, cols = tile_slices(band, self.zone_size)
            tile = coefficients[rows, cols]
            take = min(tile_area, len(bits) - bit_index)

            local_rows, local_cols = np.divmod(np.arange(take), self.zone_size)
            values = tile[local_rows, local_cols]
            tile[local_rows, local_cols] = qim_embed(values, bits[bit_index:bit_index + take], step)

            bit_index += take

        return bit_index

    def extract(
        self,
        coefficients: np.ndarray,
        expected_bit_count: int,
        strength: Optional[float] = None
    ) -> np.ndarray:
        """
        Extract bits in the same scan order as embed().

        Args:
            coefficients: N x N coefficient matrix
            expected_bit_count: Number of bits to read (REQUIRED, no inference)
            strength: Strength used at embed time

        Returns:
            uint8 bit array (expected_bit_count,); positions beyond the zone
            capacity are padded with zeros
        """
        self._check_shape(coefficients)
        step = self.config.step_for(strength)
        bits = np.zeros(expected_bit_count, dtype=np.uint8)
        tile_area = self.zone_size * self.zone_size

        bit_index = 0
        for band in self.bands:
            if bit_index >= expected_bit_count:
                break

            rows, cols = tile_slices(band, self.zone_size)
            take = min(tile_area, expected_bit_count - bit_index)
            values = coefficients[rows, cols].reshape(-1)[:take]
            bits[bit_index:bit_index + take] = qim_extract(values, step, self.decision_boundary)

            bit_index += take

        return bits
