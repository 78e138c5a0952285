"""
Per-frame watermarking pipeline.

Embedding direction:
    frame -> N x N block (area) -> luma -> Haar forward -> QIM embed
    -> Haar inverse -> luma delta -> upscale delta -> add to R, G, B

Extraction direction:
    frame -> N x N block (area) -> luma -> Haar forward -> QIM extract
"""

from typing import Optional

import numpy as np

from ..config import EmbeddingConfig
from ..module2_wavelet import haar_forward_2d, haar_inverse_2d
from ..module3_qim_embedding import CoefficientEmbedder
from .image_io import read_frame, write_frame
from .preprocessing import Frame, apply_luma_delta, rgb_to_luma, to_block, upscale_delta


class FrameWatermarker:
    """
    Embeds and extracts a bitstream in the luminance of single frames.

    Stateless apart from its configuration; frames can be processed
    concurrently with one shared instance.
    """

    def __init__(self, config: Optional[EmbeddingConfig] = None):
        self.config = config if config is not None else EmbeddingConfig()
        self.block_size = self.config.block_size
        self.embedder = CoefficientEmbedder(self.config)

    def _block_luma(self, frame: Frame) -> np.ndarray:
        return rgb_to_luma(to_block(frame, self.block_size))

    def embed_frame(
        self,
        frame: Frame,
        bits: np.ndarray,
        strength: Optional[float] = None
    ) -> Frame:
        """
        Watermark one RGB frame.

        Args:
            frame: RGB uint8 frame (H, W, 3)
            bits: Bitstream to embed
            strength: Embedding strength (configured strength if None)

        Returns:
            Watermarked RGB uint8 frame with the same shape
        """
        luma = self._block_luma(frame)

        coefficients = haar_forward_2d(luma)
        self.embedder.embed(coefficients, bits, strength)
        marked_luma = haar_inverse_2d(coefficients)

        delta = upscale_delta(marked_luma - luma, frame.shape[:2])
        return apply_luma_delta(frame, delta)

    def extract_frame(
        self,
        frame: Frame,
        expected_bit_count: int,
        strength: Optional[float] = None
    ) -> np.ndarray:
        """
        Read a candidate bit array from one RGB frame.

        Returns:
            uint8 bit array (expected_bit_count,)
        """
        coefficients = haar_forward_2d(self._block_luma(frame))
        return self.embedder.extract(coefficients, expected_bit_count, strength)

    def embed_file(
        self,
        input_path: str,
        output_path: str,
        bits: np.ndarray,
        strength: Optional[float] = None
    ) -> None:
        """
        Decode a frame image, watermark it and encode the result.

        Raises:
            FrameReadError: If the input image cannot be decoded
            FrameWriteError: If the output image cannot be written
        """
        frame = read_frame(input_path)
        write_frame(output_path, self.embed_frame(frame, bits, strength))

    def extract_file(
        self,
        path: str,
        expected_bit_count: int,
        strength: Optional[float] = None
    ) -> np.ndarray:
        """
        Decode a frame image and read a candidate bit array from it.

        Raises:
            FrameReadError: If the image cannot be decoded
        """
        return self.extract_frame(read_frame(path), expected_bit_count, strength)
