"""
Multi-frame extractor.

Pipeline:
    sampled frame images
    -> per-frame candidate bits (Module 4 extraction direction)
    -> per-position majority vote across frames
    -> confidence from vote agreement
    -> payload decode (Module 1)
"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..config import WatermarkConfig, default_config
from ..module1_payload import PayloadCodec
from ..module4_frame_watermark import FrameWatermarker, map_frames
from .results import ExtractionResult
from .voting import majority_vote, stack_candidates, vote_confidence


logger = logging.getLogger(__name__)


class MultiFrameExtractor:
    """
    Recovers a payload from several independently watermarked frames.

    The frame list is fixed before voting starts, so the vote is
    deterministic for a given set of frames.
    """

    def __init__(
        self,
        config: Optional[WatermarkConfig] = None,
        watermarker: Optional[FrameWatermarker] = None
    ):
        self.config = config if config is not None else default_config()
        self.watermarker = watermarker if watermarker is not None else FrameWatermarker(self.config.embedding)
        self.payload_codec = PayloadCodec(self.config.payload)
        self.agreement_threshold = self.config.extraction.agreement_threshold
        self.workers = self.config.system.workers

    def collect_candidates(
        self,
        frame_paths: Sequence[str],
        expected_bit_length: int,
        strength: Optional[float] = None
    ) -> np.ndarray:
        """
        Extract one candidate bit array per frame image.

        Returns:
            (F, expected_bit_length) uint8 array

        Raises:
            FrameReadError: If a frame image cannot be decoded
        """
        def extract_one(path):
            return self.watermarker.extract_file(path, expected_bit_length, strength)

        candidates = map_frames(extract_one, list(frame_paths), self.workers)
        return stack_candidates(candidates)

    def vote(self, candidates: np.ndarray):
        """
        Combine candidates into a final bitstream.

        Returns:
            Tuple of (final_bits, confidence)
        """
        final_bits = majority_vote(candidates)
        confidence = vote_confidence(candidates, final_bits, self.agreement_threshold)
        return final_bits, confidence

    def extract(
        self,
        frame_paths: Sequence[str],
        encryption_key: str,
        expected_bit_length: int,
        strength: Optional[float] = None
    ) -> ExtractionResult:
        """
        Extract and decode the payload carried by the given frames.

        Args:
            frame_paths: Sampled frame images, in sampling order
            encryption_key: Key used at embed time
            expected_bit_length: Length of the embedded bitstream
            strength: Strength used at embed time

        Returns:
            ExtractionResult; success is False when the payload cannot be
            authenticated. Never raises for a missing or damaged watermark.
        """
        if len(frame_paths) == 0:
            logger.info("No frames sampled; nothing to extract")
            return ExtractionResult.empty()

        logger.info(f"Extracting candidate bits from {len(frame_paths)} frames...")
        candidates = self.collect_candidates(frame_paths, expected_bit_length, strength)

        final_bits, confidence = self.vote(candidates)
        payload = self.payload_codec.decode(final_bits, encryption_key)

        logger.info(
            f"Watermark {'recovered' if payload is not None else 'not recovered'} "
            f"(confidence {confidence:.1f}%, {len(frame_paths)} frames)"
        )

        return ExtractionResult(
            success=payload is not None,
            payload=payload,
            confidence=confidence,
            frames_analyzed=len(frame_paths),
        )
