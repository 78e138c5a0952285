"""
Watermark engine: the public embed / extract / verify operations.

Embedding:
    probe -> validate -> encode payload -> sample every Nth frame
    -> watermark each frame image -> splice frames back into the video

Extraction:
    sample K frames at a fixed rate -> per-frame candidate bits
    -> majority vote + confidence -> decode payload

All intermediate images live in a per-call scratch directory that is
removed on success and on failure.
"""

import logging
import os
import uuid
from numbers import Integral, Real
from typing import Optional

from ..config import WatermarkConfig, default_config
from ..module1_payload import PayloadCodec, WatermarkPayload
from ..module4_frame_watermark import FrameWatermarker, map_frames
from ..module5_extraction import ExtractionResult, MultiFrameExtractor
from ..module6_verification import VerificationComparator, VerificationResult
from ..module7_video_io import (
    CodecError,
    EveryNthFrame,
    FixedRate,
    UnsupportedOutputError,
    VideoCodec,
    WatermarkedFrame,
)
from .errors import ValidationError
from .results import WatermarkResult
from .scratch import scratch_directory


logger = logging.getLogger(__name__)


def _new_job_id() -> str:
    return uuid.uuid4().hex[:12]


def _check_strength(strength: Optional[float]) -> None:
    if strength is None:
        return
    if isinstance(strength, bool) or not isinstance(strength, Real) or not 0 < strength <= 100:
        raise ValidationError(f"strength must be a number in (0, 100], got {strength!r}")


def _check_key(encryption_key: str) -> None:
    if not isinstance(encryption_key, str) or encryption_key == "":
        raise ValidationError("encryption_key must be a non-empty string")


class WatermarkEngine:
    """
    Embeds, extracts and verifies invisible provenance watermarks.

    Args:
        config: Engine configuration (packaged defaults if None)
        codec: Video collaborator providing probe(), sample_frames() and
            reconstruct_video() and check_output() (OpenCV/ffmpeg VideoCodec
            if None)
    """

    def __init__(self, config: Optional[WatermarkConfig] = None, codec=None):
        self.config = config if config is not None else default_config()
        self.codec = codec if codec is not None else VideoCodec(self.config.video)

        self.payload_codec = PayloadCodec(self.config.payload)
        self.watermarker = FrameWatermarker(self.config.embedding)
        self.extractor = MultiFrameExtractor(self.config, self.watermarker)
        self.comparator = VerificationComparator(self.config.verification)

        self.scratch_root = self.config.video.scratch_root
        self.workers = self.config.system.workers

    def embed_watermark(
        self,
        input_path: str,
        output_path: str,
        payload: WatermarkPayload,
        encryption_key: str,
        strength: Optional[float] = None,
        frame_interval: Optional[int] = None,
        job_id: Optional[str] = None
    ) -> WatermarkResult:
        """
        Embed a payload into every frame_interval-th frame of a video.

        Args:
            input_path: Source video
            output_path: Destination for the watermarked video
            payload: Provenance payload
            encryption_key: Secret used to encrypt the payload
            strength: Embedding strength in (0, 100] (configured if None)
            frame_interval: Embed every Nth frame, counted at the configured
                reference frame rate so the marks follow a time grid
                (configured if None)
            job_id: Identifier used to name the scratch directory

        Returns:
            WatermarkResult

        Raises:
            ValidationError: On invalid options, an output container that
                cannot be written losslessly, zero or unknown duration, or a
                payload too large for the embedding zones
            CodecError: If sampling or reconstruction fails
            FrameWatermarkError: If a frame image cannot be read or written
        """
        if not isinstance(payload, WatermarkPayload):
            raise ValidationError(f"payload must be a WatermarkPayload, got {type(payload).__name__}")
        _check_key(encryption_key)
        _check_strength(strength)

        if frame_interval is None:
            frame_interval = self.config.sampling.frame_interval
        if isinstance(frame_interval, bool) or not isinstance(frame_interval, Integral) or frame_interval < 1:
            raise ValidationError(f"frame_interval must be a positive integer, got {frame_interval!r}")

        try:
            self.codec.check_output(output_path)
        except UnsupportedOutputError as e:
            raise ValidationError(str(e)) from e

        metadata = self.codec.probe(input_path)
        if not metadata.duration or metadata.duration <= 0:
            raise ValidationError(f"Invalid video duration for {input_path}: {metadata.duration}")

        bits = self.payload_codec.encode(payload, encryption_key)
        capacity = self.watermarker.embedder.capacity
        if len(bits) > capacity:
            raise ValidationError(
                f"Encoded payload is {len(bits)} bits but the embedding zones hold {capacity}"
            )

        spec = EveryNthFrame(int(frame_interval), self.config.sampling.reference_fps)
        job_id = job_id or _new_job_id()
        with scratch_directory(self.scratch_root, "watermark", job_id) as work_dir:
            frames_dir = os.path.join(work_dir, "frames")
            marked_dir = os.path.join(work_dir, "watermarked")
            os.makedirs(frames_dir)
            os.makedirs(marked_dir)

            logger.info("Extracting frames for watermarking...")
            sampled = self.codec.sample_frames(input_path, spec, frames_dir)
            if len(sampled) == 0:
                raise CodecError(f"No frames could be sampled from {input_path}")

            logger.info(f"Watermarking {len(sampled)} frames...")

            def mark(frame):
                marked_path = os.path.join(marked_dir, os.path.basename(frame.path))
                self.watermarker.embed_file(frame.path, marked_path, bits, strength)
                return WatermarkedFrame(timestamp=frame.timestamp, image_path=marked_path)

            marked = map_frames(mark, sampled, self.workers)

            logger.info("Reconstructing watermarked video...")
            self.codec.reconstruct_video(input_path, marked, output_path, work_dir=work_dir)

        logger.info(f"Watermarked {len(marked)} frames into {output_path}")
        return WatermarkResult(
            success=True,
            payload_hash=payload.payload_hash(),
            frames_watermarked=len(marked),
        )

    def extract_watermark(
        self,
        video_path: str,
        encryption_key: str,
        expected_payload_bit_length: int,
        strength: Optional[float] = None,
        job_id: Optional[str] = None
    ) -> ExtractionResult:
        """
        Recover a payload from a (possibly) watermarked video.

        Args:
            video_path: Video to inspect
            encryption_key: Secret used at embed time
            expected_payload_bit_length: Length of the embedded bitstream
            strength: Strength used at embed time (configured if None)
            job_id: Identifier used to name the scratch directory

        Returns:
            ExtractionResult; an absent or damaged watermark yields
            success=False, never an exception

        Raises:
            ValidationError: If the bit length or strength is invalid
            CodecError: If the video cannot be opened or sampled
        """
        _check_key(encryption_key)
        _check_strength(strength)
        if (
            isinstance(expected_payload_bit_length, bool)
            or not isinstance(expected_payload_bit_length, Integral)
            or expected_payload_bit_length < 1
        ):
            raise ValidationError(
                f"expected_payload_bit_length must be a positive integer, "
                f"got {expected_payload_bit_length!r}"
            )

        sampling = self.config.sampling
        spec = FixedRate(sampling.extraction_fps, sampling.extraction_frames)

        job_id = job_id or _new_job_id()
        with scratch_directory(self.scratch_root, "extract", job_id) as work_dir:
            sampled = self.codec.sample_frames(video_path, spec, work_dir)
            return self.extractor.extract(
                [frame.path for frame in sampled],
                encryption_key,
                int(expected_payload_bit_length),
                strength,
            )

    def verify_watermark(
        self,
        video_path: str,
        expected_payload: WatermarkPayload,
        encryption_key: str,
        expected_payload_bit_length: Optional[int] = None,
        strength: Optional[float] = None,
        job_id: Optional[str] = None
    ) -> VerificationResult:
        """
        Check whether a video carries the expected payload.

        The bit length defaults to the exact encoded length of
        expected_payload under the current payload configuration.

        Returns:
            VerificationResult
        """
        if not isinstance(expected_payload, WatermarkPayload):
            raise ValidationError(
                f"expected_payload must be a WatermarkPayload, got {type(expected_payload).__name__}"
            )
        if expected_payload_bit_length is None:
            expected_payload_bit_length = self.payload_codec.encoded_bit_length(expected_payload)

        return self.comparator.verify(
            expected_payload,
            run_extraction=lambda: self.extract_watermark(
                video_path,
                encryption_key,
                expected_payload_bit_length,
                strength=strength,
                job_id=job_id,
            ),
        )


def embed_watermark(
    input_path: str,
    output_path: str,
    payload: WatermarkPayload,
    encryption_key: str,
    strength: Optional[float] = None,
    frame_interval: Optional[int] = None,
    config: Optional[WatermarkConfig] = None
) -> WatermarkResult:
    return WatermarkEngine(config).embed_watermark(
        input_path, output_path, payload, encryption_key, strength, frame_interval
    )


def extract_watermark(
    video_path: str,
    encryption_key: str,
    expected_payload_bit_length: int,
    strength: Optional[float] = None,
    config: Optional[WatermarkConfig] = None
) -> ExtractionResult:
    return WatermarkEngine(config).extract_watermark(
        video_path, encryption_key, expected_payload_bit_length, strength
    )


def verify_watermark(
    video_path: str,
    expected_payload: WatermarkPayload,
    encryption_key: str,
    expected_payload_bit_length: Optional[int] = None,
    strength: Optional[float] = None,
    config: Optional[WatermarkConfig] = None
) -> VerificationResult:
    return WatermarkEngine(config).verify_watermark(
        video_path, expected_payload, encryption_key, expected_payload_bit_length, strength
    )
