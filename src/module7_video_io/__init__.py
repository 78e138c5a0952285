"""
Module 7: Video I/O

Probing, frame sampling and reconstruction of watermarked videos. OpenCV
decodes and encodes frames losslessly; ffmpeg, when available, carries the
original audio and metadata over to the output and encodes .mp4/.mov files.
"""

from typing import List, Optional, Sequence

from ..config import VideoConfig
from .errors import CodecError, UnsupportedOutputError
from .sampling import EveryNthFrame, FixedRate, SampledFrame, SamplingSpec, sample_frames as _sample_frames
from .video_loader import VideoMetadata, iter_frames, probe_video
from .video_writer import WatermarkedFrame, check_output as _check_output, reconstruct_video as _reconstruct_video


class VideoCodec:
    """Video operations used by the watermark engine."""

    def __init__(self, config: Optional[VideoConfig] = None):
        self.config = config if config is not None else VideoConfig()

    def probe(self, path: str) -> VideoMetadata:
        """
        Read duration, frame rate and size.

        Raises:
            CodecError: If the file is missing or cannot be opened
        """
        return probe_video(path)

    def sample_frames(self, path: str, spec: SamplingSpec, output_dir: str) -> List[SampledFrame]:
        """
        Write the frames selected by spec into output_dir.

        Raises:
            CodecError: If decoding or image writing fails
        """
        return _sample_frames(path, spec, output_dir, self.config.frame_image_ext)

    def check_output(self, output_path: str) -> None:
        """
        Fail fast when output_path cannot be written losslessly.

        Raises:
            UnsupportedOutputError: If the container has no lossless path
            CodecError: If a configured ffmpeg binary does not exist
        """
        _check_output(output_path, self.config)

    def reconstruct_video(
        self,
        original_path: str,
        frames: Sequence[WatermarkedFrame],
        output_path: str,
        work_dir: Optional[str] = None
    ) -> None:
        """
        Splice watermarked frames into a copy of the original video.

        Raises:
            CodecError: If reconstruction fails
        """
        _reconstruct_video(original_path, frames, output_path, work_dir, self.config)


__all__ = [
    'CodecError',
    'EveryNthFrame',
    'FixedRate',
    'SampledFrame',
    'SamplingSpec',
    'UnsupportedOutputError',
    'VideoCodec',
    'VideoMetadata',
    'WatermarkedFrame',
    'iter_frames',
    'probe_video',
]
