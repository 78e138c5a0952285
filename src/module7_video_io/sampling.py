"""
Frame sampling.

Both sampling specs select frames on a time grid, so embedding and
extraction land on the same frames whatever the source frame rate:
    - EveryNthFrame: one frame every frame_interval / reference_fps seconds
      across the whole duration (embedding)
    - FixedRate: the first K frames of a fixed-rate sampling (extraction)

Selected frames are written as image files into a caller-owned directory.
"""

import itertools
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Union

import cv2

from .errors import CodecError
from .video_loader import iter_frames, probe_video


logger = logging.getLogger(__name__)


def _time_grid(source_fps: float, rate: float) -> Iterator[int]:
    """Distinct frame indices nearest to t = k / rate for k = 0, 1, 2, ..."""
    interval = source_fps / rate
    last = -1
    for k in itertools.count():
        idx = int(round(k * interval))
        if idx > last:
            last = idx
            yield idx


@dataclass(frozen=True)
class EveryNthFrame:
    """
    Every frame_interval-th frame of a reference_fps video, evenly spaced
    across the whole duration.

    The interval is applied in seconds: at 30 fps an interval of 30 selects
    one frame per second, and so it does at 24 or 25 fps.
    """
    frame_interval: int
    reference_fps: float = 30.0

    def __post_init__(self):
        if self.frame_interval < 1:
            raise ValueError(f"frame_interval must be >= 1, got {self.frame_interval}")
        if self.reference_fps <= 0:
            raise ValueError(f"reference_fps must be positive, got {self.reference_fps}")

    @property
    def rate(self) -> float:
        """Samples per second."""
        return self.reference_fps / self.frame_interval

    def indices(self, source_fps: float) -> Iterator[int]:
        if source_fps <= 0:
            return itertools.count(0, self.frame_interval)
        return _time_grid(source_fps, self.rate)


@dataclass(frozen=True)
class FixedRate:
    """First max_frames frames of a sampling at fps frames per second."""
    fps: float
    max_frames: int

    def __post_init__(self):
        if self.fps <= 0:
            raise ValueError(f"fps must be positive, got {self.fps}")
        if self.max_frames < 1:
            raise ValueError(f"max_frames must be >= 1, got {self.max_frames}")

    def indices(self, source_fps: float) -> Iterator[int]:
        if source_fps <= 0:
            return iter(())
        return itertools.islice(_time_grid(source_fps, self.fps), self.max_frames)


SamplingSpec = Union[EveryNthFrame, FixedRate]


@dataclass(frozen=True)
class SampledFrame:
    """One frame image written by sample_frames()."""
    index: int
    timestamp: float  # seconds
    path: str


def sample_frames(
    video_path: str,
    spec: SamplingSpec,
    output_dir: str,
    image_ext: str = ".png"
) -> List[SampledFrame]:
    """
    Decode the selected frames of a video into image files.

    Args:
        video_path: Source video
        spec: EveryNthFrame or FixedRate
        output_dir: Existing directory that receives frame_%04d images
        image_ext: Image format extension (lossless .png by default)

    Returns:
        Sampled frames in temporal order. Empty when the video has no
        decodable frames or an unknown frame rate under FixedRate.

    Raises:
        CodecError: If the video cannot be opened or an image cannot be written
    """
    metadata = probe_video(video_path)
    fps = metadata.fps

    if fps <= 0 and isinstance(spec, FixedRate):
        logger.warning(f"Unknown frame rate for {video_path}; no frames sampled")
        return []

    targets = spec.indices(fps)
    next_idx = next(targets, None)

    out_dir = Path(output_dir)
    sampled: List[SampledFrame] = []

    for frame_idx, frame in iter_frames(video_path):
        if next_idx is None:
            break
        if frame_idx < next_idx:
            continue

        image_path = out_dir / f"frame_{len(sampled) + 1:04d}{image_ext}"
        if not cv2.imwrite(str(image_path), frame):
            raise CodecError(f"Failed to write frame image: {image_path}")

        timestamp = frame_idx / fps if fps > 0 else 0.0
        sampled.append(SampledFrame(index=frame_idx, timestamp=timestamp, path=str(image_path)))
        next_idx = next(targets, None)

    logger.debug(f"Sampled {len(sampled)} frames from {video_path}")
    return sampled
