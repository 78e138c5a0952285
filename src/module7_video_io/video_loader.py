"""
Video probing and frame reading.
"""

import os
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
import cv2

from .errors import CodecError


@dataclass(frozen=True)
class VideoMetadata:
    """Metadata for a video file"""
    fps: float
    width: int
    height: int
    num_frames: int
    duration: float  # seconds; 0.0 when unknown
    codec: str


def _open(path: str) -> cv2.VideoCapture:
    if not os.path.exists(path):
        raise CodecError(f"Video file not found: {path}")

    cap = cv2.VideoCapture(str(path))
    if not cap.isOpened():
        cap.release()
        raise CodecError(f"Unable to open video file: {path}. Format may be unsupported.")
    return cap


def probe_video(path: str) -> VideoMetadata:
    """
    Read container metadata without decoding frames.

    An unknown frame rate or frame count yields duration 0.0 rather than an
    error; callers decide whether that is acceptable.

    Raises:
        CodecError: If the file is missing or cannot be opened
    """
    cap = _open(path)
    try:
        fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        num_frames = int(cap.get(cv2.CAP_PROP_FRAME_COUNT))
        fourcc = int(cap.get(cv2.CAP_PROP_FOURCC))
    finally:
        cap.release()

    codec_str = "".join([chr((fourcc >> 8 * i) & 0xFF) for i in range(4)])
    duration = num_frames / fps if fps > 0 and num_frames > 0 else 0.0

    return VideoMetadata(
        fps=fps,
        width=width,
        height=height,
        num_frames=max(num_frames, 0),
        duration=duration,
        codec=codec_str,
    )


def iter_frames(path: str) -> Iterator[Tuple[int, np.ndarray]]:
    """
    Decode frames sequentially.

    Yields:
        (frame_index, BGR uint8 frame) as decoded by OpenCV

    Raises:
        CodecError: If the file is missing or cannot be opened
    """
    cap = _open(path)
    try:
        frame_idx = 0
        while True:
            ret, frame = cap.read()
            if not ret:
                break
            yield frame_idx, frame
            frame_idx += 1
    finally:
        cap.release()
