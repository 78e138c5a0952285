"""
Video reconstruction.

Rebuilds a full-length video from the original and a set of watermarked
frame images. Every original frame is re-encoded losslessly; frames whose
timestamp matches a watermarked image are replaced by that image.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence

import cv2

from ..config import VideoConfig
from .errors import CodecError, UnsupportedOutputError
from .ffmpeg import mux_with_source, resolve_ffmpeg
from .video_loader import iter_frames, probe_video


logger = logging.getLogger(__name__)

INTERMEDIATE_FOURCC = "FFV1"
INTERMEDIATE_EXT = ".avi"


@dataclass(frozen=True)
class WatermarkedFrame:
    """A watermarked frame image and the timestamp it replaces."""
    timestamp: float  # seconds
    image_path: str


def _replacement_map(frames: Sequence[WatermarkedFrame], fps: float, num_frames: int) -> Dict[int, str]:
    replacements = {}
    for frame in frames:
        idx = int(round(frame.timestamp * fps))
        if idx < 0 or (num_frames > 0 and idx >= num_frames):
            raise CodecError(f"Timestamp {frame.timestamp:.3f}s does not match any frame")
        replacements[idx] = frame.image_path
    return replacements


def _load_replacement(path: str, width: int, height: int):
    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise CodecError(f"Failed to read watermarked frame: {path}")
    if image.shape[:2] != (height, width):
        raise CodecError(
            f"Watermarked frame {path} is {image.shape[1]}x{image.shape[0]}, "
            f"expected {width}x{height}"
        )
    return image


def write_spliced_video(
    original_path: str,
    replacements: Dict[int, str],
    output_path: str,
    fourcc: str
) -> int:
    """
    Re-encode original_path into output_path, substituting replaced frames.

    Returns:
        Number of frames written

    Raises:
        CodecError: On open, read, size or write failures
    """
    metadata = probe_video(original_path)
    if metadata.fps <= 0:
        raise CodecError(f"Unknown frame rate for {original_path}")

    writer = cv2.VideoWriter(
        output_path,
        cv2.VideoWriter_fourcc(*fourcc),
        metadata.fps,
        (metadata.width, metadata.height)
    )
    if not writer.isOpened():
        raise CodecError(f"Failed to create video writer for {output_path} (fourcc {fourcc})")

    written = 0
    pending = dict(replacements)
    try:
        for frame_idx, frame in iter_frames(original_path):
            path = pending.pop(frame_idx, None)
            if path is not None:
                frame = _load_replacement(path, metadata.width, metadata.height)
            writer.write(frame)
            written += 1
    finally:
        writer.release()

    if pending:
        raise CodecError(f"Frames {sorted(pending)} were never decoded from {original_path}")
    if written == 0 or not os.path.exists(output_path):
        raise CodecError(f"Video file was not created: {output_path}")
    return written


def check_output(output_path: str, config: Optional[VideoConfig] = None) -> Optional[str]:
    """
    Check that output_path can be written without lossy re-encoding.

    Returns:
        The ffmpeg binary that will be used, or None for a video-only output

    Raises:
        UnsupportedOutputError: If the container has no lossless path
            (unknown extension, or an ffmpeg container without ffmpeg)
        CodecError: If a configured ffmpeg binary does not exist
    """
    config = config if config is not None else VideoConfig()
    suffix = Path(output_path).suffix.lower()
    ffmpeg = resolve_ffmpeg(config)

    if config.fourcc_for(output_path) is not None:
        return ffmpeg
    if not config.needs_ffmpeg(output_path):
        supported = sorted(set(dict(config.fourcc_by_extension)) | set(config.ffmpeg_extensions))
        raise UnsupportedOutputError(
            f"Unsupported output container {suffix or '(none)'}; use one of {supported}"
        )
    if ffmpeg is None:
        raise UnsupportedOutputError(
            f"{suffix} output needs ffmpeg for lossless encoding; "
            f"install ffmpeg or write {sorted(dict(config.fourcc_by_extension))} instead"
        )
    return ffmpeg


def reconstruct_video(
    original_path: str,
    frames: Sequence[WatermarkedFrame],
    output_path: str,
    work_dir: Optional[str] = None,
    config: Optional[VideoConfig] = None
) -> None:
    """
    Produce the watermarked output video.

    Every frame is first written losslessly with OpenCV. ffmpeg, when
    available, then adds the original audio and metadata, encoding the video
    stream with ffmpeg_video_args for containers OpenCV does not write.

    Args:
        original_path: Source video
        frames: Watermarked frame images with their source timestamps
        output_path: Destination file; its extension picks the encoder
        work_dir: Directory for the intermediate video-only file
        config: Video settings (ffmpeg binary, fourcc map, ffmpeg encoder)

    Raises:
        UnsupportedOutputError: If the output container has no lossless path
        CodecError: If any timestamp does not match a source frame, an image
            has the wrong size, or encoding / muxing fails
    """
    config = config if config is not None else VideoConfig()
    ffmpeg = check_output(output_path, config)

    metadata = probe_video(original_path)
    replacements = _replacement_map(frames, metadata.fps, metadata.num_frames)

    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    owns_work_dir = work_dir is None
    if owns_work_dir:
        work_dir = tempfile.mkdtemp(prefix="vidchain_recon_")

    try:
        fourcc = config.fourcc_for(output_path)
        if fourcc is not None:
            video_only = os.path.join(work_dir, f"video_only{Path(output_path).suffix}")
        else:
            fourcc = INTERMEDIATE_FOURCC
            video_only = os.path.join(work_dir, f"video_only{INTERMEDIATE_EXT}")

        written = write_spliced_video(original_path, replacements, video_only, fourcc)
        logger.debug(f"Encoded {written} frames ({len(replacements)} replaced) with {fourcc}")

        if ffmpeg is None:
            logger.warning("ffmpeg not found; writing video stream only (audio and metadata dropped)")
            shutil.move(video_only, output_path)
        elif config.needs_ffmpeg(output_path):
            mux_with_source(ffmpeg, video_only, original_path, output_path, config.ffmpeg_video_args)
        else:
            mux_with_source(ffmpeg, video_only, original_path, output_path)
    finally:
        if owns_work_dir:
            shutil.rmtree(work_dir, ignore_errors=True)
