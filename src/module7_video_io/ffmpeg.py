"""
ffmpeg helpers.

ffmpeg carries the original audio and container metadata over to the
reconstructed video, and encodes containers OpenCV cannot write losslessly.
"""

import os
import shutil
import subprocess
from typing import List, Optional, Sequence

from ..config import VideoConfig
from .errors import CodecError


def find_ffmpeg(configured: Optional[str] = None) -> Optional[str]:
    """
    Resolve the ffmpeg binary: config value, then $FFMPEG_BIN, then PATH.

    Returns:
        Path of the binary, or None when none is configured and none is on PATH

    Raises:
        CodecError: If an explicitly configured binary does not exist
    """
    candidate = configured or os.environ.get("FFMPEG_BIN")
    if candidate:
        resolved = shutil.which(candidate) or (candidate if os.path.isfile(candidate) else None)
        if resolved is None:
            raise CodecError(f"Configured ffmpeg binary not found: {candidate}")
        return resolved
    return shutil.which("ffmpeg")


def resolve_ffmpeg(config: VideoConfig) -> Optional[str]:
    """ffmpeg binary for config, or None when ffmpeg use is disabled or unavailable."""
    if not config.use_ffmpeg:
        return None
    return find_ffmpeg(config.ffmpeg_bin)


def _run(cmd: List[str]) -> None:
    try:
        proc = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except OSError as e:
        raise CodecError(f"Could not start {cmd[0]}: {e}") from e
    if proc.returncode != 0:
        raise CodecError(f"Command failed ({proc.returncode}): {' '.join(cmd)}\n{proc.stderr}")


def mux_with_source(
    ffmpeg: str,
    video_only: str,
    source: str,
    output: str,
    video_args: Optional[Sequence[str]] = None
) -> None:
    """
    Combine the video stream of video_only with the audio streams and
    metadata of source.

    Audio is always stream-copied. The video stream is copied too unless
    video_args gives an encoder for it.

    Raises:
        CodecError: If ffmpeg exits with an error
    """
    video_codec = list(video_args) if video_args else ["-c:v", "copy"]
    _run([
        ffmpeg, "-y", "-loglevel", "error",
        "-i", video_only,
        "-i", source,
        "-map", "0:v:0",
        "-map", "1:a?",
        "-map_metadata", "1",
        *video_codec,
        "-c:a", "copy",
        output,
    ])
