"""
Luma extraction and block resampling for frame watermarking.

Frames are RGB uint8 arrays (H, W, 3). The watermark lives in a small
N x N luminance block; the block-level luma delta is resampled back to the
frame size and added equally to R, G and B.
"""

from typing import Tuple

import numpy as np
import cv2


# Type alias for Frame
Frame = np.ndarray  # Shape: (H, W, 3), dtype: uint8, range: [0, 255]

# ITU-R BT.601 luma weights (R, G, B); they sum to 1, so adding d to every
# channel adds exactly d to the luma.
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def validate_frame(frame: Frame) -> None:
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise ValueError(f"Invalid frame shape: {frame.shape}. Expected (H, W, 3).")
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise ValueError(f"Empty frame: {frame.shape}")


def to_block(frame: Frame, block_size: int) -> np.ndarray:
    """
    Downscale a frame to block_size x block_size with area averaging.

    Resampling happens in float32 so no rounding is introduced.

    Returns:
        float64 array (block_size, block_size, 3)
    """
    validate_frame(frame)
    block = cv2.resize(
        frame.astype(np.float32),
        (block_size, block_size),
        interpolation=cv2.INTER_AREA
    )
    return block.astype(np.float64)


def rgb_to_luma(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel luma 0.299 R + 0.587 G + 0.114 B."""
    return np.asarray(rgb, dtype=np.float64) @ LUMA_WEIGHTS


def upscale_delta(delta: np.ndarray, frame_shape: Tuple[int, int]) -> np.ndarray:
    """
    Resize a block-level luma delta to (height, width) with nearest neighbour.

    With integer scale factors, area-downscaling the result gives back the
    original delta exactly.
    """
    height, width = frame_shape
    return cv2.resize(
        delta.astype(np.float32),
        (width, height),
        interpolation=cv2.INTER_NEAREST
    ).astype(np.float64)


def apply_luma_delta(frame: Frame, delta: np.ndarray) -> Frame:
    """
    Add a luma delta to each RGB channel, clamped to [0, 255].

    Args:
        frame: RGB uint8 frame (H, W, 3)
        delta: Luma delta (H, W)

    Returns:
        New RGB uint8 frame
    """
    if delta.shape != frame.shape[:2]:
        raise ValueError(f"Delta shape {delta.shape} does not match frame {frame.shape[:2]}")
    marked = frame.astype(np.float64) + delta[:, :, np.newaxis]
    return np.clip(np.round(marked), 0, 255).astype(np.uint8)
