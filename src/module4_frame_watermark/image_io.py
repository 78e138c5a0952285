"""
Frame image files.

Frames on disk are whatever OpenCV can decode (PNG by default); in memory
they are RGB uint8 arrays.
"""

import os

import numpy as np
import cv2

from .errors import FrameReadError, FrameWriteError


def read_frame(path: str) -> np.ndarray:
    """
    Decode an image file into an RGB frame.

    Raises:
        FrameReadError: If the file is missing or cannot be decoded
    """
    if not os.path.exists(path):
        raise FrameReadError(f"Frame image not found: {path}")

    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise FrameReadError(f"Could not decode frame image: {path}")

    return cv2.cvtColor(image, cv2.COLOR_BGR2RGB)


def write_frame(path: str, frame: np.ndarray) -> None:
    """
    Encode an RGB frame to an image file; the format follows the extension.

    Raises:
        FrameWriteError: If OpenCV refuses to write the file
    """
    bgr = cv2.cvtColor(frame, cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(str(path), bgr):
        raise FrameWriteError(f"Failed to write frame image: {path}")
