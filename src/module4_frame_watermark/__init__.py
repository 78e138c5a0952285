"""
Module 4: Frame Watermarking

Per-frame embedding and extraction: luminance block, Haar transform, QIM,
inverse transform and recomposition into the full-resolution RGB frame.
"""

from .batch import map_frames
from .errors import FrameReadError, FrameWatermarkError, FrameWriteError
from .frame_watermarker import FrameWatermarker
from .image_io import read_frame, write_frame
from .preprocessing import Frame, apply_luma_delta, rgb_to_luma, to_block, upscale_delta


__all__ = [
    'FrameWatermarker',
    'Frame',
    'map_frames',
    'read_frame',
    'write_frame',
    'rgb_to_luma',
    'to_block',
    'upscale_delta',
    'apply_luma_delta',
    'FrameWatermarkError',
    'FrameReadError',
    'FrameWriteError',
]
