"""
Frame watermarking error types for Module 4.
"""


class FrameWatermarkError(Exception):
    """Base exception for Module 4 frame operations."""
    pass


class FrameReadError(FrameWatermarkError):
    """Raised when a frame image cannot be decoded."""
    pass


class FrameWriteError(FrameWatermarkError):
    """Raised when a frame image cannot be encoded or written."""
    pass
