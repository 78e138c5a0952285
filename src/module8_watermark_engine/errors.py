"""
Engine-level error types for Module 8.

CodecError (Module 7) is re-exported so callers can catch every fatal
embedding failure from one place.
"""

from ..module7_video_io import CodecError


class WatermarkError(Exception):
    """Base exception for watermark engine operations."""
    pass


class ValidationError(WatermarkError, ValueError):
    """Raised when inputs or options are invalid, before any frame is touched."""
    pass


__all__ = ['WatermarkError', 'ValidationError', 'CodecError']
