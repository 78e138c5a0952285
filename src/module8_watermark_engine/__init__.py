"""
Module 8: Watermark Engine

Public operations of the invisible watermarking engine:
    - embed_watermark(input, output, payload, key, strength, frame_interval)
    - extract_watermark(video, key, expected_payload_bit_length)
    - verify_watermark(video, expected_payload, key)

WatermarkEngine holds the configuration and the video collaborator; the
module-level functions build one with the packaged defaults.
"""

from .engine import WatermarkEngine, embed_watermark, extract_watermark, verify_watermark
from .errors import CodecError, ValidationError, WatermarkError
from .results import WatermarkResult
from .scratch import scratch_directory


__all__ = [
    'WatermarkEngine',
    'WatermarkResult',
    'embed_watermark',
    'extract_watermark',
    'verify_watermark',
    'scratch_directory',
    'WatermarkError',
    'ValidationError',
    'CodecError',
]
