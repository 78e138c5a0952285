"""
Module 1: Payload Codec

Serializes, encrypts (AES-256-GCM) and repetition-codes provenance payloads
for embedding, and reverses the process on extraction.

Public API:
    - WatermarkPayload
    - PayloadCodec(config).encode(payload, key) -> bits
    - PayloadCodec(config).decode(bits, key) -> payload | None
    - encode_payload / decode_payload / encoded_bit_length
"""

from .codec import PayloadCodec, decode_payload, encode_payload, encoded_bit_length
from .errors import (
    AuthenticationFailureError,
    PayloadDecodeError,
    PayloadError,
    PayloadFormatError,
)
from .payload import WatermarkPayload


__all__ = [
    'WatermarkPayload',
    'PayloadCodec',
    'encode_payload',
    'decode_payload',
    'encoded_bit_length',
    'PayloadError',
    'PayloadFormatError',
    'PayloadDecodeError',
    'AuthenticationFailureError',
]
