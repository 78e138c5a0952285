"""
Byte layout of the encrypted payload.

    [nonce:12][tag:16][ciphertext:N]
"""

from typing import Tuple

from .aead import NONCE_SIZE, TAG_SIZE
from .errors import PayloadDecodeError


HEADER_SIZE = NONCE_SIZE + TAG_SIZE


def assemble_frame(nonce: bytes, tag: bytes, ciphertext: bytes) -> bytes:
    return nonce + tag + ciphertext


def parse_frame(frame: bytes) -> Tuple[bytes, bytes, bytes]:
    """
    Split an encrypted frame into (nonce, tag, ciphertext).

    Raises:
        PayloadDecodeError: If the frame is too short to hold a nonce and tag
    """
    if len(frame) <= HEADER_SIZE:
        raise PayloadDecodeError(
            f"Frame too short: {len(frame)} bytes (minimum {HEADER_SIZE + 1})"
        )
    nonce = frame[:NONCE_SIZE]
    tag = frame[NONCE_SIZE:HEADER_SIZE]
    ciphertext = frame[HEADER_SIZE:]
    return nonce, tag, ciphertext
