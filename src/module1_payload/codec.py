"""
Module 1: Payload codec

Turns a WatermarkPayload into the bit array that is embedded, and back.

Encoding:
    canonical JSON -> AES-256-GCM (key = SHA-256 of caller key, fresh nonce)
    -> nonce || tag || ciphertext -> [optional Reed-Solomon] -> bits x R

Decoding reverses every step and returns None on any failure. A corrupted
or absent watermark is an expected operating condition, not a program error.
"""

import logging
from typing import Optional

import numpy as np

from ..config import PayloadConfig
from .aead import decrypt_aead, encrypt_aead, generate_nonce
from .errors import PayloadError
from .framing import HEADER_SIZE, assemble_frame, parse_frame
from .kdf import derive_key
from .payload import WatermarkPayload
from .repetition import collapse_bits, repeat_bits
from .rs_codec import ReedSolomonCodec


logger = logging.getLogger(__name__)


class PayloadCodec:
    """
    Serializes, encrypts and bit-encodes provenance payloads.

    Stateless apart from its (read-only) configuration; safe to share
    between threads.
    """

    def __init__(self, config: Optional[PayloadConfig] = None):
        self.config = config if config is not None else PayloadConfig()
        self.repetition_factor = self.config.repetition_factor

        ecc = self.config.ecc
        self.outer_code = (
            ReedSolomonCodec(n=ecc.n, k=ecc.k, nsym=ecc.nsym)
            if ecc.type == "reed_solomon" else None
        )

    def encode(self, payload: WatermarkPayload, encryption_key: str) -> np.ndarray:
        """
        Encode a payload into the bit array to embed.

        Args:
            payload: Provenance payload
            encryption_key: Caller-supplied secret

        Returns:
            uint8 bit array of length (28 + len(ciphertext)) * 8 * R when no
            outer code is configured
        """
        key = derive_key(encryption_key)
        nonce = generate_nonce()
        plaintext = payload.to_json().encode("utf-8")

        ciphertext, tag = encrypt_aead(key, nonce, plaintext)
        frame = assemble_frame(nonce, tag, ciphertext)

        if self.outer_code is not None:
            frame = self.outer_code.encode(frame)

        return repeat_bits(frame, self.repetition_factor)

    def decode(self, bits: np.ndarray, encryption_key: str) -> Optional[WatermarkPayload]:
        """
        Decode an extracted bit array.

        Args:
            bits: Bit array, ideally of the same length encode() produced
            encryption_key: Same secret used at encode time

        Returns:
            The payload, or None if the bits cannot be authenticated and parsed
        """
        try:
            frame = collapse_bits(bits, self.repetition_factor)
            if self.outer_code is not None:
                frame = self.outer_code.decode(frame)

            nonce, tag, ciphertext = parse_frame(frame)
            plaintext = decrypt_aead(derive_key(encryption_key), nonce, ciphertext, tag)
            return WatermarkPayload.from_json(plaintext.decode("utf-8"))

        except (PayloadError, UnicodeDecodeError) as e:
            logger.debug(f"Payload decode failed: {e}")
            return None

    def encoded_bit_length(self, payload: WatermarkPayload) -> int:
        """
        Exact length of the bit array encode() produces for this payload.

        GCM ciphertext is as long as the plaintext, so the length depends on
        the payload text only, never on the key or nonce.
        """
        frame_length = HEADER_SIZE + len(payload.to_json().encode("utf-8"))
        if self.outer_code is not None:
            frame_length = self.outer_code.encoded_length(frame_length)
        return frame_length * 8 * self.repetition_factor


def encode_payload(
    payload: WatermarkPayload,
    encryption_key: str,
    config: Optional[PayloadConfig] = None
) -> np.ndarray:
    return PayloadCodec(config).encode(payload, encryption_key)


def decode_payload(
    bits: np.ndarray,
    encryption_key: str,
    config: Optional[PayloadConfig] = None
) -> Optional[WatermarkPayload]:
    return PayloadCodec(config).decode(bits, encryption_key)


def encoded_bit_length(payload: WatermarkPayload, config: Optional[PayloadConfig] = None) -> int:
    return PayloadCodec(config).encoded_bit_length(payload)
