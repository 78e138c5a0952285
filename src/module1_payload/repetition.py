"""
Repetition coding over bits.

Each bit is written R times in a row; decoding takes a majority vote over
every run of R bits, with ties resolved to 0.
"""

import numpy as np


def bytes_to_bits(data: bytes) -> np.ndarray:
    """Unpack bytes into a uint8 bit array, MSB first."""
    return np.unpackbits(np.frombuffer(data, dtype=np.uint8))


def bits_to_bytes(bits: np.ndarray) -> bytes:
    """Pack a bit array (length multiple of 8) into bytes, MSB first."""
    return np.packbits(np.asarray(bits, dtype=np.uint8)).tobytes()


def repeat_bits(data: bytes, repetition_factor: int) -> np.ndarray:
    """
    Expand bytes into a repetition-coded bit array.

    Args:
        data: Bytes to encode
        repetition_factor: Number of copies R of each bit

    Returns:
        uint8 array of length len(data) * 8 * R
    """
    return np.repeat(bytes_to_bits(data), repetition_factor)


def collapse_bits(bits: np.ndarray, repetition_factor: int) -> bytes:
    """
    Majority-decode a repetition-coded bit array back to bytes.

    Only whole bytes are decoded: floor(len(bits) / (8 * R)) bytes are
    returned and any trailing bits are ignored.

    Args:
        bits: Received bit array (values 0/1)
        repetition_factor: Number of copies R of each bit

    Returns:
        Decoded bytes
    """
    bits = np.asarray(bits, dtype=np.uint8) & 1
    byte_count = len(bits) // (8 * repetition_factor)
    if byte_count == 0:
        return b""

    runs = bits[:byte_count * 8 * repetition_factor].reshape(-1, repetition_factor)
    ones = runs.sum(axis=1, dtype=np.int64)
    decided = (2 * ones > repetition_factor).astype(np.uint8)
    return bits_to_bytes(decided)
