"""
Key derivation for the payload cipher.
"""

import hashlib


def derive_key(encryption_key: str) -> bytes:
    """
    Derive a 256-bit AES key from a caller-supplied key string.

    The key string is hashed with SHA-256, so any length of key is accepted.

    Args:
        encryption_key: Caller-supplied secret (UTF-8 string)

    Returns:
        32-byte key
    """
    return hashlib.sha256(encryption_key.encode('utf-8')).digest()
