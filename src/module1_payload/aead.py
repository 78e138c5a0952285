"""
Authenticated encryption using AES-256-GCM.
"""

import os
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationFailureError


NONCE_SIZE = 12
TAG_SIZE = 16


def generate_nonce() -> bytes:
    """Fresh random 96-bit nonce."""
    return os.urandom(NONCE_SIZE)


def encrypt_aead(key: bytes, nonce: bytes, plaintext: bytes) -> Tuple[bytes, bytes]:
    """
    Encrypt and authenticate data using AES-256-GCM.

    Args:
        key: 32-byte encryption key
        nonce: 12-byte nonce (must be unique per key)
        plaintext: Data to encrypt

    Returns:
        Tuple of (ciphertext, auth_tag) where ciphertext has the same length
        as plaintext and auth_tag is 16 bytes
    """
    # AESGCM.encrypt returns ciphertext || tag
    sealed = AESGCM(key).encrypt(nonce, plaintext, None)
    return sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]


def decrypt_aead(key: bytes, nonce: bytes, ciphertext: bytes, tag: bytes) -> bytes:
    """
    Decrypt and verify data using AES-256-GCM.

    Raises:
        AuthenticationFailureError: If the tag does not verify (corruption,
            wrong key or tampering)
    """
    try:
        return AESGCM(key).decrypt(nonce, ciphertext + tag, None)
    except InvalidTag:
        raise AuthenticationFailureError("Authentication tag verification failed")
