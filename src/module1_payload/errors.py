"""
Payload codec error types for Module 1.

Decoding errors never leave decode_payload(); they are caught there and
reported as a None result, since a damaged watermark is an expected outcome.
"""


class PayloadError(Exception):
    """Base exception for Module 1 payload operations."""
    pass


class PayloadFormatError(PayloadError):
    """Raised when a payload value or its serialized form is invalid."""
    pass


class PayloadDecodeError(PayloadError):
    """Raised internally when a bitstream cannot be turned back into a payload."""
    pass


class AuthenticationFailureError(PayloadDecodeError):
    """Raised internally when the AES-GCM tag does not verify."""
    pass
