"""
Codec error types for Module 7.
"""


class CodecError(Exception):
    """Raised when a video cannot be probed, sampled, reconstructed or muxed."""
    pass


class UnsupportedOutputError(CodecError):
    """Raised when an output container cannot be written without lossy re-encoding."""
    pass
