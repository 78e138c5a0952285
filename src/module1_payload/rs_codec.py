"""
Optional Reed-Solomon outer code.

Uses the reedsolo library for GF(256) arithmetic. The encrypted frame is
prefixed with its length, cut into k-byte chunks (the last one zero-padded)
and each chunk becomes an n-byte codeword.
"""

import struct

from reedsolo import ReedSolomonError, RSCodec

from .errors import PayloadDecodeError


LENGTH_HEADER = struct.Struct(">I")


class ReedSolomonCodec:
    """
    Reed-Solomon codec with a length header and deterministic padding.

    Invariants:
        - n = k + nsym, n <= 255
        - Corrects up to nsym // 2 byte errors per codeword
    """

    def __init__(self, n: int = 255, k: int = 223, nsym: int = 32):
        self.n = n
        self.k = k
        self.nsym = nsym
        self.max_correctable_errors = nsym // 2
        self.codec = RSCodec(nsym, nsize=n)

    def encoded_length(self, data_length: int) -> int:
        """Number of bytes encode() produces for data_length input bytes."""
        chunks = -(-(data_length + LENGTH_HEADER.size) // self.k)
        return chunks * self.n

    def encode(self, data: bytes) -> bytes:
        framed = LENGTH_HEADER.pack(len(data)) + data
        codewords = []
        for offset in range(0, len(framed), self.k):
            chunk = framed[offset:offset + self.k]
            chunk = chunk + b"\x00" * (self.k - len(chunk))
            codewords.append(bytes(self.codec.encode(chunk)))
        return b"".join(codewords)

    def decode(self, data: bytes) -> bytes:
        """
        Correct and strip the outer code.

        Raises:
            PayloadDecodeError: If the data is not a whole number of codewords,
                a codeword has too many errors, or the length header is invalid
        """
        if len(data) == 0 or len(data) % self.n != 0:
            raise PayloadDecodeError(
                f"Data length {len(data)} is not a positive multiple of codeword length {self.n}"
            )

        chunks = []
        num_chunks = len(data) // self.n
        for i in range(num_chunks):
            codeword = data[i * self.n:(i + 1) * self.n]
            try:
                decoded = self.codec.decode(codeword)
            except ReedSolomonError as e:
                raise PayloadDecodeError(
                    f"Reed-Solomon correction failed on chunk {i}/{num_chunks}: {e}"
                ) from e
            # reedsolo returns (message, message+ecc, errata positions)
            message = decoded[0] if isinstance(decoded, (tuple, list)) else decoded
            chunks.append(bytes(message))

        joined = b"".join(chunks)
        (length,) = LENGTH_HEADER.unpack(joined[:LENGTH_HEADER.size])
        if length > len(joined) - LENGTH_HEADER.size:
            raise PayloadDecodeError(
                f"Length header {length} exceeds available data {len(joined) - LENGTH_HEADER.size}"
            )
        return joined[LENGTH_HEADER.size:LENGTH_HEADER.size + length]
