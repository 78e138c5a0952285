"""
Embedding result type.
"""

from dataclasses import dataclass
from typing import Any, Dict


ALGORITHM = "DWT-QIM"


@dataclass(frozen=True)
class WatermarkResult:
    """Outcome of a successful embed_watermark() call."""
    success: bool
    payload_hash: str  # SHA-256 hex of the canonical payload JSON
    frames_watermarked: int
    algorithm: str = ALGORITHM

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'payloadHash': self.payload_hash,
            'framesWatermarked': self.frames_watermarked,
            'algorithm': self.algorithm,
        }
