"""
Extraction result type.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..module1_payload import WatermarkPayload


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction call."""
    success: bool
    payload: Optional[WatermarkPayload]
    confidence: float  # 0-100
    frames_analyzed: int

    @classmethod
    def empty(cls) -> "ExtractionResult":
        """Result for a video where no frame could be sampled."""
        return cls(success=False, payload=None, confidence=0.0, frames_analyzed=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'payload': self.payload.to_dict() if self.payload is not None else None,
            'confidence': self.confidence,
            'framesAnalyzed': self.frames_analyzed,
        }
