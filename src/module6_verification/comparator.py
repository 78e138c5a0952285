"""
Verification comparator.

Declares a video verified when extraction succeeded and the recovered
payload matches the expected one on the configured fields.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from ..config import VerificationConfig
from ..module1_payload import WatermarkPayload
from ..module5_extraction import ExtractionResult


@dataclass(frozen=True)
class VerificationResult:
    verified: bool
    confidence: float
    extracted_payload: Optional[WatermarkPayload]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'verified': self.verified,
            'confidence': self.confidence,
            'extractedPayload': (
                self.extracted_payload.to_dict() if self.extracted_payload is not None else None
            ),
        }


class VerificationComparator:
    """
    Compares an extracted payload with an expected one.

    Only the fields named in config.compared_fields take part in the
    verdict (video_id and user_id by default).
    """

    def __init__(self, config: Optional[VerificationConfig] = None):
        self.config = config if config is not None else VerificationConfig()
        self.compared_fields = self.config.compared_fields

    def matches(self, extracted: WatermarkPayload, expected: WatermarkPayload) -> bool:
        return all(
            getattr(extracted, name) == getattr(expected, name)
            for name in self.compared_fields
        )

    def verify(
        self,
        expected: WatermarkPayload,
        extraction: Optional[ExtractionResult] = None,
        run_extraction: Optional[Callable[[], ExtractionResult]] = None
    ) -> VerificationResult:
        """
        Produce a verdict for an expected payload.

        Args:
            expected: Payload the video is supposed to carry
            extraction: Result of an extraction already performed
            run_extraction: Called to extract when no result is given

        Returns:
            VerificationResult; extracted_payload is None when extraction
            did not succeed

        Raises:
            ValueError: If neither extraction nor run_extraction is given
        """
        if extraction is None:
            if run_extraction is None:
                raise ValueError("Either an extraction result or run_extraction is required")
            extraction = run_extraction()

        if not extraction.success or extraction.payload is None:
            return VerificationResult(
                verified=False,
                confidence=extraction.confidence,
                extracted_payload=None,
            )

        return VerificationResult(
            verified=self.matches(extraction.payload, expected),
            confidence=extraction.confidence,
            extracted_payload=extraction.payload,
        )
