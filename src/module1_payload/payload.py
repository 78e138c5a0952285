"""
Provenance payload carried by the watermark.
"""

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import PayloadFormatError


# Serialized key order is fixed so the encoding is canonical.
_WIRE_KEYS = (
    ("video_id", "videoId"),
    ("user_id", "userId"),
    ("timestamp", "timestamp"),
    ("blockchain_tx_hash", "blockchainTxHash"),
    ("custom_data", "customData"),
)


@dataclass(frozen=True)
class WatermarkPayload:
    """
    Provenance fact embedded into a video.

    Attributes:
        video_id: Opaque video identifier
        user_id: Opaque user identifier
        timestamp: Seconds since epoch
        blockchain_tx_hash: Optional ledger transaction reference
        custom_data: Optional free-form text
    """
    video_id: str
    user_id: str
    timestamp: int
    blockchain_tx_hash: Optional[str] = None
    custom_data: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.video_id, str):
            raise PayloadFormatError(f"video_id must be a string, got {type(self.video_id)}")
        if not isinstance(self.user_id, str):
            raise PayloadFormatError(f"user_id must be a string, got {type(self.user_id)}")
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            raise PayloadFormatError(f"timestamp must be an integer, got {type(self.timestamp)}")
        for name in ("blockchain_tx_hash", "custom_data"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise PayloadFormatError(f"{name} must be a string or None, got {type(value)}")

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation with camelCase keys; absent optional fields are omitted."""
        wire = {}
        for attr, key in _WIRE_KEYS:
            value = getattr(self, attr)
            if value is not None:
                wire[key] = value
        return wire

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatermarkPayload":
        """
        Rebuild a payload from its wire representation.

        Raises:
            PayloadFormatError: If required keys are missing, unknown keys are
                present, or a value has the wrong type
        """
        if not isinstance(data, dict):
            raise PayloadFormatError(f"Payload must be a JSON object, got {type(data)}")

        known = {key for _, key in _WIRE_KEYS}
        unknown = set(data) - known
        if unknown:
            raise PayloadFormatError(f"Unknown payload keys: {sorted(unknown)}")

        missing = [key for key in ("videoId", "userId", "timestamp") if key not in data]
        if missing:
            raise PayloadFormatError(f"Missing payload keys: {missing}")

        return cls(**{attr: data.get(key) for attr, key in _WIRE_KEYS})

    def to_json(self) -> str:
        """Canonical compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "WatermarkPayload":
        try:
            data = json.loads(text)
        except ValueError as e:
            raise PayloadFormatError(f"Payload is not valid JSON: {e}") from e
        return cls.from_dict(data)

    def payload_hash(self) -> str:
        """SHA-256 hex digest of the canonical JSON."""
        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()
