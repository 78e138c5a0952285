"""
Immutable configuration for the watermarking engine.

Defaults live in default_config.yaml next to this file. User YAML files and
override dicts are deep-merged on top before the dataclasses are built, so
every component receives a validated, read-only view of its section.
"""

import copy
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default_config.yaml"

# Mid-band tile first, then the twelve detail-quadrant tiles of a 4x4 grid.
DEFAULT_BANDS = (
    (1, 1),
    (0, 2), (0, 3), (1, 2), (1, 3),
    (2, 0), (2, 1), (3, 0), (3, 1),
    (2, 2), (2, 3), (3, 2), (3, 3),
)

PAYLOAD_FIELDS = ("video_id", "user_id", "timestamp", "blockchain_tx_hash", "custom_data")


class ConfigurationError(ValueError):
    """Raised when a configuration value is missing, unknown or out of range."""
    pass


@dataclass(frozen=True)
class SystemConfig:
    workers: int = 1
    verbose: bool = False

    def __post_init__(self):
        if self.workers < 1:
            raise ConfigurationError(f"system.workers must be >= 1, got {self.workers}")


@dataclass(frozen=True)
class EccConfig:
    """Optional Reed-Solomon outer code applied before repetition coding."""
    type: str = "none"
    n: int = 255
    k: int = 223
    nsym: int = 32

    def __post_init__(self):
        if self.type not in ("none", "reed_solomon"):
            raise ConfigurationError(f"Unknown ECC type: {self.type}")
        if self.type == "reed_solomon":
            if self.n > 255:
                raise ConfigurationError(f"Reed-Solomon n={self.n} exceeds GF(256) limit of 255")
            if self.nsym != self.n - self.k:
                raise ConfigurationError(
                    f"Inconsistent RS parameters: n={self.n}, k={self.k}, nsym={self.nsym}"
                )
            if self.nsym < 2:
                raise ConfigurationError(f"nsym={self.nsym} must be >= 2")


@dataclass(frozen=True)
class PayloadConfig:
    repetition_factor: int = 3
    ecc: EccConfig = field(default_factory=EccConfig)

    def __post_init__(self):
        if self.repetition_factor < 1:
            raise ConfigurationError(
                f"payload.repetition_factor must be >= 1, got {self.repetition_factor}"
            )


@dataclass(frozen=True)
class EmbeddingConfig:
    block_size: int = 64
    strength: float = 50.0
    step_scale: float = 0.1
    decision_boundary: float = 0.25
    bands: Tuple[Tuple[int, int], ...] = DEFAULT_BANDS

    def __post_init__(self):
        if self.block_size < 4 or self.block_size % 4 != 0:
            raise ConfigurationError(
                f"embedding.block_size must be a positive multiple of 4, got {self.block_size}"
            )
        if not 0 < self.strength <= 100:
            raise ConfigurationError(f"embedding.strength must be in (0, 100], got {self.strength}")
        if self.step_scale <= 0:
            raise ConfigurationError(f"embedding.step_scale must be positive, got {self.step_scale}")
        if not 0 < self.decision_boundary < 0.5:
            raise ConfigurationError(
                f"embedding.decision_boundary must be in (0, 0.5), got {self.decision_boundary}"
            )
        if len(self.bands) == 0:
            raise ConfigurationError("embedding.bands must name at least one tile")
        for row, col in self.bands:
            if not (0 <= row < 4 and 0 <= col < 4):
                raise ConfigurationError(f"Embedding tile ({row}, {col}) is outside the 4x4 tile grid")

    @property
    def zone_size(self) -> int:
        return self.block_size // 4

    def step_for(self, strength: Optional[float] = None) -> float:
        """QIM step size for the given strength (configured strength if None)."""
        return (self.strength if strength is None else strength) * self.step_scale


@dataclass(frozen=True)
class SamplingConfig:
    frame_interval: int = 30
    reference_fps: float = 30.0
    extraction_fps: float = 1.0
    extraction_frames: int = 10

    def __post_init__(self):
        if self.frame_interval < 1:
            raise ConfigurationError(f"sampling.frame_interval must be >= 1, got {self.frame_interval}")
        if self.reference_fps <= 0:
            raise ConfigurationError(f"sampling.reference_fps must be positive, got {self.reference_fps}")
        if self.extraction_fps <= 0:
            raise ConfigurationError(f"sampling.extraction_fps must be positive, got {self.extraction_fps}")
        if self.extraction_frames < 1:
            raise ConfigurationError(
                f"sampling.extraction_frames must be >= 1, got {self.extraction_frames}"
            )


@dataclass(frozen=True)
class ExtractionConfig:
    agreement_threshold: float = 0.7

    def __post_init__(self):
        if not 0.5 <= self.agreement_threshold < 1.0:
            raise ConfigurationError(
                f"extraction.agreement_threshold must be in [0.5, 1.0), got {self.agreement_threshold}"
            )


@dataclass(frozen=True)
class VerificationConfig:
    compared_fields: Tuple[str, ...] = ("video_id", "user_id")

    def __post_init__(self):
        unknown = [name for name in self.compared_fields if name not in PAYLOAD_FIELDS]
        if unknown:
            raise ConfigurationError(f"Unknown payload fields in verification.compared_fields: {unknown}")
        if len(self.compared_fields) == 0:
            raise ConfigurationError("verification.compared_fields must not be empty")


@dataclass(frozen=True)
class VideoConfig:
    """
    Output encoding settings.

    Extensions in fourcc_by_extension are written by OpenCV with a lossless
    fourcc. Extensions in ffmpeg_extensions are encoded by ffmpeg with
    ffmpeg_video_args from a lossless intermediate; they need ffmpeg.
    """
    scratch_root: Optional[str] = None
    frame_image_ext: str = ".png"
    use_ffmpeg: bool = True
    ffmpeg_bin: Optional[str] = None
    fourcc_by_extension: Tuple[Tuple[str, str], ...] = ((".avi", "FFV1"), (".mkv", "FFV1"))
    ffmpeg_extensions: Tuple[str, ...] = (".mp4", ".mov")
    ffmpeg_video_args: Tuple[str, ...] = ("-c:v", "libx264rgb", "-qp", "0")

    def __post_init__(self):
        for ext, code in self.fourcc_by_extension:
            if len(code) != 4:
                raise ConfigurationError(f"fourcc for {ext} must be 4 characters, got {code!r}")
        overlap = set(dict(self.fourcc_by_extension)) & set(self.ffmpeg_extensions)
        if overlap:
            raise ConfigurationError(f"Extensions listed for both OpenCV and ffmpeg: {sorted(overlap)}")

    def fourcc_for(self, path: str) -> Optional[str]:
        """Lossless fourcc OpenCV writes for path, or None if OpenCV does not write it."""
        suffix = Path(path).suffix.lower()
        return dict(self.fourcc_by_extension).get(suffix)

    def needs_ffmpeg(self, path: str) -> bool:
        return Path(path).suffix.lower() in self.ffmpeg_extensions


@dataclass(frozen=True)
class WatermarkConfig:
    system: SystemConfig = field(default_factory=SystemConfig)
    payload: PayloadConfig = field(default_factory=PayloadConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    verification: VerificationConfig = field(default_factory=VerificationConfig)
    video: VideoConfig = field(default_factory=VideoConfig)


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _section(cls, raw: Optional[Dict[str, Any]], name: str, **prepared):
    raw = dict(raw or {})
    allowed = {f.name for f in fields(cls)}
    unknown = set(raw) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown keys in '{name}' section: {sorted(unknown)}")
    raw.update(prepared)
    try:
        return cls(**raw)
    except TypeError as e:
        raise ConfigurationError(f"Invalid '{name}' section: {e}") from e


def config_from_dict(raw: Dict[str, Any]) -> WatermarkConfig:
    """
    Build a WatermarkConfig from a nested dictionary.

    Args:
        raw: Dictionary with the same structure as default_config.yaml

    Returns:
        Validated, immutable configuration

    Raises:
        ConfigurationError: On unknown keys or invalid values
    """
    allowed = {f.name for f in fields(WatermarkConfig)}
    unknown = set(raw) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown configuration sections: {sorted(unknown)}")

    payload_raw = dict(raw.get("payload") or {})
    ecc_raw = dict(payload_raw.pop("ecc", None) or {})
    rs_raw = dict(ecc_raw.pop("reed_solomon", None) or {})
    ecc = _section(EccConfig, ecc_raw, "payload.ecc", **rs_raw)

    embedding_raw = dict(raw.get("embedding") or {})
    bands = embedding_raw.pop("bands", None)
    embedding_extra = {}
    if bands is not None:
        try:
            embedding_extra["bands"] = tuple((int(row), int(col)) for row, col in bands)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"embedding.bands must be a list of [row, col] pairs: {e}") from e

    verification_raw = dict(raw.get("verification") or {})
    compared = verification_raw.pop("compared_fields", None)
    verification_extra = {}
    if compared is not None:
        verification_extra["compared_fields"] = tuple(compared)

    video_raw = dict(raw.get("video") or {})
    fourcc_map = video_raw.pop("fourcc_by_extension", None)
    video_extra = {}
    if fourcc_map is not None:
        video_extra["fourcc_by_extension"] = tuple(
            (str(ext).lower(), str(code)) for ext, code in fourcc_map.items()
        )
    for key in ("ffmpeg_extensions", "ffmpeg_video_args"):
        values = video_raw.pop(key, None)
        if values is not None:
            video_extra[key] = tuple(str(v) for v in values)

    return WatermarkConfig(
        system=_section(SystemConfig, raw.get("system"), "system"),
        payload=_section(PayloadConfig, payload_raw, "payload", ecc=ecc),
        embedding=_section(EmbeddingConfig, embedding_raw, "embedding", **embedding_extra),
        sampling=_section(SamplingConfig, raw.get("sampling"), "sampling"),
        extraction=_section(ExtractionConfig, raw.get("extraction"), "extraction"),
        verification=_section(VerificationConfig, verification_raw, "verification", **verification_extra),
        video=_section(VideoConfig, video_raw, "video", **video_extra),
    )


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return data


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> WatermarkConfig:
    """
    Load configuration from YAML.

    Args:
        path: Optional user YAML file merged over the packaged defaults
        overrides: Optional nested dict merged last

    Returns:
        config: Validated WatermarkConfig

    Raises:
        FileNotFoundError: If path is given but does not exist
        ConfigurationError: If the merged configuration is invalid
    """
    raw = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        raw = _deep_merge(raw, _read_yaml(Path(path)))

    if overrides:
        raw = _deep_merge(raw, overrides)

    return config_from_dict(raw)
