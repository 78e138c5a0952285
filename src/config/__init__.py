"""
Configuration for the watermarking engine.

Algorithm parameters (block size, embedding zones, step size, repetition
factor, sampling) are read-only, process-wide values. They are loaded once
from YAML into frozen dataclasses and passed explicitly to each component.
"""

from functools import lru_cache

from .config import (
    ConfigurationError,
    EccConfig,
    EmbeddingConfig,
    ExtractionConfig,
    PayloadConfig,
    SamplingConfig,
    SystemConfig,
    VerificationConfig,
    VideoConfig,
    WatermarkConfig,
    config_from_dict,
    load_config,
)


@lru_cache(maxsize=1)
def default_config() -> WatermarkConfig:
    """Packaged defaults from default_config.yaml."""
    return load_config()


__all__ = [
    'ConfigurationError',
    'EccConfig',
    'EmbeddingConfig',
    'ExtractionConfig',
    'PayloadConfig',
    'SamplingConfig',
    'SystemConfig',
    'VerificationConfig',
    'VideoConfig',
    'WatermarkConfig',
    'config_from_dict',
    'default_config',
    'load_config',
]
