"""
Shared fixtures: synthetic videos, payloads and a configuration whose
scratch directories live under pytest's tmp_path.
"""

import pytest

from src.config import load_config
from src.module1_payload import WatermarkPayload
from synthetic import write_synthetic_video


@pytest.fixture
def synthetic_video(tmp_path):
    """Lossless 10-second 256x192 @ 30 fps test video."""
    return write_synthetic_video(str(tmp_path / "source.avi"))


@pytest.fixture
def scratch_root(tmp_path):
    root = tmp_path / "scratch"
    root.mkdir()
    return str(root)


@pytest.fixture
def config(scratch_root):
    """Packaged defaults with scratch directories under tmp_path and no ffmpeg."""
    return load_config(overrides={
        'video': {'scratch_root': scratch_root, 'use_ffmpeg': False},
    })


@pytest.fixture
def payload():
    return WatermarkPayload(video_id="v1", user_id="u1", timestamp=1700000000)
