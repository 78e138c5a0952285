"""
Unit tests for Module 4: Frame Watermarking

Test coverage:
    - Luma and resampling helpers
    - In-memory embed/extract on full-resolution frames
    - Image-file round trip through PNG
    - Frame read errors
    - Ordered worker-pool mapping
"""

import cv2
import numpy as np
import pytest

from src.config import load_config
from src.module4_frame_watermark import (
    FrameReadError,
    FrameWatermarker,
    apply_luma_delta,
    map_frames,
    read_frame,
    rgb_to_luma,
    to_block,
    upscale_delta,
    write_frame,
)
from synthetic import make_frame


def psnr(a: np.ndarray, b: np.ndarray) -> float:
    mse = np.mean((a.astype(np.float64) - b.astype(np.float64)) ** 2)
    return float("inf") if mse == 0 else 10 * np.log10(255.0 ** 2 / mse)


def random_bits(count, seed=0):
    return np.random.default_rng(seed).integers(0, 2, size=count, dtype=np.uint8)


@pytest.fixture
def watermarker():
    return FrameWatermarker(load_config().embedding)


class TestPreprocessing:
    """Test luma extraction and block resampling."""

    def test_gray_luma(self):
        rgb = np.full((4, 4, 3), 77, dtype=np.uint8)
        np.testing.assert_allclose(rgb_to_luma(rgb), 77.0)

    def test_luma_weights(self):
        rgb = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8)
        np.testing.assert_allclose(rgb_to_luma(rgb), [[0.299 * 255, 0.587 * 255, 0.114 * 255]])

    def test_to_block_area_average(self):
        frame = np.zeros((8, 8, 3), dtype=np.uint8)
        frame[:4, :4] = 100
        block = to_block(frame, 2)
        assert block.shape == (2, 2, 3)
        np.testing.assert_allclose(block[:, :, 0], [[100, 0], [0, 0]])

    def test_upscaled_delta_downscales_back(self):
        delta = np.random.default_rng(0).normal(size=(64, 64))
        full = upscale_delta(delta, (192, 256))
        assert full.shape == (192, 256)
        back = cv2.resize(full.astype(np.float32), (64, 64), interpolation=cv2.INTER_AREA)
        np.testing.assert_allclose(back, delta, atol=1e-5)

    def test_apply_luma_delta_clamps(self):
        frame = np.array([[[250, 5, 100]]], dtype=np.uint8)
        out = apply_luma_delta(frame, np.array([[10.0]]))
        assert out.tolist() == [[[255, 15, 110]]]
        out = apply_luma_delta(frame, np.array([[-10.0]]))
        assert out.tolist() == [[[240, 0, 90]]]

    def test_apply_luma_delta_shape_mismatch(self):
        with pytest.raises(ValueError):
            apply_luma_delta(np.zeros((4, 4, 3), dtype=np.uint8), np.zeros((2, 2)))

    def test_invalid_frame(self):
        with pytest.raises(ValueError):
            to_block(np.zeros((8, 8), dtype=np.uint8), 4)


class TestFrameWatermarker:
    """Test per-frame embedding and extraction."""

    @pytest.mark.parametrize("width,height", [(64, 64), (256, 192), (320, 256)])
    def test_round_trip(self, watermarker, width, height):
        frame = cv2.cvtColor(make_frame(3, width, height), cv2.COLOR_BGR2RGB)
        bits = random_bits(1944)

        marked = watermarker.embed_frame(frame, bits)
        assert marked.shape == frame.shape
        assert marked.dtype == np.uint8

        assert np.array_equal(watermarker.extract_frame(marked, 1944), bits)

    def test_imperceptible(self, watermarker):
        frame = cv2.cvtColor(make_frame(0), cv2.COLOR_BGR2RGB)
        marked = watermarker.embed_frame(frame, random_bits(3328))
        assert psnr(frame, marked) > 35.0

    def test_unmarked_frame_differs(self, watermarker):
        frame = cv2.cvtColor(make_frame(0), cv2.COLOR_BGR2RGB)
        bits = random_bits(1944)
        read = watermarker.extract_frame(frame, 1944)
        assert np.count_nonzero(read != bits) > 100

    def test_strength(self, watermarker):
        frame = cv2.cvtColor(make_frame(1), cv2.COLOR_BGR2RGB)
        bits = random_bits(600)
        weak = watermarker.embed_frame(frame, bits, strength=30.0)
        strong = watermarker.embed_frame(frame, bits, strength=90.0)
        assert psnr(frame, weak) > psnr(frame, strong)
        assert np.array_equal(watermarker.extract_frame(strong, 600, strength=90.0), bits)

    def test_default_construction_matches_packaged_config(self, watermarker):
        default = FrameWatermarker()
        assert default.embedder.capacity == watermarker.embedder.capacity == 3328

        frame = cv2.cvtColor(make_frame(2), cv2.COLOR_BGR2RGB)
        bits = random_bits(1944, seed=2)
        marked = watermarker.embed_frame(frame, bits)
        assert np.array_equal(default.extract_frame(marked, 1944), bits)

    def test_file_round_trip(self, watermarker, tmp_path):
        source = str(tmp_path / "frame_0001.png")
        marked = str(tmp_path / "marked_0001.png")
        cv2.imwrite(source, make_frame(5))
        bits = random_bits(1944, seed=1)

        watermarker.embed_file(source, marked, bits)
        assert np.array_equal(watermarker.extract_file(marked, 1944), bits)


class TestImageIO:
    """Test frame image decoding and encoding."""

    def test_rgb_channel_order(self, tmp_path):
        path = str(tmp_path / "red.png")
        frame = np.zeros((4, 4, 3), dtype=np.uint8)
        frame[:, :, 0] = 255
        write_frame(path, frame)
        assert cv2.imread(path)[0, 0].tolist() == [0, 0, 255]
        np.testing.assert_array_equal(read_frame(path), frame)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FrameReadError, match="not found"):
            read_frame(str(tmp_path / "missing.png"))

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "garbage.png"
        path.write_bytes(b"not an image")
        with pytest.raises(FrameReadError, match="decode"):
            read_frame(str(path))


class TestMapFrames:
    """Test the per-frame worker pool."""

    def test_sequential(self):
        assert map_frames(lambda x: x * 2, [1, 2, 3]) == [2, 4, 6]

    def test_parallel_keeps_order(self):
        assert map_frames(lambda x: x * x, list(range(50)), workers=4) == [x * x for x in range(50)]

    def test_exception_propagates(self):
        def fail(x):
            if x == 3:
                raise FrameReadError("bad frame")
            return x

        with pytest.raises(FrameReadError):
            map_frames(fail, list(range(6)), workers=3)

    def test_empty(self):
        assert map_frames(lambda x: x, [], workers=4) == []
