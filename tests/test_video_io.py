"""
Unit tests for Module 7: Video I/O

Tests cover:
- probe_video metadata
- frame sampling (every Nth frame and fixed rate)
- reconstruct_video frame splicing
- Lossless output containers and ffmpeg audio/metadata carry-over
- Error handling and edge cases
"""

import itertools
import unittest
import tempfile
import os
import shutil

import numpy as np
import cv2
import pytest

from src.config import VideoConfig
from src.module7_video_io import (
    CodecError,
    EveryNthFrame,
    FixedRate,
    UnsupportedOutputError,
    VideoCodec,
    WatermarkedFrame,
    iter_frames,
    probe_video,
)
from src.module7_video_io.ffmpeg import find_ffmpeg
from synthetic import describe_streams, make_frame, require_ffmpeg, write_source_with_audio


NO_FFMPEG = VideoConfig(use_ffmpeg=False)


class TestVideoIO(unittest.TestCase):
    """Test suite for the video collaborator"""

    def setUp(self):
        """Set up test fixtures"""
        self.temp_dir = tempfile.mkdtemp()
        self.frames_dir = os.path.join(self.temp_dir, "frames")
        os.makedirs(self.frames_dir)
        self.codec = VideoCodec(NO_FFMPEG)

    def tearDown(self):
        """Clean up test fixtures"""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def create_test_video(
        self,
        filename: str = "test.avi",
        num_frames: int = 300,
        width: int = 256,
        height: int = 192,
        fps: int = 30
    ) -> str:
        """
        Create a lossless test video with synthetic frames.

        Returns:
            path: Full path to created video
        """
        path = os.path.join(self.temp_dir, filename)
        writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*"FFV1"), fps, (width, height))
        if not writer.isOpened():
            self.skipTest("OpenCV cannot write FFV1 video in this environment")

        for i in range(num_frames):
            writer.write(make_frame(i, width, height))
        writer.release()

        if not os.path.exists(path) or os.path.getsize(path) == 0:
            self.skipTest("OpenCV produced no FFV1 output in this environment")
        return path

    def read_all_frames(self, path: str):
        return [frame for _, frame in iter_frames(path)]

    # ------------------------------------------------------------------
    # probe_video
    # ------------------------------------------------------------------

    def test_probe_metadata(self):
        """Test metadata of a 10-second video"""
        path = self.create_test_video()
        metadata = self.codec.probe(path)

        self.assertAlmostEqual(metadata.fps, 30.0, places=3)
        self.assertEqual(metadata.width, 256)
        self.assertEqual(metadata.height, 192)
        self.assertEqual(metadata.num_frames, 300)
        self.assertAlmostEqual(metadata.duration, 10.0, places=3)

    def test_probe_missing_file(self):
        """Test that a missing file raises CodecError"""
        with self.assertRaises(CodecError):
            probe_video(os.path.join(self.temp_dir, "missing.avi"))

    def test_probe_not_a_video(self):
        """Test that an undecodable file raises CodecError"""
        path = os.path.join(self.temp_dir, "garbage.avi")
        with open(path, "wb") as f:
            f.write(b"\x00" * 64)
        with self.assertRaises(CodecError):
            probe_video(path)

    def test_iter_frames(self):
        """Test sequential decoding"""
        path = self.create_test_video(num_frames=12)
        frames = self.read_all_frames(path)

        self.assertEqual(len(frames), 12)
        self.assertEqual(frames[0].shape, (192, 256, 3))
        self.assertEqual(frames[0].dtype, np.uint8)

    # ------------------------------------------------------------------
    # sample_frames
    # ------------------------------------------------------------------

    def test_sample_every_nth_frame(self):
        """Test embedding-side sampling across the whole duration"""
        path = self.create_test_video()
        sampled = self.codec.sample_frames(path, EveryNthFrame(30), self.frames_dir)

        self.assertEqual([f.index for f in sampled], list(range(0, 300, 30)))
        for k, frame in enumerate(sampled):
            self.assertAlmostEqual(frame.timestamp, float(k), places=6)
            self.assertEqual(os.path.basename(frame.path), f"frame_{k + 1:04d}.png")
            self.assertTrue(os.path.exists(frame.path))

    def test_sample_fixed_rate(self):
        """Test extraction-side sampling: first K frames at a fixed rate"""
        path = self.create_test_video()

        sampled = self.codec.sample_frames(path, FixedRate(1.0, 10), self.frames_dir)
        self.assertEqual([f.index for f in sampled], list(range(0, 300, 30)))

    def test_sample_fixed_rate_faster(self):
        """Test a sampling rate above one frame per second"""
        path = self.create_test_video()

        sampled = self.codec.sample_frames(path, FixedRate(2.0, 5), self.frames_dir)
        self.assertEqual([f.index for f in sampled], [0, 15, 30, 45, 60])

    def test_sample_fixed_rate_short_video(self):
        """Test that sampling stops at the end of a short video"""
        path = self.create_test_video(num_frames=90)

        sampled = self.codec.sample_frames(path, FixedRate(1.0, 10), self.frames_dir)
        self.assertEqual([f.index for f in sampled], [0, 30, 60])

    def test_sampled_image_matches_frame(self):
        """Test that sampled PNGs hold the decoded pixels"""
        path = self.create_test_video(num_frames=40)
        decoded = self.read_all_frames(path)

        sampled = self.codec.sample_frames(path, EveryNthFrame(30), self.frames_dir)
        np.testing.assert_array_equal(cv2.imread(sampled[1].path), decoded[30])

    def test_every_nth_frame_follows_time_grid(self):
        """Test that the embedding interval is applied in seconds at 24 and 25 fps"""
        for fps in (24, 25):
            path = self.create_test_video(f"grid_{fps}.avi", num_frames=fps * 10, fps=fps)
            out_dir = os.path.join(self.temp_dir, f"frames_{fps}")
            os.makedirs(out_dir)

            every = self.codec.sample_frames(path, EveryNthFrame(30), out_dir)
            self.assertEqual([f.index for f in every], list(range(0, fps * 10, fps)))
            for k, frame in enumerate(every):
                self.assertAlmostEqual(frame.timestamp, float(k), places=6)

    def test_embedding_and_extraction_grids_agree(self):
        """Test that every extraction sample lands on an embedded frame"""
        for fps in (24.0, 25.0, 29.97, 30.0, 50.0):
            embedded = set(itertools.islice(EveryNthFrame(30).indices(fps), 40))
            extracted = list(FixedRate(1.0, 10).indices(fps))
            self.assertEqual(len(extracted), 10)
            self.assertTrue(set(extracted) <= embedded, f"misaligned at {fps} fps")

    def test_every_nth_frame_interval_scales_with_reference(self):
        """Test intervals other than one second"""
        self.assertEqual(list(itertools.islice(EveryNthFrame(60).indices(25.0), 4)), [0, 50, 100, 150])
        self.assertEqual(list(itertools.islice(EveryNthFrame(10).indices(30.0), 4)), [0, 10, 20, 30])
        self.assertEqual(list(itertools.islice(EveryNthFrame(1).indices(24.0), 4)), [0, 1, 2, 3])

    def test_sampling_spec_validation(self):
        """Test invalid sampling parameters"""
        with self.assertRaises(ValueError):
            EveryNthFrame(0)
        with self.assertRaises(ValueError):
            FixedRate(0.0, 10)
        with self.assertRaises(ValueError):
            FixedRate(1.0, 0)
        with self.assertRaises(ValueError):
            EveryNthFrame(30, reference_fps=0.0)

    # ------------------------------------------------------------------
    # reconstruct_video
    # ------------------------------------------------------------------

    def write_replacement(self, name: str, color, width: int = 256, height: int = 192) -> str:
        path = os.path.join(self.frames_dir, name)
        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[:] = color
        cv2.imwrite(path, image)
        return path

    def test_reconstruct_replaces_only_given_frames(self):
        """Test frame splicing at the given timestamps"""
        path = self.create_test_video(num_frames=90)
        original = self.read_all_frames(path)
        color = (60, 180, 120)
        replacement = self.write_replacement("marked.png", color)

        output = os.path.join(self.temp_dir, "out", "marked.avi")
        self.codec.reconstruct_video(path, [WatermarkedFrame(1.0, replacement)], output)

        rebuilt = self.read_all_frames(output)
        self.assertEqual(len(rebuilt), 90)

        target = np.zeros_like(original[30])
        target[:] = color
        self.assertLess(np.abs(rebuilt[30].astype(int) - target).mean(), 3.0)
        for idx in (0, 29, 31, 89):
            self.assertLess(np.abs(rebuilt[idx].astype(int) - original[idx]).mean(), 3.0)
            self.assertGreater(np.abs(rebuilt[idx].astype(int) - target).mean(), 20.0)

    def test_reconstruct_without_ffmpeg_warns(self):
        """Test that a missing ffmpeg degrades to a video-only output"""
        path = self.create_test_video(num_frames=30)
        output = os.path.join(self.temp_dir, "video_only.avi")

        with self.assertLogs("src.module7_video_io.video_writer", level="WARNING"):
            self.codec.reconstruct_video(path, [], output)

        self.assertEqual(probe_video(output).num_frames, 30)

    def test_reconstruct_unmatched_timestamp(self):
        """Test that a timestamp past the end raises CodecError"""
        path = self.create_test_video(num_frames=30)
        replacement = self.write_replacement("late.png", (0, 0, 0))

        with self.assertRaises(CodecError):
            self.codec.reconstruct_video(
                path, [WatermarkedFrame(100.0, replacement)], os.path.join(self.temp_dir, "o.avi")
            )

    def test_reconstruct_size_mismatch(self):
        """Test that a replacement with the wrong size raises CodecError"""
        path = self.create_test_video(num_frames=30)
        replacement = self.write_replacement("small.png", (0, 0, 0), width=64, height=64)

        with self.assertRaises(CodecError):
            self.codec.reconstruct_video(
                path, [WatermarkedFrame(0.0, replacement)], os.path.join(self.temp_dir, "o.avi")
            )

    def test_reconstruct_work_dir_left_to_caller(self):
        """Test that an explicit work directory is not removed"""
        path = self.create_test_video(num_frames=10)
        work_dir = os.path.join(self.temp_dir, "work")
        os.makedirs(work_dir)

        self.codec.reconstruct_video(path, [], os.path.join(self.temp_dir, "o.avi"), work_dir=work_dir)
        self.assertTrue(os.path.isdir(work_dir))

    def test_reconstruct_mp4_without_ffmpeg_refused(self):
        """Test that a container needing ffmpeg is refused before encoding"""
        path = self.create_test_video(num_frames=10)
        output = os.path.join(self.temp_dir, "marked.mp4")

        with self.assertRaises(UnsupportedOutputError):
            self.codec.reconstruct_video(path, [], output)
        self.assertFalse(os.path.exists(output))

    def test_check_output(self):
        """Test which containers can be written losslessly"""
        self.codec.check_output("out.avi")
        self.codec.check_output("out.MKV")
        with self.assertRaises(UnsupportedOutputError):
            self.codec.check_output("out.mp4")
        with self.assertRaises(UnsupportedOutputError):
            self.codec.check_output("out.webm")

    # ------------------------------------------------------------------
    # ffmpeg lookup
    # ------------------------------------------------------------------

    def test_find_ffmpeg_missing_binary(self):
        """Test that an explicitly configured but missing binary is an error"""
        with self.assertRaises(CodecError):
            find_ffmpeg("/nonexistent/ffmpeg")

    def test_configured_missing_ffmpeg_is_not_downgraded(self):
        """Test that reconstruction does not silently drop audio for a bad ffmpeg path"""
        path = self.create_test_video(num_frames=10)
        codec = VideoCodec(VideoConfig(ffmpeg_bin="/nonexistent/ffmpeg"))

        with self.assertRaises(CodecError):
            codec.reconstruct_video(path, [], os.path.join(self.temp_dir, "o.avi"))

    def test_ffmpeg_disabled(self):
        """Test that use_ffmpeg=False skips the lookup entirely"""
        config = VideoConfig(use_ffmpeg=False, ffmpeg_bin="/nonexistent/ffmpeg")
        VideoCodec(config).check_output("out.avi")


class TestFfmpegReconstruction:
    """Reconstruction through a real ffmpeg binary."""

    @pytest.fixture
    def codec(self):
        require_ffmpeg()
        return VideoCodec(VideoConfig())

    def write_replacement(self, path, color):
        image = np.zeros((192, 256, 3), dtype=np.uint8)
        image[:] = color
        cv2.imwrite(path, image)
        return path

    def test_audio_and_metadata_preserved(self, codec, tmp_path):
        source = write_source_with_audio(str(tmp_path / "source.avi"), title="vidchain-source")
        replacement = self.write_replacement(str(tmp_path / "marked.png"), (60, 180, 120))
        output = str(tmp_path / "out" / "marked.avi")

        codec.reconstruct_video(source, [WatermarkedFrame(1.0, replacement)], output)

        listing = describe_streams(output)
        assert "Video:" in listing
        assert "Audio:" in listing
        assert "vidchain-source" in listing

        frames = [frame for _, frame in iter_frames(output)]
        assert len(frames) == 60
        assert np.abs(frames[30].astype(int) - np.array([60, 180, 120])).mean() < 3.0

    def test_mp4_is_lossless(self, codec, tmp_path):
        require_ffmpeg("libx264rgb")
        source = str(tmp_path / "source.avi")
        writer = cv2.VideoWriter(source, cv2.VideoWriter_fourcc(*"FFV1"), 30, (256, 192))
        if not writer.isOpened():
            pytest.skip("OpenCV cannot write FFV1 video in this environment")
        for i in range(30):
            writer.write(make_frame(i))
        writer.release()
        original = [frame for _, frame in iter_frames(source)]

        output = str(tmp_path / "marked.mp4")
        codec.reconstruct_video(source, [], output)

        rebuilt = [frame for _, frame in iter_frames(output)]
        assert len(rebuilt) == 30
        for before, after in zip(original, rebuilt):
            assert np.abs(after.astype(int) - before).mean() < 3.0


if __name__ == '__main__':
    unittest.main()
