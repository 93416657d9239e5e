"""
Tests for chordstream/frame_buffer.py - overlapping frame extraction.
"""
import pytest
import numpy as np

from chordstream.frame_buffer import FrameBuffer


class TestFrameExtraction:
    """Test frames are cut at frame size and advanced by hop size."""

    def test_small_chunk_yields_nothing(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        assert buf.push(np.ones(1000)) == []
        assert len(buf) == 1000

    def test_first_frame_is_oldest_samples(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        samples = np.arange(6000, dtype=np.float32)

        frames = buf.push(samples)

        assert len(frames) == 1
        assert np.array_equal(frames[0], samples[:frame_size])
        # one hop dropped, remainder kept for the next frame
        assert len(buf) == 6000 - hop_size

    def test_large_chunk_yields_multiple_frames(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        samples = np.arange(frame_size + 3 * hop_size, dtype=np.float32)

        frames = buf.push(samples)

        assert len(frames) == 4
        assert all(len(f) == frame_size for f in frames)
        for i, frame in enumerate(frames):
            assert frame[0] == i * hop_size

    def test_consecutive_frames_overlap(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        frames = buf.push(np.random.default_rng(0).standard_normal(frame_size * 2))

        assert np.array_equal(frames[1][:frame_size - hop_size], frames[0][hop_size:])

    def test_chunking_does_not_change_frames(self, frame_size, hop_size):
        """Many small pushes produce the same frames as one big push."""
        samples = np.random.default_rng(1).standard_normal(20000).astype(np.float32)

        whole = FrameBuffer(frame_size, hop_size).push(samples)

        pieces = FrameBuffer(frame_size, hop_size)
        chunked = []
        for start in range(0, len(samples), 333):
            chunked.extend(pieces.push(samples[start:start + 333]))

        assert len(chunked) == len(whole)
        for a, b in zip(chunked, whole):
            assert np.array_equal(a, b)

    def test_empty_chunk(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        assert buf.push(np.zeros(0)) == []
        assert len(buf) == 0

    def test_returned_frames_are_copies(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        frame = buf.push(np.ones(frame_size))[0]
        frame[:] = 5.0
        assert np.all(buf.push(np.ones(hop_size))[0] == 1.0)

    def test_clear(self, frame_size, hop_size):
        buf = FrameBuffer(frame_size, hop_size)
        buf.push(np.ones(3000))
        buf.clear()
        assert len(buf) == 0


class TestValidation:

    @pytest.mark.parametrize("hop", [0, -1, 5000])
    def test_invalid_hop_size(self, hop):
        with pytest.raises(ValueError):
            FrameBuffer(4096, hop)
