"""
Overlap-preserving accumulation of incoming sample chunks into analysis frames.
"""
import numpy as np


class FrameBuffer:
    """
    Collects arbitrary-length chunks and hands out fixed-size frames.

    After each frame the buffer advances by ``hop_size`` samples, so the
    last ``frame_size - hop_size`` samples are reused as overlap.
    """

    def __init__(self, frame_size, hop_size):
        if not 0 < hop_size <= frame_size:
            raise ValueError(f"hop_size must be in (0, {frame_size}], got {hop_size}")
        self.frame_size = frame_size
        self.hop_size = hop_size
        self._buffer = np.zeros(0, dtype=np.float32)

    def __len__(self):
        return len(self._buffer)

    def push(self, samples):
        """
        Append a chunk and extract every complete frame.

        Args:
            samples: 1-D array-like of audio samples, any length

        Returns:
            list of float32 arrays of length ``frame_size``, oldest first
        """
        samples = np.asarray(samples, dtype=np.float32).ravel()
        if samples.size:
            self._buffer = np.concatenate((self._buffer, samples))

        frames = []
        while len(self._buffer) >= self.frame_size:
            frames.append(self._buffer[:self.frame_size].copy())
            self._buffer = self._buffer[self.hop_size:]
        return frames

    def clear(self):
        """Drop all buffered samples."""
        self._buffer = np.zeros(0, dtype=np.float32)
