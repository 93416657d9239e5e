"""
Pytest fixtures for chord detector tests.
"""
import pytest
import numpy as np
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chordstream.common import get_rate, get_frame_size, get_hop_size
from chordstream.sound_capture import AudioSource


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


class FakeSource(AudioSource):
    """Audio source that records its callbacks instead of opening a device."""

    def __init__(self, start_error=None):
        self.start_error = start_error
        self.start_count = 0
        self.stop_count = 0
        self.sample_rate = None
        self.on_chunk = None
        self.on_error = None

    def start(self, sample_rate, on_chunk, on_error):
        self.start_count += 1
        if self.start_error is not None:
            raise self.start_error
        self.sample_rate = sample_rate
        self.on_chunk = on_chunk
        self.on_error = on_error

    def stop(self):
        self.stop_count += 1

    @property
    def attached(self):
        return self.start_count - self.stop_count


def tone(frequencies, seconds, sample_rate, amplitude=0.3):
    """Sum of sines, float32."""
    t = np.arange(int(seconds * sample_rate)) / sample_rate
    signal = sum(amplitude * np.sin(2 * np.pi * f * t) for f in frequencies)
    return np.asarray(signal, dtype=np.float32)


@pytest.fixture
def sample_rate():
    """Standard sample rate."""
    return get_rate()


@pytest.fixture
def frame_size():
    """Standard analysis frame size."""
    return get_frame_size()


@pytest.fixture
def hop_size():
    """Standard hop size."""
    return get_hop_size()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def silence_audio(frame_size):
    """Generate one silent frame."""
    return np.zeros(frame_size, dtype=np.float32)


@pytest.fixture
def sine_wave_440hz(sample_rate, frame_size):
    """Generate a 440Hz sine wave (A4 note), one frame long."""
    t = np.arange(frame_size) / sample_rate
    return (0.5 * np.sin(2 * np.pi * 440 * t)).astype(np.float32)


@pytest.fixture
def c_major_chord(sample_rate):
    """Three seconds of a C major chord (C4, E4, G4)."""
    return tone([261.63, 329.63, 392.00], 3.0, sample_rate)

