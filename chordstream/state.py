"""
Per-session state of the chord detection pipeline.
"""
import time

from chordstream.chroma import ChromaExtractor
from chordstream.frame_buffer import FrameBuffer
from chordstream.noise_gate import NoiseGate
from chordstream.spectral import SpectralAnalyzer
from chordstream.stabilizer import Stabilizer
from chordstream.tracker import ActivePitchClassTracker


class PipelineState:
    """
    Owns every piece of mutable state for one listening session: the
    overlap buffer, noise floor, smoothed chroma and hold vectors,
    stabilizer fields and the emission timestamp.

    Nothing here is shared between sessions; ``reset()`` returns all of it
    to the initial values.
    """

    def __init__(self, config, clock=time.monotonic):
        """
        Initialize processing state from config.

        Args:
            config: DetectorConfig
            clock: monotonic time source in seconds
        """
        self.config = config
        self.clock = clock
        self.sample_rate = config.sample_rate

        self.frame_buffer = FrameBuffer(config.frame_size, config.hop_size)
        self.analyzer = SpectralAnalyzer(config.frame_size)
        self.noise_gate = NoiseGate.from_config(config)
        self.chroma_extractor = ChromaExtractor.from_config(config)
        self.tracker = ActivePitchClassTracker.from_config(config)
        self.stabilizer = Stabilizer.from_config(config, clock=clock)

        self.last_emit_time = clock()
        self.frames_processed = 0

    def reset(self):
        """Reset state to initial values."""
        now = self.clock()
        self.frame_buffer.clear()
        self.noise_gate.reset()
        self.tracker.reset()
        self.stabilizer.reset(now)
        self.last_emit_time = now
        self.frames_processed = 0

    def should_emit(self, now):
        """
        Check whether enough time has passed since the last emission.

        Args:
            now: monotonic timestamp in seconds

        Returns:
            True (and records ``now``) if a result may be emitted
        """
        if now - self.last_emit_time > self.config.emit_interval:
            self.last_emit_time = now
            return True
        return False

    # Read-only views used by tests and debug output
    @property
    def noise_floor(self):
        return self.noise_gate.noise_floor

    @property
    def smoothed_chroma(self):
        return self.tracker.smoothed_chroma

    @property
    def hold_vector(self):
        return self.tracker.hold
