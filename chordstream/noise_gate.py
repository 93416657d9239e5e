"""
Adaptive noise gate: separates musical frames from background noise.
"""
import logging

import numpy as np

logger = logging.getLogger(__name__)


def frame_rms(frame):
    """Root-mean-square energy of a frame (0.0 for an empty frame)."""
    frame = np.asarray(frame, dtype=np.float64)
    if frame.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(frame ** 2)))


class NoiseGate:
    """
    Tracks a noise floor and flags frames whose RMS clears it.

    The floor follows the (capped) frame RMS with an exponential moving
    average: slowly while a signal is present, quickly during silence.
    """

    def __init__(self, initial_noise_floor=0.002, min_threshold=0.004, ratio=2.8,
                 alpha_signal=0.995, alpha_silence=0.92, rms_cap=0.02):
        self.initial_noise_floor = initial_noise_floor
        self.min_threshold = min_threshold
        self.ratio = ratio
        self.alpha_signal = alpha_signal
        self.alpha_silence = alpha_silence
        self.rms_cap = rms_cap
        self.noise_floor = initial_noise_floor
        self._had_signal = False

    @classmethod
    def from_config(cls, config):
        return cls(
            initial_noise_floor=config.initial_noise_floor,
            min_threshold=config.gate_min_threshold,
            ratio=config.gate_ratio,
            alpha_signal=config.floor_alpha_signal,
            alpha_silence=config.floor_alpha_silence,
            rms_cap=config.floor_rms_cap,
        )

    @property
    def threshold(self):
        return max(self.min_threshold, self.noise_floor * self.ratio)

    def evaluate(self, frame):
        """
        Decide whether a frame carries signal and update the noise floor.

        Args:
            frame: raw (unwindowed) audio frame

        Returns:
            True if the frame RMS is above the current gate threshold
        """
        rms = frame_rms(frame)
        has_signal = rms > self.threshold

        alpha = self.alpha_signal if has_signal else self.alpha_silence
        self.noise_floor = alpha * self.noise_floor + (1 - alpha) * min(rms, self.rms_cap)

        if has_signal != self._had_signal and logger.isEnabledFor(logging.DEBUG):
            logger.debug("gate %s (rms=%.5f floor=%.5f)",
                         "open" if has_signal else "closed", rms, self.noise_floor)
        self._had_signal = has_signal
        return has_signal

    def reset(self):
        self.noise_floor = self.initial_noise_floor
        self._had_signal = False
