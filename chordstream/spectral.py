"""
Windowed magnitude spectrum of a single analysis frame.
"""
import numpy as np
from scipy.signal import get_window


class SpectralAnalyzer:
    """
    Applies a Hann window and returns the real-FFT magnitude spectrum.

    The window coefficients are computed once; nothing else is kept
    between frames.
    """

    def __init__(self, frame_size):
        self.frame_size = frame_size
        # periodic Hann (fftbins=True)
        self.window = get_window('hann', frame_size, fftbins=True).astype(np.float64)

    @property
    def bin_count(self):
        return self.frame_size // 2

    def magnitudes(self, frame):
        """
        Compute the magnitude spectrum of one frame.

        Args:
            frame: array of exactly ``frame_size`` samples

        Returns:
            float64 array of length ``frame_size // 2``; entry ``b`` is
            ``hypot(re, im)`` of FFT bin ``b``
        """
        frame = np.asarray(frame, dtype=np.float64)
        if frame.shape != (self.frame_size,):
            raise ValueError(f"expected a frame of {self.frame_size} samples, got shape {frame.shape}")

        spectrum = np.fft.rfft(frame * self.window, n=self.frame_size)
        # rfft yields N/2 + 1 bins; the Nyquist bin is not analyzed
        spectrum = spectrum[:self.bin_count]
        return np.hypot(spectrum.real, spectrum.imag)
