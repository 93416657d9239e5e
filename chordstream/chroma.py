"""
Harmonic-aware chroma extraction.

Every spectral bin inside the analysis band votes for the pitch class of
itself and of the fundamentals it could be an overtone of (f/2, f/3, ...),
with the vote weighted down by the harmonic number. A piano tone and its
overtones therefore reinforce the same pitch class.
"""
import numpy as np


class ChromaExtractor:
    """Folds a magnitude spectrum into a max-normalized 12-bin chroma vector."""

    def __init__(self, min_freq=55.0, max_freq=2000.0, harmonics=5, magnitude_floor=1e-4):
        self.min_freq = min_freq
        self.max_freq = max_freq
        self.harmonics = harmonics
        self.magnitude_floor = magnitude_floor
        self._mapping_key = None
        self._mapping = None

    @classmethod
    def from_config(cls, config):
        return cls(
            min_freq=config.min_freq,
            max_freq=config.max_freq,
            harmonics=config.harmonics,
            magnitude_floor=config.magnitude_floor,
        )

    def _bin_mapping(self, bin_count, sample_rate, frame_size):
        """
        (bin index, pitch class, 1/h weight) triples for every bin/harmonic
        pair whose bin and fundamental both fall inside the band.

        Depends only on the framing, so it is cached per session.
        """
        key = (bin_count, float(sample_rate), int(frame_size))
        if key == self._mapping_key:
            return self._mapping

        bins = np.arange(1, bin_count)
        freqs = bins * (float(sample_rate) / frame_size)
        in_band = (freqs >= self.min_freq) & (freqs <= self.max_freq)
        bins, freqs = bins[in_band], freqs[in_band]

        bin_parts, pc_parts, weight_parts = [], [], []
        for h in range(1, self.harmonics + 1):
            fundamentals = freqs / h
            ok = (fundamentals >= self.min_freq) & (fundamentals <= self.max_freq)
            midi = 69 + 12 * np.log2(fundamentals[ok] / 440.0)
            # round half away from zero; midi is always positive here
            pitch_classes = np.mod(np.floor(midi + 0.5).astype(np.int64), 12)
            bin_parts.append(bins[ok])
            pc_parts.append(pitch_classes)
            weight_parts.append(np.full(pitch_classes.shape, 1.0 / h))

        if bin_parts:
            mapping = (np.concatenate(bin_parts), np.concatenate(pc_parts), np.concatenate(weight_parts))
        else:
            empty = np.zeros(0, dtype=np.int64)
            mapping = (empty, empty, np.zeros(0))

        self._mapping_key = key
        self._mapping = mapping
        return mapping

    def extract(self, magnitudes, sample_rate, frame_size):
        """
        Build the chroma vector for one frame.

        Args:
            magnitudes: magnitude spectrum (``frame_size // 2`` bins)
            sample_rate: sample rate in Hz
            frame_size: FFT size the spectrum came from

        Returns:
            12-element float64 array in [0, 1]; its maximum is exactly 1
            unless no bin contributed, in which case it is all zeros
        """
        magnitudes = np.asarray(magnitudes, dtype=np.float64)
        bins, pitch_classes, weights = self._bin_mapping(len(magnitudes), sample_rate, frame_size)

        values = magnitudes[bins]
        loud = values >= self.magnitude_floor
        chroma = np.bincount(pitch_classes[loud], weights=values[loud] * weights[loud], minlength=12)
        chroma = chroma.astype(np.float64)

        peak = chroma.max()
        if peak > 0:
            chroma /= peak
        return np.clip(chroma, 0.0, 1.0)
