"""
Unified configuration interface for the CLI and programmatic use.
"""
from chordstream.common import get_frame_size, get_hop_size, get_rate


class DetectorConfig:
    """
    Configuration that wraps either an argparse namespace (CLI) or a
    dictionary (library use). Every tunable of the detection pipeline is
    exposed as a property with its default.
    """

    def __init__(self, source=None):
        """
        Initialize config from either argparse namespace or dictionary.

        Args:
            source: argparse.Namespace, dict, or None for all defaults
        """
        self._source = source if source is not None else {}
        self._is_dict = isinstance(self._source, dict)

    def get(self, key, default=None):
        """Get a configuration value."""
        if self._is_dict:
            value = self._source.get(key, default)
        else:
            value = getattr(self._source, key, default)
        # argparse stores unset optional flags as None
        return default if value is None else value

    def __getitem__(self, key):
        """Allow dict-like access."""
        return self.get(key)

    def __contains__(self, key):
        """Check if key exists."""
        if self._is_dict:
            return key in self._source
        return hasattr(self._source, key)

    # --- Framing / spectrum ---
    @property
    def frame_size(self):
        return int(self.get('frame_size', get_frame_size()))

    @property
    def hop_size(self):
        return int(self.get('hop_size', get_hop_size()))

    @property
    def sample_rate(self):
        return float(self.get('sample_rate', get_rate()))

    @property
    def min_freq(self):
        return float(self.get('min_freq', 55.0))

    @property
    def max_freq(self):
        return float(self.get('max_freq', 2000.0))

    @property
    def harmonics(self):
        return int(self.get('harmonics', 5))

    @property
    def magnitude_floor(self):
        return float(self.get('magnitude_floor', 1e-4))

    # --- Noise gate ---
    @property
    def initial_noise_floor(self):
        return float(self.get('initial_noise_floor', 0.002))

    @property
    def gate_min_threshold(self):
        return float(self.get('gate_min_threshold', 0.004))

    @property
    def gate_ratio(self):
        return float(self.get('gate_ratio', 2.8))

    @property
    def floor_alpha_signal(self):
        return float(self.get('floor_alpha_signal', 0.995))

    @property
    def floor_alpha_silence(self):
        return float(self.get('floor_alpha_silence', 0.92))

    @property
    def floor_rms_cap(self):
        return float(self.get('floor_rms_cap', 0.02))

    # --- Pitch class tracker ---
    @property
    def chroma_smoothing(self):
        return float(self.get('chroma_smoothing', 0.82))

    @property
    def silence_decay(self):
        return float(self.get('silence_decay', 0.95))

    @property
    def strong_threshold(self):
        return float(self.get('strong_threshold', 0.34))

    @property
    def strong_attack(self):
        return float(self.get('strong_attack', 0.30))

    @property
    def weak_threshold(self):
        return float(self.get('weak_threshold', 0.23))

    @property
    def weak_attack(self):
        return float(self.get('weak_attack', 0.08))

    @property
    def playing_decay(self):
        return float(self.get('playing_decay', 0.965))

    @property
    def active_threshold(self):
        return float(self.get('active_threshold', 0.55))

    @property
    def max_active(self):
        return int(self.get('max_active', 5))

    # --- Stabilizer / emission ---
    @property
    def hold_duration(self):
        return float(self.get('hold_duration', 1.2))

    @property
    def min_switch_interval(self):
        return float(self.get('min_switch_interval', 0.22))

    @property
    def confirm_frames(self):
        return int(self.get('confirm_frames', 3))

    @property
    def emit_interval(self):
        return float(self.get('emit_interval', 0.12))

    # --- CLI ---
    @property
    def device(self):
        device = self.get('device')
        return int(device) if device is not None else None

    @property
    def log(self):
        return bool(self.get('log', False))

    @property
    def debug(self):
        return bool(self.get('debug', False))

    @property
    def log_level(self):
        return str(self.get('log_level', 'INFO')).upper()

    @property
    def duration(self):
        return float(self.get('duration', 0.0))

    def validate(self):
        """
        Reject framing parameters the pipeline cannot run with.

        Raises:
            ValueError: if the frame/hop sizes or frequency band are inconsistent
        """
        if self.frame_size <= 0 or self.frame_size % 2:
            raise ValueError(f"frame_size must be a positive even number, got {self.frame_size}")
        if not 0 < self.hop_size <= self.frame_size:
            raise ValueError(f"hop_size must be in (0, {self.frame_size}], got {self.hop_size}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.min_freq >= self.max_freq:
            raise ValueError(f"min_freq ({self.min_freq}) must be below max_freq ({self.max_freq})")
        return self

    def to_dict(self):
        """Convert config to dictionary."""
        return {
            'frame_size': self.frame_size,
            'hop_size': self.hop_size,
            'sample_rate': self.sample_rate,
            'min_freq': self.min_freq,
            'max_freq': self.max_freq,
            'harmonics': self.harmonics,
            'magnitude_floor': self.magnitude_floor,
            'initial_noise_floor': self.initial_noise_floor,
            'gate_min_threshold': self.gate_min_threshold,
            'gate_ratio': self.gate_ratio,
            'floor_alpha_signal': self.floor_alpha_signal,
            'floor_alpha_silence': self.floor_alpha_silence,
            'floor_rms_cap': self.floor_rms_cap,
            'chroma_smoothing': self.chroma_smoothing,
            'silence_decay': self.silence_decay,
            'strong_threshold': self.strong_threshold,
            'strong_attack': self.strong_attack,
            'weak_threshold': self.weak_threshold,
            'weak_attack': self.weak_attack,
            'playing_decay': self.playing_decay,
            'active_threshold': self.active_threshold,
            'max_active': self.max_active,
            'hold_duration': self.hold_duration,
            'min_switch_interval': self.min_switch_interval,
            'confirm_frames': self.confirm_frames,
            'emit_interval': self.emit_interval,
            'device': self.device,
            'log': self.log,
            'debug': self.debug,
            'log_level': self.log_level,
            'duration': self.duration,
        }
