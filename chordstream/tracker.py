"""
Temporal tracking of which pitch classes are currently sounding.
"""
import numpy as np


class ActivePitchClassTracker:
    """
    Smooths chroma across frames and keeps a per-pitch-class hold value.

    Hold values rise quickly when a smoothed pitch class is strong and
    decay slowly otherwise, so a note switches on fast but survives short
    spectral dips. Pitch classes whose hold exceeds ``active_threshold``
    form the active set, capped at ``max_active`` entries.
    """

    def __init__(self, smoothing=0.82, silence_decay=0.95,
                 strong_threshold=0.34, strong_attack=0.30,
                 weak_threshold=0.23, weak_attack=0.08,
                 playing_decay=0.965, active_threshold=0.55, max_active=5):
        self.smoothing = smoothing
        self.silence_decay = silence_decay
        self.strong_threshold = strong_threshold
        self.strong_attack = strong_attack
        self.weak_threshold = weak_threshold
        self.weak_attack = weak_attack
        self.playing_decay = playing_decay
        self.active_threshold = active_threshold
        self.max_active = max_active
        self.smoothed_chroma = np.zeros(12)
        self.hold = np.zeros(12)

    @classmethod
    def from_config(cls, config):
        return cls(
            smoothing=config.chroma_smoothing,
            silence_decay=config.silence_decay,
            strong_threshold=config.strong_threshold,
            strong_attack=config.strong_attack,
            weak_threshold=config.weak_threshold,
            weak_attack=config.weak_attack,
            playing_decay=config.playing_decay,
            active_threshold=config.active_threshold,
            max_active=config.max_active,
        )

    def update(self, chroma, has_signal):
        """
        Advance the tracker by one frame.

        Args:
            chroma: 12-element chroma vector for the frame
            has_signal: noise gate decision for the same frame

        Returns:
            frozenset of active pitch classes (0-11), at most ``max_active``
        """
        chroma = np.clip(np.asarray(chroma, dtype=np.float64), 0.0, 1.0)
        self.smoothed_chroma = self.smoothing * self.smoothed_chroma + (1 - self.smoothing) * chroma

        if not has_signal:
            self.hold *= self.silence_decay
        else:
            strong = self.smoothed_chroma >= self.strong_threshold
            weak = ~strong & (self.smoothed_chroma >= self.weak_threshold)
            quiet = ~(strong | weak)
            self.hold[strong] = np.minimum(1.0, self.hold[strong] + self.strong_attack)
            self.hold[weak] = np.minimum(1.0, self.hold[weak] + self.weak_attack)
            self.hold[quiet] *= self.playing_decay
        np.clip(self.hold, 0.0, 1.0, out=self.hold)

        active = np.flatnonzero(self.hold > self.active_threshold)
        if len(active) > self.max_active:
            # stable sort: equal holds keep ascending pitch-class order
            active = np.argsort(-self.hold, kind='stable')[:self.max_active]
        return frozenset(int(i) for i in active)

    def reset(self):
        self.smoothed_chroma = np.zeros(12)
        self.hold = np.zeros(12)
