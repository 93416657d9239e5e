"""
Hysteresis state machine that keeps the displayed chord from flickering.
"""
import logging
import time

from chordstream.chords import EMPTY_RESULT

logger = logging.getLogger(__name__)


class Stabilizer:
    """
    Debounces the raw per-frame chord stream.

    - "Unknown" frames are ignored for ``hold_duration`` seconds after the
      last confirmed chord, as long as that chord had notes.
    - The same label as the stable one refreshes it immediately.
    - A different label must arrive ``confirm_frames`` times in a row and
      at least ``min_switch_interval`` after the last switch before it
      replaces the stable chord. Until then the stable chord is returned
      while the hold window lasts; after it, the raw result passes through
      unconfirmed.
    """

    def __init__(self, hold_duration=1.2, min_switch_interval=0.22, confirm_frames=3,
                 clock=time.monotonic):
        self.hold_duration = hold_duration
        self.min_switch_interval = min_switch_interval
        self.confirm_frames = confirm_frames
        self.clock = clock
        self.reset()

    @classmethod
    def from_config(cls, config, clock=time.monotonic):
        return cls(
            hold_duration=config.hold_duration,
            min_switch_interval=config.min_switch_interval,
            confirm_frames=config.confirm_frames,
            clock=clock,
        )

    def reset(self, now=None):
        self.stable = EMPTY_RESULT
        self.last_stable_time = self.clock() if now is None else now
        self.pending = None
        self.pending_count = 0

    def _clear_pending(self):
        self.pending = None
        self.pending_count = 0

    def update(self, raw, now=None):
        """
        Feed one raw detection and return what should be shown.

        Args:
            raw: DetectionResult for the current frame
            now: monotonic timestamp in seconds (defaults to the clock)

        Returns:
            the stabilized DetectionResult
        """
        if now is None:
            now = self.clock()
        since_stable = now - self.last_stable_time

        if raw.is_unknown:
            if since_stable < self.hold_duration and self.stable.note_names:
                return self.stable
            # last_stable_time intentionally left as is here
            self.stable = raw
            return raw

        if raw.chord_name == self.stable.chord_name:
            self.stable = raw
            self.last_stable_time = now
            self._clear_pending()
            return raw

        if self.pending is not None and self.pending.chord_name == raw.chord_name:
            self.pending_count += 1
        else:
            self.pending_count = 1
        self.pending = raw

        can_switch = since_stable > self.min_switch_interval
        if self.pending_count >= self.confirm_frames and can_switch:
            confirmed = self.pending
            logger.debug("chord %s -> %s after %d frames",
                         self.stable.chord_name, confirmed.chord_name, self.pending_count)
            self.stable = confirmed
            self.last_stable_time = now
            self._clear_pending()
            return confirmed

        if since_stable < self.hold_duration:
            return self.stable
        return raw
