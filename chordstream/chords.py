"""
Chord templates and template matching against an active pitch-class set.
"""
from collections import namedtuple

from chordstream.common import pitch_class_name

UNKNOWN = "Unknown"

# Scoring weights: notes outside the template cost more than template notes
# that are missing, since a missing note may simply be unplayed.
EXTRA_PENALTY = 0.12
MISS_PENALTY = 0.08
MIN_MATCH_SCORE = 0.4


ChordQuality = namedtuple('ChordQuality', ['name', 'symbol', 'intervals'])

# Declaration order is also the tie-break order within a root.
CHORD_QUALITIES = (
    ChordQuality('major', '', frozenset({0, 4, 7})),
    ChordQuality('minor', 'm', frozenset({0, 3, 7})),
    ChordQuality('diminished', 'dim', frozenset({0, 3, 6})),
    ChordQuality('augmented', 'aug', frozenset({0, 4, 8})),
    ChordQuality('sus2', 'sus2', frozenset({0, 2, 7})),
    ChordQuality('sus4', 'sus4', frozenset({0, 5, 7})),
    ChordQuality('dominant7', '7', frozenset({0, 4, 7, 10})),
    ChordQuality('major7', 'maj7', frozenset({0, 4, 7, 11})),
    ChordQuality('minor7', 'm7', frozenset({0, 3, 7, 10})),
    ChordQuality('half-diminished7', 'm7b5', frozenset({0, 3, 6, 10})),
    ChordQuality('diminished7', 'dim7', frozenset({0, 3, 6, 9})),
)


class DetectionResult(namedtuple('DetectionResult', ['chord_name', 'note_names', 'confidence'])):
    """Immutable chord detection: label, ordered note names, confidence in [0, 1]."""

    __slots__ = ()

    def __new__(cls, chord_name, note_names=(), confidence=0.0):
        return super().__new__(cls, chord_name, tuple(note_names), float(confidence))

    @property
    def is_unknown(self):
        return self.chord_name == UNKNOWN

    def to_dict(self):
        return {
            'chord': self.chord_name,
            'notes': list(self.note_names),
            'confidence': self.confidence,
        }


EMPTY_RESULT = DetectionResult(UNKNOWN, (), 0.0)


class ChordTemplate(namedtuple('ChordTemplate', ['root', 'quality', 'pitch_classes'])):
    """A quality transposed to a root; ``pitch_classes`` is canonical (mod 12, no duplicates)."""

    __slots__ = ()

    @classmethod
    def build(cls, root, quality):
        return cls(root, quality, frozenset((interval + root) % 12 for interval in quality.intervals))

    @property
    def name(self):
        return pitch_class_name(self.root) + self.quality.symbol

    def note_names(self):
        return _names(self.pitch_classes)


def _clamp(value, low, high):
    return max(low, min(high, value))


def _names(pitch_classes):
    return [pitch_class_name(pc) for pc in sorted(pitch_classes)]


class ChordIdentifier:
    """
    Scores an active pitch-class set against all 12 x 11 chord templates.

    score = overlap - 0.12 * extra - 0.08 * miss, where overlap is the
    fraction of the template present, extra counts active notes outside
    the template and miss counts template notes not active.
    """

    def __init__(self, qualities=CHORD_QUALITIES):
        # roots ascending, then qualities in declaration order
        self.templates = [ChordTemplate.build(root, quality)
                          for root in range(12) for quality in qualities]

    @staticmethod
    def score(active, template):
        """Score one template, or None when fewer than two of its notes are active."""
        intersection = active & template.pitch_classes
        if len(intersection) < 2:
            return None
        overlap = len(intersection) / len(template.pitch_classes)
        extra = len(active - template.pitch_classes)
        miss = len(template.pitch_classes - active)
        return overlap - EXTRA_PENALTY * extra - MISS_PENALTY * miss

    def best_match(self, active):
        """
        Highest-scoring template and its score.

        Ties keep the first template in enumeration order. Returns
        ``(None, 0.0)`` when no template scores above zero.
        """
        active = frozenset(pc % 12 for pc in active)
        best_template = None
        best_score = 0.0
        for template in self.templates:
            score = self.score(active, template)
            if score is not None and score > best_score:
                best_score = score
                best_template = template
        return best_template, best_score

    def identify(self, active):
        """
        Label an active pitch-class set.

        Args:
            active: iterable of pitch classes 0-11

        Returns:
            DetectionResult; "Unknown" when fewer than two notes are active
            or no template scores at least 0.4
        """
        active = frozenset(pc % 12 for pc in active)
        if len(active) < 2:
            return DetectionResult(UNKNOWN, _names(active), 0.35 if active else 0.0)

        template, best_score = self.best_match(active)
        if template is None or best_score < MIN_MATCH_SCORE:
            return DetectionResult(UNKNOWN, _names(active), _clamp(best_score + 0.2, 0.05, 0.35))

        return DetectionResult(template.name, template.note_names(), _clamp(best_score, 0.0, 1.0))
