"""
Live chord detection from a monophonic audio stream.
"""
from chordstream.chords import DetectionResult, ChordIdentifier, UNKNOWN
from chordstream.config import DetectorConfig
from chordstream.errors import ChordDetectorError, PermissionDenied, SourceInitializationFailure
from chordstream.pipeline import ChordPipeline, ChordDetector

__version__ = "0.1.0"

__all__ = [
    "ChordDetector",
    "ChordDetectorError",
    "ChordIdentifier",
    "ChordPipeline",
    "DetectionResult",
    "DetectorConfig",
    "PermissionDenied",
    "SourceInitializationFailure",
    "UNKNOWN",
]
