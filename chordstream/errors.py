"""
Errors surfaced by the chord detector's control surface.

The analysis chain itself never raises for numeric edge cases; only
acquiring or running the audio source can fail.
"""


class ChordDetectorError(Exception):
    """Base class for failures reported on the error channel."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class PermissionDenied(ChordDetectorError):
    """The audio source refused access (e.g. microphone permission)."""


class SourceInitializationFailure(ChordDetectorError):
    """The audio source could not be configured or started."""
