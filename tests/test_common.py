"""
Tests for chordstream/common.py - audio settings and utility functions.
"""
import pytest

from chordstream.common import (
    NOTES,
    get_frame_size, get_hop_size,
    get_rate, get_channels,
    pitch_class_name, clear_line
)


class TestAudioSettings:
    """Test audio configuration functions."""

    def test_default_frame_size(self):
        """Test default frame size is 4096."""
        assert get_frame_size() == 4096

    def test_default_hop_size(self):
        """Test default hop is half a frame."""
        assert get_hop_size() == 2048
        assert get_frame_size() - get_hop_size() == 2048

    def test_default_sample_rate(self):
        """Test default sample rate is 44100 Hz."""
        assert get_rate() == 44100

    def test_default_channels(self):
        """Test default channel count is 1 (mono)."""
        assert get_channels() == 1


class TestPitchClassNames:

    def test_twelve_names(self):
        assert len(NOTES) == 12
        assert NOTES[0] == "C" and NOTES[9] == "A" and NOTES[11] == "B"

    @pytest.mark.parametrize("pc,name", [(0, "C"), (12, "C"), (13, "C#"), (-1, "B")])
    def test_wraps(self, pc, name):
        assert pitch_class_name(pc) == name


class TestUtilityFunctions:

    def test_clear_line_runs(self, capsys):
        clear_line()
        assert '\r' in capsys.readouterr().out
