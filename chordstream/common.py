# Audio stream settings
FRAME_SIZE = 4096  # Samples per analysis frame (FFT size)
HOP_SIZE = 2048  # Samples advanced between frames (50% overlap)
CHANNELS = 1  # Mono audio
RATE = 44100  # Nominal sample rate in Hz

# Pitch class names, index 0 = C
NOTES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def get_frame_size():
    return FRAME_SIZE

def get_hop_size():
    return HOP_SIZE

def get_rate():
    return RATE

def get_channels():
    return CHANNELS


def pitch_class_name(pitch_class):
    """Name of a pitch class, wrapping values outside 0-11."""
    return NOTES[pitch_class % 12]


def clear_line():
    """Clear the current line by printing spaces and returning to start"""
    print(" " * 80, end='\r')
