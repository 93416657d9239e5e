"""
Audio source boundary and the microphone implementation on top of sounddevice.

sounddevice is imported lazily so the analysis code can be used (and
tested) on machines without a PortAudio library.
"""
import logging
from abc import ABC, abstractmethod

import numpy as np

from chordstream.common import get_channels, get_hop_size
from chordstream.errors import PermissionDenied, SourceInitializationFailure

logger = logging.getLogger(__name__)


class AudioSource(ABC):
    """
    Push-style source of mono float32 sample chunks.

    ``start`` attaches the callbacks and begins delivery; ``stop`` detaches
    them. Implementations raise ``PermissionDenied`` or
    ``SourceInitializationFailure`` from ``start``.
    """

    @abstractmethod
    def start(self, sample_rate, on_chunk, on_error):
        """Begin delivering chunks to ``on_chunk(samples)``; report failures to ``on_error(message)``."""

    @abstractmethod
    def stop(self):
        """Stop delivery and release the device."""


def _import_sounddevice():
    try:
        import sounddevice as sd
    except (ImportError, OSError) as e:
        # OSError is raised when the PortAudio shared library is missing
        raise SourceInitializationFailure(f"Audio backend unavailable: {e}") from e
    return sd


def list_input_devices():
    """
    Enumerate devices that can record.

    Returns:
        list of (index, name, max_input_channels, is_default) tuples
    """
    sd = _import_sounddevice()
    default_input = sd.default.device[0]
    devices = []
    for i, device in enumerate(sd.query_devices()):
        if device['max_input_channels'] > 0:
            devices.append((i, device['name'], device['max_input_channels'], i == default_input))
    return devices


class SoundDeviceSource(AudioSource):
    """Microphone input through a ``sounddevice.InputStream``."""

    def __init__(self, device=None, blocksize=None):
        self.device = device
        self.blocksize = blocksize if blocksize is not None else get_hop_size()
        self.stream = None
        self.sample_rate = None

    def start(self, sample_rate, on_chunk, on_error):
        if self.stream is not None:
            raise SourceInitializationFailure("Audio source is already running.")

        sd = _import_sounddevice()

        def callback(indata, frames, time_info, status):
            if status:
                logger.warning("Input stream status: %s", status)
            try:
                on_chunk(np.asarray(indata[:, 0], dtype=np.float32).copy())
            except Exception as e:
                logger.exception("Audio processing failed")
                on_error(f"Audio processing failed: {e}")

        stream = None
        try:
            stream = sd.InputStream(
                samplerate=sample_rate,
                blocksize=self.blocksize,
                device=self.device,
                channels=get_channels(),
                dtype='float32',
                callback=callback,
            )
            self.sample_rate = stream.samplerate
            stream.start()
        except PermissionError as e:
            self.sample_rate = None
            self._discard(stream)
            raise PermissionDenied(f"Microphone permission denied: {e}") from e
        except (sd.PortAudioError, OSError, ValueError) as e:
            self.sample_rate = None
            self._discard(stream)
            raise SourceInitializationFailure(f"Audio engine failed: {e}") from e

        self.stream = stream
        logger.info("Input stream started (device=%s, rate=%s Hz, blocksize=%d)",
                    self.device if self.device is not None else "default",
                    self.sample_rate, self.blocksize)

    @staticmethod
    def _discard(stream):
        if stream is None:
            return
        try:
            stream.close()
        except Exception:
            logger.debug("Ignoring error while closing a failed stream", exc_info=True)

    def stop(self):
        stream, self.stream = self.stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()
        logger.info("Input stream stopped")
