"""
Output handler classes for rendering detection results.
"""
import json
import sys
import time
from abc import ABC, abstractmethod

from chordstream.common import clear_line


def format_notes(note_names):
    """Comma-joined note names, or "-" when there are none."""
    return ", ".join(note_names) if note_names else "-"


class OutputHandler(ABC):
    """
    Abstract base class for output handling.
    Defines the interface for presenting what the detector publishes.
    """

    @abstractmethod
    def chord_detected(self, result):
        """Output a stabilized DetectionResult."""
        pass

    @abstractmethod
    def error(self, message):
        """Output a failure reported on the error channel."""
        pass

    @abstractmethod
    def listening(self):
        """Output when listening but nothing has been published yet."""
        pass


class ConsoleOutputHandler(OutputHandler):
    """
    Output handler for CLI - prints to stdout/stderr.
    """

    def __init__(self, config, stream=None):
        self.config = config
        self.log_mode = config.get('log', False)
        self.debug = config.get('debug', False)
        self.stream = stream if stream is not None else sys.stdout
        self._last_line = None

    def _get_timestamp(self):
        return time.strftime("%Y-%m-%d %H:%M:%S")

    def format_result(self, result):
        line = f"{result.chord_name} | {format_notes(result.note_names)} | {result.confidence:.0%}"
        if self.debug:
            line += f" ({result.confidence:.3f})"
        return line

    def chord_detected(self, result):
        line = self.format_result(result)
        if self.log_mode:
            # only log changes, the detector republishes several times a second
            if line != self._last_line:
                print(f"[{self._get_timestamp()}] {line}", file=self.stream)
        else:
            clear_line()
            print(line, end='\r', file=self.stream, flush=True)
        self._last_line = line
        return None

    def error(self, message):
        if not self.log_mode:
            clear_line()
        print(f"❌ {message}", file=sys.stderr)
        return None

    def listening(self):
        if not self.log_mode:
            clear_line()
            print("🎵 Listening...", end='\r', file=self.stream, flush=True)
        return None


class DictOutputHandler(OutputHandler):
    """
    Output handler that returns dictionaries for JSON serialization.
    """

    def chord_detected(self, result):
        payload = {"type": "chord"}
        payload.update(result.to_dict())
        payload["notes_text"] = format_notes(result.note_names)
        payload["timestamp"] = time.time()
        return payload

    def error(self, message):
        return {
            "type": "error",
            "message": message,
            "timestamp": time.time()
        }

    def listening(self):
        return {
            "type": "listening",
            "timestamp": time.time()
        }


class JsonLinesOutputHandler(DictOutputHandler):
    """
    Prints each payload of DictOutputHandler as one JSON line.

    Chord payloads are only written when chord, notes or confidence
    change; errors go to stderr.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout
        self._last_chord = None

    def _write(self, payload, stream):
        print(json.dumps(payload), file=stream, flush=True)
        return payload

    def chord_detected(self, result):
        payload = super().chord_detected(result)
        key = (payload["chord"], payload["notes"], payload["confidence"])
        if key != self._last_chord:
            self._last_chord = key
            self._write(payload, self.stream)
        return payload

    def error(self, message):
        return self._write(super().error(message), sys.stderr)

    def listening(self):
        return self._write(super().listening(), self.stream)
