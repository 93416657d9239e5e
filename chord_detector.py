# file: chord_detector.py
import argparse
import os
import sys
import time

from chordstream.common import get_rate
from chordstream.config import DetectorConfig
from chordstream.errors import ChordDetectorError
from chordstream.logging_config import setup_logging
from chordstream.output import ConsoleOutputHandler, JsonLinesOutputHandler
from chordstream.pipeline import ChordDetector
from chordstream.sound_capture import SoundDeviceSource, list_input_devices


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Live chord detector (microphone input)')

    # --- Device ---
    parser.add_argument('--list-devices', action='store_true', help='List available audio input devices and exit')
    parser.add_argument('--device', type=int, help='Audio input device ID (use --list-devices to see available devices)')
    parser.add_argument('--sample-rate', type=float, default=get_rate(),
                        help=f'Sample rate in Hz (default: {get_rate()})')

    # --- Output modes ---
    parser.add_argument('--log', action='store_true', help='Print timestamped chord changes instead of a live line')
    parser.add_argument('--debug', action='store_true', help='Show raw confidence values')
    parser.add_argument('--json', action='store_true', help='Print one JSON object per chord change instead of text')
    parser.add_argument('--log-level', default=os.environ.get('CHORDSTREAM_LOG_LEVEL', 'INFO'),
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], type=str.upper,
                        help='Diagnostic log level (default: $CHORDSTREAM_LOG_LEVEL or INFO)')
    parser.add_argument('--log-file', type=str, help='Also write diagnostic logs to this file')
    parser.add_argument('--log-json', action='store_true', help='Emit diagnostic logs as JSON lines')

    # --- Timing ---
    parser.add_argument('--duration', type=float, default=0.0,
                        help='Stop after this many seconds (0 = run until Ctrl+C, default: 0)')

    return parser.parse_args(argv)


def run(detector, output, duration=0.0, poll_interval=0.1, clock=time.monotonic):
    """
    Consume the detector's channels until an error, the duration elapses, or Ctrl+C.

    Returns:
        process exit status
    """
    deadline = clock() + duration if duration > 0 else None
    seen = detector.results.seq
    output.listening()

    while True:
        if deadline is not None and clock() >= deadline:
            return 0
        error = detector.errors.latest()
        if error is not None:
            output.error(error)
            return 1
        seq, result = detector.results.wait(seen, timeout=poll_interval)
        if result is not None:
            seen = seq
            output.chord_detected(result)


def main(argv=None):
    args = parse_args(argv)
    logger = setup_logging(args.log_level, log_file=args.log_file, json_format=args.log_json)

    if args.list_devices:
        try:
            devices = list_input_devices()
        except ChordDetectorError as e:
            print(f"❌ {e}", file=sys.stderr)
            return 1
        print("Available audio input devices:")
        for index, name, channels, is_default in devices:
            default_marker = " (DEFAULT)" if is_default else ""
            print(f"  [{index}] {name} - {channels} channel(s){default_marker}")
        return 0

    config = DetectorConfig(args)
    try:
        config.validate()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return 2

    detector = ChordDetector(SoundDeviceSource(device=config.device), config)
    if args.json:
        output = JsonLinesOutputHandler()
    else:
        output = ConsoleOutputHandler(config)
        print("🎹 Chord detector listening... Press Ctrl+C to stop.")
    logger.debug("Configuration: %s", config.to_dict())

    if not detector.start():
        output.error(detector.errors.latest() or "Audio source failed to start.")
        print("Common reasons for errors:", file=sys.stderr)
        print("1. Microphone not detected or properly configured.", file=sys.stderr)
        print("2. Insufficient permissions (check your OS privacy settings for microphone access).", file=sys.stderr)
        print("3. Another application is already using the microphone.", file=sys.stderr)
        return 1

    try:
        return run(detector, output, duration=config.duration)
    except KeyboardInterrupt:
        if not args.json:
            print("\n🛑 Stopping chord detector.")
        return 0
    finally:
        detector.stop()


if __name__ == '__main__':
    sys.exit(main())
