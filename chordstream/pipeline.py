"""
Per-frame chord detection pipeline and the start/stop control surface.

Pipeline:
1. Accumulate incoming samples into overlapping frames
2. Noise gate on the raw frame, magnitude spectrum of the windowed frame
3. Harmonic-folded chroma vector
4. Active pitch classes via smoothing and hold tracking
5. Template matching to a raw chord
6. Hysteresis to a stable chord
7. Throttled publication on the result channel
"""
import logging
import threading
import time

from chordstream.channel import LatestValueChannel
from chordstream.chords import ChordIdentifier
from chordstream.config import DetectorConfig
from chordstream.errors import ChordDetectorError
from chordstream.state import PipelineState

logger = logging.getLogger(__name__)


class ChordPipeline:
    """
    Runs the full analysis chain synchronously for every frame.

    Every frame advances the smoothing, hold and hysteresis state; only the
    publication on ``results`` is throttled to one per ``emit_interval``.
    """

    def __init__(self, config=None, clock=time.monotonic, results=None):
        self.config = config if isinstance(config, DetectorConfig) else DetectorConfig(config)
        self.config.validate()
        self.clock = clock
        self.state = PipelineState(self.config, clock=clock)
        self.identifier = ChordIdentifier()
        self.results = results if results is not None else LatestValueChannel()

    def reset(self):
        self.state.reset()

    def analyze_frame(self, frame):
        """
        Run the chain up to the raw (unstabilized) chord for one frame.

        Returns:
            dict with 'has_signal', 'chroma', 'active' and 'raw'
        """
        state = self.state
        has_signal = state.noise_gate.evaluate(frame)
        magnitudes = state.analyzer.magnitudes(frame)
        chroma = state.chroma_extractor.extract(magnitudes, state.sample_rate, state.analyzer.frame_size)
        active = state.tracker.update(chroma, has_signal)
        raw = self.identifier.identify(active)
        return {
            'has_signal': has_signal,
            'chroma': chroma,
            'active': active,
            'raw': raw,
        }

    def process_frame(self, frame, now=None):
        """
        Process one analysis frame end to end.

        Args:
            frame: ``frame_size`` raw samples
            now: monotonic timestamp in seconds (defaults to the clock)

        Returns:
            the stabilized DetectionResult for this frame, whether or not it
            was published
        """
        if now is None:
            now = self.clock()
        analysis = self.analyze_frame(frame)
        result = self.state.stabilizer.update(analysis['raw'], now)
        self.state.frames_processed += 1

        if self.state.should_emit(now):
            self.results.publish(result)
        return result

    def push(self, samples):
        """
        Feed a chunk of raw samples of any length.

        Returns:
            list of stabilized results, one per frame the chunk completed
        """
        return [self.process_frame(frame) for frame in self.state.frame_buffer.push(samples)]


class _Session:
    """Binds source callbacks to one pipeline; callbacks for a dead session are dropped."""

    def __init__(self, pipeline):
        self.pipeline = pipeline
        self.alive = True


class ChordDetector:
    """
    Control surface: attaches a fresh pipeline to an audio source.

    ``start()`` and ``stop()`` are serialized. Results arrive on
    ``results`` and human-readable failures on ``errors``, both single-slot
    channels that only keep the newest value.
    """

    def __init__(self, source, config=None, clock=time.monotonic):
        self.source = source
        self.config = config if isinstance(config, DetectorConfig) else DetectorConfig(config)
        self.clock = clock
        self.results = LatestValueChannel()
        self.errors = LatestValueChannel()
        self._control_lock = threading.Lock()
        self._session = None

    @property
    def is_running(self):
        return self._session is not None

    @property
    def pipeline(self):
        session = self._session
        return session.pipeline if session is not None else None

    def start(self):
        """
        Start a clean session. A running session is stopped first.

        Returns:
            True if the source is attached, False if it failed (the reason
            is published on ``errors``)
        """
        with self._control_lock:
            return self._start_locked()

    def stop(self):
        """Detach from the source. Does nothing if not running."""
        with self._control_lock:
            self._stop_locked()

    def toggle(self):
        """Start if stopped, stop if running. Returns the new running state."""
        with self._control_lock:
            if self._session is not None:
                self._stop_locked()
                return False
            return self._start_locked()

    def _source_rate(self):
        rate = getattr(self.source, 'sample_rate', None)
        return float(rate) if rate else None

    def _start_locked(self):
        if self._session is not None:
            self._stop_locked()

        self.errors.clear()
        self.results.clear()
        pipeline = ChordPipeline(self.config, clock=self.clock, results=self.results)
        session = _Session(pipeline)

        def on_chunk(samples):
            if not session.alive:
                return
            # the device may only report its real rate once the stream is open
            rate = self._source_rate()
            if rate is not None and rate != pipeline.state.sample_rate:
                logger.info("Input runs at %s Hz (requested %s Hz)", rate, self.config.sample_rate)
                pipeline.state.sample_rate = rate
            pipeline.push(samples)

        def on_error(message):
            self._report_async_error(session, message)

        try:
            self.source.start(self.config.sample_rate, on_chunk, on_error)
        except ChordDetectorError as e:
            session.alive = False
            logger.error("Could not start audio source: %s", e)
            self.errors.publish(str(e))
            return False

        rate = self._source_rate()
        if rate is not None:
            pipeline.state.sample_rate = rate

        self._session = session
        logger.info("Chord detection started at %s Hz", pipeline.state.sample_rate)
        return True

    def _stop_locked(self):
        session, self._session = self._session, None
        if session is None:
            return
        session.alive = False
        try:
            self.source.stop()
        except Exception as e:
            logger.exception("Error while stopping audio source")
            self.errors.publish(f"Audio source failed to stop: {e}")
        logger.info("Chord detection stopped after %d frames", session.pipeline.state.frames_processed)

    def _report_async_error(self, session, message):
        # Runs on the audio callback thread; teardown happens on a helper thread.
        if not session.alive:
            return
        session.alive = False
        threading.Thread(target=self._fail, args=(session, message), daemon=True).start()

    def _fail(self, session, message):
        with self._control_lock:
            if self._session is session:
                self._stop_locked()
        logger.error("Chord detection stopped: %s", message)
        self.errors.publish(message)
