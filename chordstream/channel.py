"""
Single-slot "latest value" handoff between the audio thread and a consumer.
"""
import threading


class LatestValueChannel:
    """
    Holds only the most recently published value.

    The producer never waits on the consumer: ``publish`` replaces the slot
    and wakes any waiter. Consumers either poll ``latest()`` or block in
    ``wait()`` for something newer than the sequence number they last saw.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._value = None
        self._seq = 0

    def publish(self, value):
        with self._cond:
            self._value = value
            self._seq += 1
            self._cond.notify_all()

    def latest(self):
        return self._value

    @property
    def seq(self):
        return self._seq

    def wait(self, after_seq=0, timeout=None):
        """
        Block until a value newer than ``after_seq`` is available.

        Args:
            after_seq: sequence number the caller has already consumed
            timeout: seconds to wait, or None to wait indefinitely

        Returns:
            (seq, value) tuple; value is None if the wait timed out with
            nothing newer
        """
        with self._cond:
            self._cond.wait_for(lambda: self._seq > after_seq, timeout=timeout)
            if self._seq > after_seq:
                return self._seq, self._value
            return after_seq, None

    def clear(self):
        with self._cond:
            self._value = None
