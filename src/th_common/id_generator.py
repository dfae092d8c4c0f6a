"""Time-ordered record IDs for trades and notifications.

IDs are snowflake-style integers rendered as fixed-width decimal strings, so
comparing two IDs as strings gives the same answer as comparing creation
order. Repositories use that as the tiebreak behind `created_at`.
"""

import threading
import time

_ID_WIDTH = 19  # 63 usable bits fit in 19 decimal digits


class SnowflakeIdGenerator:
    """Per-process snowflake ID generator.

    Layout (63 bits):
      - 41 bits: milliseconds since the custom epoch
      - 10 bits: node_id (0-1023)
      - 12 bits: sequence within the millisecond (0-4095)
    """

    _EPOCH_MS = 1_700_000_000_000
    _NODE_BITS = 10
    _SEQUENCE_BITS = 12
    _MAX_SEQUENCE = (1 << _SEQUENCE_BITS) - 1

    def __init__(self, node_id: int = 0) -> None:
        if not (0 <= node_id < (1 << self._NODE_BITS)):
            raise ValueError(f"node_id must be 0-{(1 << self._NODE_BITS) - 1}")
        self._node_id = node_id
        self._sequence = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now_ms = self._clock_ms()
            if now_ms < self._last_ms:
                # Clock stepped backwards: keep issuing from the last tick.
                now_ms = self._last_ms
            if now_ms == self._last_ms:
                self._sequence = (self._sequence + 1) & self._MAX_SEQUENCE
                if self._sequence == 0:
                    now_ms = self._wait_until_after(now_ms)
            else:
                self._sequence = 0

            self._last_ms = now_ms
            value = (
                ((now_ms - self._EPOCH_MS) << (self._NODE_BITS + self._SEQUENCE_BITS))
                | (self._node_id << self._SEQUENCE_BITS)
                | self._sequence
            )
            return str(value).zfill(_ID_WIDTH)

    def _clock_ms(self) -> int:
        return int(time.time() * 1000)

    def _wait_until_after(self, last_ms: int) -> int:
        now_ms = self._clock_ms()
        while now_ms <= last_ms:
            now_ms = self._clock_ms()
        return now_ms


_default_generator = SnowflakeIdGenerator()


def generate_id() -> str:
    """Next ID from the process-wide generator."""
    return _default_generator.next_id()
