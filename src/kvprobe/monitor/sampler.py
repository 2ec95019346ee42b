import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence
from ..domain.interfaces import RowSink
from ..domain.models import PingOutcome, Row, SampleResult
from ..exceptions import describe_error
from .registry import Target

DEFAULT_INTERVAL_MS = 1000

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class Sampler:
    """
    Pings every target once per round, strictly in registry order, and
    passes the finished row to the recorder.

    The wait between rounds starts after a round completes, so slow pings
    stretch the period instead of causing overlapping rounds.
    """
    def __init__(
        self,
        targets: Sequence[Target],
        recorder: RowSink,
        logger: logging.Logger,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        clock: Callable[[], datetime] = utc_now,
    ):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self.targets = list(targets)
        self.recorder = recorder
        self.logger = logger
        self.interval_ms = interval_ms
        self.clock = clock

    def _ping(self, target: Target) -> SampleResult:
        try:
            return SampleResult.from_outcome(target.index, target.connector.check_health())
        except Exception as e:
            # Connector broke its contract (raised, or returned a malformed
            # outcome); still only a failed sample
            return SampleResult.from_outcome(target.index, PingOutcome.failed(describe_error(e)))

    def sample(self, target: Target) -> SampleResult:
        result = self._ping(target)
        if result.success:
            self.logger.info(f"Ping() completed for Server {target.identifier} in {result.elapsed_ms}ms")
        else:
            self.logger.error(f"Ping() failed for Server {target.identifier} with {result.error}")
        return result

    def tick(self) -> Row:
        timestamp = self.clock()
        row = Row(timestamp=timestamp, samples=[self.sample(t) for t in self.targets])
        self.recorder.write_row(row)
        return row

    def run(self, stop_event: Optional[threading.Event] = None, max_ticks: Optional[int] = None) -> int:
        """
        Runs rounds until stop_event is set or max_ticks rounds are done.
        Returns the number of rows written.
        """
        stop_event = stop_event or threading.Event()
        interval = self.interval_ms / 1000
        ticks = 0
        while not stop_event.is_set():
            self.tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                break
            stop_event.wait(interval)
        return ticks
