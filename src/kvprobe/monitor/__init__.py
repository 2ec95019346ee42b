import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence
from ..connectors.factory import get_connector
from ..domain.interfaces import KeyValueConnector
from .recorder import CsvRecorder
from .registry import TargetRegistry, build_targets
from .sampler import DEFAULT_INTERVAL_MS, Sampler

class LatencyMonitor:
    """
    Facade Pattern: one monitoring run from startup to shutdown.
    Connect targets -> open the results file -> sample until stopped.
    """
    def __init__(
        self,
        descriptors: Sequence[str],
        logger: logging.Logger,
        output_dir: Path = Path("Results"),
        interval_ms: int = DEFAULT_INTERVAL_MS,
        connector_factory: Callable[[str], KeyValueConnector] = get_connector,
    ):
        self.descriptors = list(descriptors)
        self.logger = logger
        self.output_dir = Path(output_dir)
        self.interval_ms = interval_ms
        self.connector_factory = connector_factory
        self.stop_event = threading.Event()
        self.registry: Optional[TargetRegistry] = None
        self.recorder: Optional[CsvRecorder] = None

    def stop(self) -> None:
        self.stop_event.set()

    def run(self, max_ticks: Optional[int] = None, started_at: Optional[datetime] = None) -> int:
        """
        Blocks until stop() is called (or max_ticks rounds are written).
        Returns the number of rows written.
        """
        # Fails fast on an empty list, before any file exists
        self.registry = build_targets(self.descriptors, self.logger, self.connector_factory)
        try:
            with CsvRecorder(self.output_dir, len(self.registry), started_at) as recorder:
                self.recorder = recorder
                self.logger.info(f"Writing results to {recorder.path}")
                sampler = Sampler(self.registry, recorder, self.logger, self.interval_ms)
                ticks = sampler.run(self.stop_event, max_ticks)
        finally:
            self.registry.close()
        self.logger.info(f"Stopped after {ticks} rounds")
        return ticks

__all__ = ["LatencyMonitor", "CsvRecorder", "Sampler", "TargetRegistry", "build_targets"]
