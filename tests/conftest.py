import io
import itertools
import logging
from datetime import datetime, timedelta, timezone
import pytest
from kvprobe.diagnostics import setup_logger
from kvprobe.domain.models import PingOutcome

class FakeConnector:
    """
    Stands in for RedisConnector. `outcomes` is cycled forever; an
    Exception instance in it is raised from check_health().
    """
    def __init__(self, descriptor, outcomes=None, fail_connect=None):
        self.descriptor = descriptor
        self._outcomes = itertools.cycle(outcomes or [PingOutcome.ok(1.0)])
        self.fail_connect = fail_connect
        self.connected = False
        self.closed = False
        self.pings = 0

    def connect(self):
        if self.fail_connect:
            raise self.fail_connect
        self.connected = True

    def check_health(self):
        self.pings += 1
        outcome = next(self._outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True

class ListSink:
    def __init__(self):
        self.rows = []

    def write_row(self, row):
        self.rows.append(row)

class FixedClock:
    """Returns 2024-01-02 03:04:05 UTC, one second later on each call."""
    def __init__(self, start=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value

@pytest.fixture
def log_stream():
    return io.StringIO()

@pytest.fixture
def logger(log_stream):
    log = setup_logger("kvprobe.test", level=logging.INFO, stream=log_stream)
    yield log
    for handler in list(log.handlers):
        log.removeHandler(handler)

@pytest.fixture
def fake_factory():
    """
    Builds FakeConnectors from a {descriptor: kwargs} script and keeps
    every instance it creates in `.created`.
    """
    class Factory:
        def __init__(self):
            self.script = {}
            self.created = []

        def __call__(self, descriptor):
            connector = FakeConnector(descriptor, **self.script.get(descriptor, {}))
            self.created.append(connector)
            return connector

    return Factory()
