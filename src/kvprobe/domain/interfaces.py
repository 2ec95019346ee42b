from typing import Protocol, runtime_checkable
from .models import PingOutcome

@runtime_checkable
class KeyValueConnector(Protocol):
    """
    The connection collaborator: one live session per target.
    connect() may raise; check_health() must not.
    """
    descriptor: str

    def connect(self) -> None:
        ...

    def check_health(self) -> PingOutcome:
        ...

    def close(self) -> None:
        ...

@runtime_checkable
class RowSink(Protocol):
    """Anything the sampler can hand a finished row to"""

    def write_row(self, row) -> None:
        ...
