import logging
from typing import Callable, Iterator, Sequence, Tuple
from ..connectors.factory import get_connector
from ..domain.interfaces import KeyValueConnector
from ..exceptions import UsageError

USAGE = 'Usage: kvprobe <"ConnectionString1" ["ConnectionString2" ...]>'

class Target:
    """A monitored endpoint: its descriptor and the session that pings it."""
    __slots__ = ("_identifier", "_index", "connector")

    def __init__(self, identifier: str, index: int, connector: KeyValueConnector):
        self._identifier = identifier
        self._index = index
        self.connector = connector

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def index(self) -> int:
        return self._index

    def __repr__(self) -> str:
        return f"Target({self._index}, {self._identifier!r})"

class TargetRegistry:
    """
    Fixed, ordered set of targets. Built once at startup; nothing is
    added or removed afterwards.
    """
    def __init__(self, targets: Sequence[Target]):
        self._targets: Tuple[Target, ...] = tuple(targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[Target]:
        return iter(self._targets)

    def __getitem__(self, index: int) -> Target:
        return self._targets[index]

    @property
    def identifiers(self) -> Tuple[str, ...]:
        return tuple(t.identifier for t in self._targets)

    def close(self) -> None:
        for target in self._targets:
            target.connector.close()

def build_targets(
    descriptors: Sequence[str],
    logger: logging.Logger,
    connector_factory: Callable[[str], KeyValueConnector] = get_connector,
) -> TargetRegistry:
    """
    Connects to every descriptor, in order.

    Raises UsageError for an empty list (before touching anything) and
    lets connection errors propagate after closing whatever was opened.
    """
    if not descriptors:
        raise UsageError(USAGE)

    targets = []
    try:
        for index, descriptor in enumerate(descriptors):
            connector = connector_factory(descriptor)
            connector.connect()
            targets.append(Target(descriptor, index, connector))
    except Exception:
        for target in targets:
            target.connector.close()
        raise

    for target in targets:
        logger.info(f"Monitoring: {target.identifier}")
    return TargetRegistry(targets)
