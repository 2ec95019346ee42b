import time
from typing import Optional, TYPE_CHECKING
import redis
from ..domain.models import PingOutcome
from ..exceptions import ConnectionError, describe_error

if TYPE_CHECKING:
    from .factory import RedisOptions

class RedisConnector:
    """
    One persistent Redis session per monitored endpoint.

    The underlying client reconnects on its own after a dropped socket,
    so a connector survives failed pings and is reused every tick.
    """
    def __init__(self, descriptor: str, options: "RedisOptions"):
        self.descriptor = descriptor
        self.options = options
        self._client: Optional[redis.Redis] = None

    def _build_client(self) -> redis.Redis:
        kwargs = self.options.client_kwargs()
        if self.options.url:
            return redis.Redis.from_url(self.options.url, **kwargs)
        return redis.Redis(**kwargs)

    def connect(self) -> None:
        """
        Opens the session and verifies it with a first PING.
        Raises ConnectionError if the endpoint is unreachable.
        """
        if self._client is not None:
            return
        client = self._build_client()
        try:
            client.ping()
        except redis.RedisError as e:
            client.close()
            raise ConnectionError(f"Failed to connect to {self.descriptor}: {describe_error(e)}") from e
        self._client = client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def check_health(self) -> PingOutcome:
        if self._client is None:
            return PingOutcome.failed(f"Not connected to {self.descriptor}")

        start_time = time.perf_counter()
        try:
            self._client.ping()
        except Exception as e:
            return PingOutcome.failed(describe_error(e))

        latency = (time.perf_counter() - start_time) * 1000  # ms
        return PingOutcome.ok(latency)
