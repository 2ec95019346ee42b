from typing import Any, Dict, Optional
from pydantic import BaseModel
from ..exceptions import ConfigurationError
from .base import RedisConnector

URL_SCHEMES = ("redis://", "rediss://", "unix://")
DEFAULT_PORT = 6379
DEFAULT_TIMEOUT = 5.0  # seconds, for both connect and reply

class RedisOptions(BaseModel):
    """
    Connection settings parsed from a descriptor. Either `url` is set
    (URL form) or host/port and friends are (endpoint form).
    """
    url: Optional[str] = None
    host: Optional[str] = None
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    ssl: bool = False
    db: int = 0
    connect_timeout: float = DEFAULT_TIMEOUT
    socket_timeout: float = DEFAULT_TIMEOUT
    client_name: Optional[str] = None

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for redis.Redis / redis.Redis.from_url."""
        kwargs: Dict[str, Any] = {
            "socket_connect_timeout": self.connect_timeout,
            "socket_timeout": self.socket_timeout,
        }
        if self.client_name:
            kwargs["client_name"] = self.client_name
        if self.url:
            return kwargs

        kwargs.update(host=self.host, port=self.port, db=self.db)
        if self.username:
            kwargs["username"] = self.username
        if self.password:
            kwargs["password"] = self.password
        if self.ssl:
            kwargs["ssl"] = True
        return kwargs

def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ConfigurationError(f"Option '{key}' expects true/false, got '{value}'")

def _parse_int(key: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigurationError(f"Option '{key}' expects an integer, got '{value}'")

def _split_endpoint(endpoint: str) -> tuple:
    endpoint = endpoint.strip()
    if endpoint.startswith("["):
        # [::1]:6379
        host, _, rest = endpoint[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif endpoint.count(":") == 1:
        host, _, port = endpoint.partition(":")
    else:
        host, port = endpoint, ""

    if not host:
        raise ConfigurationError(f"Missing host in endpoint '{endpoint}'")
    return host, _parse_int("port", port) if port else DEFAULT_PORT

def parse_descriptor(descriptor: str) -> RedisOptions:
    """
    Parses a connection descriptor.

    Accepts redis URLs (redis://, rediss://, unix://) as-is, or the
    comma separated form `host[:port][,key=value...]`, e.g.
    `cache01:6380,password=secret,ssl=true,connectTimeout=5000`.
    Timeouts in the comma form are milliseconds.
    """
    descriptor = descriptor.strip()
    if not descriptor:
        raise ConfigurationError("Empty connection descriptor")

    if descriptor.lower().startswith(URL_SCHEMES):
        return RedisOptions(url=descriptor)

    endpoints = []
    settings: Dict[str, str] = {}
    for part in descriptor.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" in part:
            key, _, value = part.partition("=")
            settings[key.strip().lower()] = value
        else:
            endpoints.append(part)

    if not endpoints:
        raise ConfigurationError(f"No endpoint in descriptor '{descriptor}'")
    if len(endpoints) > 1:
        raise ConfigurationError(f"Only one endpoint per descriptor is supported, got {len(endpoints)}")

    host, port = _split_endpoint(endpoints[0])
    options = RedisOptions(host=host, port=port)

    if "password" in settings:
        options.password = settings["password"]
    if "user" in settings:
        options.username = settings["user"]
    if "ssl" in settings:
        options.ssl = _parse_bool("ssl", settings["ssl"])
    if "defaultdatabase" in settings:
        options.db = _parse_int("defaultDatabase", settings["defaultdatabase"])
    if "name" in settings:
        options.client_name = settings["name"]

    if "connecttimeout" in settings:
        options.connect_timeout = _parse_int("connectTimeout", settings["connecttimeout"]) / 1000
    if "synctimeout" in settings:
        options.socket_timeout = _parse_int("syncTimeout", settings["synctimeout"]) / 1000

    # Anything else (abortConnect, allowAdmin, ...) has no redis-py counterpart
    return options

def get_connector(descriptor: str) -> RedisConnector:
    """
    Factory function to create a connector for a descriptor.
    Raises ConfigurationError if the descriptor cannot be parsed.
    """
    return RedisConnector(descriptor, parse_descriptor(descriptor))
