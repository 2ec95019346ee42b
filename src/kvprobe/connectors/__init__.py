from .base import RedisConnector
from .factory import get_connector, parse_descriptor

__all__ = ["RedisConnector", "get_connector", "parse_descriptor"]
