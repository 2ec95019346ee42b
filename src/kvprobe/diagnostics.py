import logging
import sys
from typing import IO, Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)-5s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def setup_logger(name: str = "kvprobe", level="INFO", stream: Optional[IO[str]] = None) -> logging.Logger:
    """
    Builds the console logger handed to the monitor components.

    The logger does not propagate to the root logger, and calling this
    again for the same name replaces its handler instead of stacking a
    second one.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    h = logging.StreamHandler(stream if stream is not None else sys.stdout)
    h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(h)
    logger.setLevel(level)
    logger.propagate = False
    return logger
