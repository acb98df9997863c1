"""Logging setup and duration measurement shared by readerspec components."""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger for command-line use."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)


@contextmanager
def timed(label: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """Log how long the wrapped block took, in milliseconds."""
    logger = logger or logging.getLogger(__name__)
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("%s took %.1fms", label, elapsed_ms)
