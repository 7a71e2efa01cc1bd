"""Shared logger for the prime time client and server."""
import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "prime_time"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(threadName)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the shared logger once and return it.

    :param str level: Log level name, defaults to PRIME_TIME_LOG_LEVEL or INFO

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(LOGGER_NAME)
    if level is None:
        level = os.getenv("PRIME_TIME_LOG_LEVEL", "INFO")
    log.setLevel(level.upper())

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    return log


logger: logging.Logger = configure_logging()
