"""
Logging configuration for mirror operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"

# Libraries that are only worth hearing from at -vvv
NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "httpx", "httpcore")


def setup_logging(verbose: int = 0) -> None:
    """
    Configure root logging from a verbosity count.

    Args:
        verbose: 0 WARNING, 1 INFO, 2 DEBUG, 3+ DEBUG including library loggers
    """
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    library_level = logging.DEBUG if verbose >= 3 else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: Logger name, usually __name__

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
