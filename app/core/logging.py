# File: app/core/logging.py

"""
Application-wide logging configuration.

Call ``configure_logging`` once from ``create_application``; every other
module just does ``logger = logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug("Logging initialized with level %s", level)
