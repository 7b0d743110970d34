"""Logging setup for the API process."""
import logging

from pulse.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """
    Configure the root ``pulse`` logger once.

    Module loggers (``logging.getLogger(__name__)``) propagate here, so every
    module only needs its own logger.
    """
    logger = logging.getLogger("pulse")
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Avoid stacking handlers when the app is created more than once (tests, reload)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
