"""Logging setup for the stockflow package."""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_handler = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stream handler to the ``stockflow`` logger.

    Safe to call more than once; only the level changes on later calls.
    """
    global _handler
    logger = logging.getLogger("stockflow")
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(_handler)
        logger.propagate = False
    logger.setLevel(level.upper())
    return logger
