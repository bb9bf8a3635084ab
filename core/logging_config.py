# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "casalink"


def setup_logger(level: str = None) -> logging.Logger:
    """Configure the root `casalink` logger once; later calls reuse it."""
    logger = logging.getLogger(LOGGER_NAME)

    if logger.handlers:
        return logger

    # Unknown level names fall back to INFO
    resolved = logging.getLevelName((level or settings.LOG_LEVEL).upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger


def get_logger(component: str) -> logging.Logger:
    """
    Child logger such as `casalink.units`, so generation and persistence
    lines can be filtered apart from request logging.
    """
    return setup_logger().getChild(component)


logger = setup_logger()
