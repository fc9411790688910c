"""Logger setup shared by every Monster Maker module."""

import logging
import sys

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(name: str, level: str | int = LOG_LEVEL) -> logging.Logger:
    """Set up a logger with consistent formatting.

    Args:
        name: Name of the logger (typically __name__ from the calling module).
        level: Logging level name or number (default: LOG_LEVEL from config).

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger
