# apps/api/src/core/logging_config.py
import logging

from src.core.settings import settings

LOGGER_NAME = "src"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stream handler to the application logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Avoid duplicate handlers in dev reload
    if logger.handlers:
        return logger

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    logger.addHandler(stream_handler)

    return logger
