import logging
from typing import Optional

from slugy.settings import settings

LOGGER_NAME = "slugy"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the ``slugy`` logger; the root logger belongs to the host.

    A stream handler is attached only when neither ``slugy`` nor the root
    logger has one, so host handlers keep receiving slugy's records.
    """
    log_level = level or settings.log_level
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
