from __future__ import annotations

import logging
from typing import Optional

from events_router.config import RouterSettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Optional[RouterSettings] = None) -> logging.Logger:
    """Set the package log level and attach a stream handler once."""
    settings = settings or RouterSettings()
    logger = logging.getLogger("events_router")
    logger.setLevel(settings.log_level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
