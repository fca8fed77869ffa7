"""
Application logger

Single named logger shared by the backend and the web API.
Level comes from ``settings.LOG_LEVEL``.
"""

import logging
import sys

from config import settings

LOGGER_NAME = "studybuddy"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logger(name: str = LOGGER_NAME, level: str = None) -> logging.Logger:
    """Create (or return the already configured) application logger"""
    log = logging.getLogger(name)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.propagate = False

    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    log.setLevel(getattr(logging, resolved, logging.INFO))
    return log


logger = setup_logger()
