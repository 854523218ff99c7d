"""
NeuroMuscle Logging
Shared logger factory used by every service module.
"""
import logging
import sys
from typing import Optional

from config import settings


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger with a single stdout handler.

    Level defaults to settings.LOG_LEVEL.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    logger.setLevel((level or settings.LOG_LEVEL).upper())
    return logger
