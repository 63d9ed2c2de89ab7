# pkgdash/core/logging.py
import os
import sys

from loguru import logger

from .config import Settings


def configure_logging(settings: Settings) -> None:
    """Route loguru to stderr at LOG_LEVEL, plus a rotating file when LOG_FILE is set."""
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper())
    if settings.LOG_FILE:
        log_dir = os.path.dirname(os.path.abspath(settings.LOG_FILE))
        os.makedirs(log_dir, exist_ok=True)
        logger.add(
            settings.LOG_FILE,
            level=settings.LOG_LEVEL.upper(),
            rotation=settings.LOG_ROTATION,
            retention=settings.LOG_RETENTION,
        )
