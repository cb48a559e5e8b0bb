"""
core/logging.py
───────────────
Loguru-based logging, configured once at application startup.
"""

import sys
from pathlib import Path

from loguru import logger

from watchmatch.core.config import settings


def setup_logging() -> None:
    logger.remove()  # drop the default stderr handler

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # JSON lines for structured analysis
        logger.add(
            str(log_file),
            level="DEBUG",
            rotation="10 MB",
            retention="14 days",
            serialize=True,
        )


__all__ = ["logger", "setup_logging"]
