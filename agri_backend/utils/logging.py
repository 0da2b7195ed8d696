"""
Logging utilities for the farm finance backend.

Provides standardized logger configuration following privacy rules.

RULES:
- NEVER log Supabase Auth tokens, API keys, or secrets
- NEVER log expense amounts, totals or profit figures
- User ids and high-level events (fetch/save/delete outcomes) are fine
"""

import logging
from typing import Optional

from agri_backend.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from agri_backend.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Finance data fetched")
    """
    logger = logging.getLogger(name)

    if level is None:
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger.setLevel(level)

    # Add handler if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        # Root handler from logging.basicConfig would print the record twice
        logger.propagate = False

    return logger
