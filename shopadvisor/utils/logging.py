"""
Logging utilities for the Shop Advisor recommendation core.

Provides standardized logger configuration.

Logging rules:
- NEVER log the Gemini API key or Supabase keys
- Log only truncated excerpts of user queries and raw model output
- Fallback activations are logged at WARNING so outages are visible

Acceptable logging:
- High-level events (e.g., "Cache hit", "Gemini call failed, using fallback")
- Which fallback rule fired
- Counts (recommendations parsed, entries dropped)
"""

import logging
from typing import Optional

from shopadvisor.config import settings


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger for the specified module.

    Args:
        name: Module name (typically __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance

    Usage:
        >>> from shopadvisor.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
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

    return logger


def excerpt(text: Optional[str], limit: int = 50) -> str:
    """Shorten user or model text for log lines."""
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."
