"""
Structured logging configuration for the lead scoring engine.
"""
import logging
import sys
from typing import Optional


def setup_logging(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Set up structured logging for the application.

    Args:
        name: Logger name (typically __name__ from calling module)
        level: Logging level (default: LOG_LEVEL from settings)

    Returns:
        Configured logger instance
    """
    if level is None:
        from lead_scoring.core.config import settings
        level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    # Configure root logger if not already configured
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stdout)]
        )

    # Return named logger
    logger = logging.getLogger(name or __name__)
    logger.setLevel(level)

    return logger
