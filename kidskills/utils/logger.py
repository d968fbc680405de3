"""
Centralized logging for the KidSkills engine.
"""

import logging
import sys
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a logger that writes to stdout at LOG_LEVEL (or the given level)."""
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

        log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        logger.setLevel(getattr(logging, log_level, logging.INFO))

    return logger


def mask_secret(secret: Optional[str]) -> str:
    """Render a credential for logs: length and last four characters only."""
    if not secret:
        return "<none>"
    if len(secret) <= 8:
        return f"<{len(secret)} chars>"
    return f"...{secret[-4:]} ({len(secret)} chars)"
