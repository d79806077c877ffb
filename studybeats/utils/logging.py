import logging
import os
from datetime import datetime
from typing import Optional

from studybeats.core.config import get_settings


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Set up a logger with detailed formatting.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level override

    Returns:
        Configured logger instance
    """
    settings = get_settings()
    logger = logging.getLogger(name)

    log_level = (level or settings.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Add handlers if they haven't been added already
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt=(
            '%(asctime)s | %(levelname)-8s | '
            '%(name)s:%(funcName)s:%(lineno)d | '
            '%(message)s'
        ),
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(
                settings.LOG_DIR,
                f"{datetime.now().strftime('%Y-%m-%d')}.log"
            )
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Handlers above already emit; don't duplicate through the root logger
    logger.propagate = False
    return logger


def mask_token(token: Optional[str]) -> str:
    """Render a credential for logs without exposing it."""
    if not token:
        return 'None'
    return f"{'*' * 10}{token[-5:]}"
