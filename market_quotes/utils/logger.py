"""
Market Quotes - Logger Configuration
Centralized logging with loguru
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from market_quotes.config import get_settings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Console log level (defaults to LOG_LEVEL, or DEBUG when DEBUG is set)
        log_file: Optional file path for a rotating log (defaults to LOG_FILE)
    """
    settings = get_settings()
    if level is None:
        level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    if log_file is None:
        log_file = settings.LOG_FILE

    # Remove default handler
    logger.remove()

    # Console handler with custom format
    logger.add(
        sys.stderr,
        colorize=True,
        format=CONSOLE_FORMAT,
        level=level.upper(),
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            rotation="10 MB",
            retention="30 days",
            compression="gz",
            format=FILE_FORMAT,
            level="DEBUG",
        )


def get_logger(name: str = __name__):
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logger.bind(name=name)


__all__ = ["logger", "setup_logging", "get_logger"]
