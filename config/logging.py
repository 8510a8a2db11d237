"""Logging configuration for the trade journal CLI.

Stdout carries command output (CSV, markdown), so every console sink
writes to stderr:
- Development: colored stderr at LOG_LEVEL with full diagnostics
- Production: plain stderr at LOG_LEVEL, no variable values in tracebacks
- Test: stderr at WARNING

A rotating file sink is added only when ``LOG_FILE`` is set.
"""

import sys
from pathlib import Path

from loguru import logger

from config.settings import settings

PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {module}:{function}:{line} | {message}"
COLOR_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{module}</cyan>:<cyan>{function}</cyan> | "
    "{message}"
)


def _add_file_sink(path: str, level: str, diagnose: bool) -> None:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_path,
        rotation="10 MB",
        retention="30 days",
        level=level,
        format=PLAIN_FORMAT,
        backtrace=True,
        diagnose=diagnose,
    )


def setup_logging() -> None:
    """Configure logging based on environment.

    Development:
        - stderr, colored, level from settings.LOG_LEVEL
        - Backtrace and diagnose enabled

    Production:
        - stderr, plain format, level from settings.LOG_LEVEL
        - Diagnose disabled (trade data must not leak into tracebacks)

    Test:
        - stderr at WARNING

    Any environment:
        - settings.LOG_FILE set: also log to that file (10 MB rotation, 30 days retention)
    """
    logger.remove()
    environment = settings.ENVIRONMENT

    if environment == "development":
        level, diagnose = settings.LOG_LEVEL, True
        logger.add(sys.stderr, level=level, format=COLOR_FORMAT, colorize=True, diagnose=diagnose)
    elif environment == "production":
        level, diagnose = settings.LOG_LEVEL, False
        logger.add(sys.stderr, level=level, format=PLAIN_FORMAT, backtrace=True, diagnose=diagnose)
    elif environment == "test":
        level, diagnose = "WARNING", False
        logger.add(sys.stderr, level=level, format="{level: <8} | {message}", colorize=False)
    else:
        level, diagnose = "INFO", False
        logger.add(sys.stderr, level=level, format="{time:HH:mm:ss} | {level: <8} | {message}")
        logger.warning(f"Unknown environment: {environment}, using fallback logging")

    if settings.LOG_FILE:
        _add_file_sink(settings.LOG_FILE, level, diagnose)

    logger.debug(f"Logging configured for {str(environment).upper()} environment")


def get_logger():
    """Get configured logger instance.

    Returns:
        Loguru logger instance
    """
    return logger
