"""
Centralized logging configuration for the study processor.
"""

import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from settings import settings


def _default_level() -> int:
    level = logging.getLevelName(str(settings.LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level (defaults to settings.LOG_LEVEL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        if level is None:
            level = _default_level()
        logger.setLevel(level)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(formatter)

        logger.addHandler(console_handler)

        # Prevent propagation to root logger
        logger.propagate = False

    return logger


def setup_file_logging(log_dir: str = "logs", log_file: Optional[str] = None) -> Path:
    """
    Set up file logging for every logger created through get_logger.

    Args:
        log_dir: Directory to store log files
        log_file: Optional specific log file name

    Returns:
        Path of the log file
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    if log_file is None:
        log_file = f"study_processor_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    file_path = log_path / log_file

    file_handler = logging.FileHandler(file_path, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)

    # Detailed format for file
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)

    # Package loggers don't propagate, so attach to each of them as well as root
    logging.getLogger().addHandler(file_handler)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and name.startswith("study_processor"):
            logger.addHandler(file_handler)

    return file_path
