"""Utility modules for study content processing"""

from .retry_handler import RetryHandler
from .logging import get_logger, setup_file_logging

__all__ = [
    "RetryHandler",
    "get_logger",
    "setup_file_logging"
]
