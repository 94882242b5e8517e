"""Retry handling utilities for API calls"""

import time
from typing import Callable, Optional, TypeVar

from processing_config import ProcessingConfig
from .exceptions import ContentGenerationError
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TRANSIENT_SIGNATURE = "500 INTERNAL"


class RetryHandler:
    """Two separate retry policies for remote model calls.

    ``execute_with_retry`` repeats a call that failed with a transient server
    fault. ``execute_until_parsed`` repeats a call whose output could not be
    turned into a result. They are kept apart because their failure causes
    differ: infrastructure versus generation variance.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep):
        self.sleep = sleep

    @staticmethod
    def is_transient_error(error: BaseException) -> bool:
        """Return True for 5xx-class server faults."""
        status = getattr(error, "status_code", None)
        if status is None:
            status = getattr(error, "code", None)
        if isinstance(status, int) and 500 <= status < 600:
            return True
        return TRANSIENT_SIGNATURE in str(error)

    def execute_with_retry(
        self,
        operation: Callable[[], T],
        max_attempts: int = ProcessingConfig.MAX_RETRIES,
        base_delay: float = ProcessingConfig.RETRY_BASE_DELAY
    ) -> T:
        """Execute a zero-argument operation, retrying transient server faults

        Args:
            operation: Unit of work with all parameters closed over
            max_attempts: Total number of invocations allowed
            base_delay: Delay multiplied by the attempt number between tries

        Returns:
            Result of the first successful invocation

        Raises:
            Exception: The last error, when it is not transient or attempts ran out
        """
        attempts = max(1, int(max_attempts))
        for attempt in range(1, attempts + 1):
            try:
                return operation()
            except Exception as e:
                if self.is_transient_error(e) and attempt < attempts:
                    wait_time = base_delay * attempt
                    logger.warning(
                        f"Server fault on attempt {attempt}/{attempts}, retrying in {wait_time:.1f}s: {e}"
                    )
                    self.sleep(wait_time)
                    continue
                logger.error(f"API call failed after {attempt} attempt(s): {e}")
                raise
        raise ContentGenerationError("Maximum retries exceeded")

    def execute_until_parsed(
        self,
        operation: Callable[[], Optional[T]],
        max_attempts: int = ProcessingConfig.PARSE_RETRIES,
        base_delay: float = ProcessingConfig.PARSE_RETRY_DELAY
    ) -> Optional[T]:
        """Repeat an operation until it yields a non-None result

        Errors raised by the operation count as a failed attempt. After the
        last attempt None is returned instead of raising.
        """
        attempts = max(1, int(max_attempts))
        for attempt in range(1, attempts + 1):
            try:
                result = operation()
                if result is not None:
                    return result
                logger.warning(f"Unusable model output on attempt {attempt}/{attempts}")
            except Exception as e:
                logger.error(f"Generation failed on attempt {attempt}/{attempts}: {e}")
            if attempt < attempts:
                self.sleep(base_delay * attempt)

        logger.error(f"No usable output after {attempts} attempts")
        return None
