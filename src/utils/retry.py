"""
Retry utility for handling transient failures in HTTP calls.

Used by the word fetcher so a single rate-limit or 5xx response from the
public API does not immediately fall back to the error message.
"""

import time
import logging
from dataclasses import dataclass
from typing import Callable, TypeVar, Optional, Any, Tuple, Type

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class RetryResult:
    """
    Result of a retryable operation.

    Lets callers check success/failure without using exceptions for
    control flow.

    Attributes:
        success: True if the operation succeeded
        value: The return value if successful, None otherwise
        error: The exception if failed, None otherwise
        attempts: Number of attempts made

    Example:
        >>> result = retry_operation(lambda: fetch())
        >>> if result.success:
        ...     print(f"Got result: {result.value}")
        ... else:
        ...     print(f"Failed after {result.attempts} attempts: {result.error}")
    """
    success: bool
    value: Optional[Any] = None
    error: Optional[Exception] = None
    attempts: int = 0


def retry_operation(
    operation: Callable[[], T],
    max_retries: int = 3,
    base_delay: float = 2.0,
    retryable_codes: Tuple[int, ...] = (429, 500, 502, 503, 504),
    non_retryable_exceptions: Tuple[Type[Exception], ...] = (),
    on_retry: Optional[Callable[[int, Exception], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryResult:
    """
    Execute an operation with automatic retry on failure.

    Args:
        operation: A callable taking no arguments (use a closure or lambda).
        max_retries: Maximum number of attempts before giving up.
        base_delay: Initial delay between retries in seconds.
            The actual delay is base_delay * attempt_number (linear backoff).
        retryable_codes: HTTP status codes that trigger a retry. Any other
            status code fails immediately.
        non_retryable_exceptions: Exception types that fail immediately
            (e.g. a response body that is not valid JSON).
        on_retry: Optional callback called before each retry with
            (attempt_number, exception).
        sleep: Function used to wait between attempts.

    Returns:
        RetryResult with the value or the last error.

    Backoff Strategy:
        Linear: delay = base_delay * attempt_number
        - Attempt 1 fails -> wait base_delay seconds
        - Attempt 2 fails -> wait base_delay * 2 seconds
    """
    last_error: Optional[Exception] = None

    for attempt in range(1, max_retries + 1):
        try:
            value = operation()
            return RetryResult(success=True, value=value, attempts=attempt)

        except Exception as e:
            last_error = e

            if non_retryable_exceptions and isinstance(e, non_retryable_exceptions):
                logger.error(f"Non-retryable error: {type(e).__name__}: {e}")
                return RetryResult(success=False, error=e, attempts=attempt)

            status_code = get_http_status(e)

            if status_code is not None:
                if status_code not in retryable_codes:
                    logger.error(f"Non-retryable HTTP error {status_code}: {e}")
                    return RetryResult(success=False, error=e, attempts=attempt)

                logger.warning(
                    f"Retryable HTTP error {status_code}, "
                    f"attempt {attempt}/{max_retries}"
                )
            else:
                logger.error(
                    f"Error on attempt {attempt}/{max_retries}: "
                    f"{type(e).__name__}: {e}"
                )

            if attempt < max_retries:
                delay = base_delay * attempt
                logger.info(f"Retrying in {delay:.1f}s...")

                if on_retry:
                    on_retry(attempt, e)

                sleep(delay)

    logger.error(f"All {max_retries} attempts failed")
    return RetryResult(
        success=False,
        error=last_error,
        attempts=max_retries
    )


def get_http_status(error: Exception) -> Optional[int]:
    """
    Extract the HTTP status code from an exception if available.

    Works with httpx.HTTPStatusError and any error carrying a
    ``response.status_code`` attribute.

    Returns:
        HTTP status code if available, None otherwise
    """
    response = getattr(error, 'response', None)
    status = getattr(response, 'status_code', None)
    if isinstance(status, int):
        return status
    return None
