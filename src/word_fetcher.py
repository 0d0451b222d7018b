"""
Random word fetcher for the "word of the minute" widget.

Fetches a single word from the public random-word API and polls it on
a fixed interval. Display is the caller's job: the poller hands each
word to a callback.
"""

import logging
import time
from typing import Callable, Optional

import httpx

from src.utils.retry import retry_operation

logger = logging.getLogger(__name__)

DEFAULT_WORD_API_URL = "https://random-word-api.herokuapp.com/word"
DEFAULT_POLL_INTERVAL = 60.0  # seconds
DEFAULT_TIMEOUT = 10.0  # seconds

FALLBACK_MESSAGE = "Sorry, an error occurred"


class WordFetchError(Exception):
    """Error raised when the API response does not contain a word."""
    pass


def _extract_word(payload) -> str:
    """Return the first word of the API's JSON array, e.g. ["example"]."""
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], str):
        raise WordFetchError(f"Unexpected response payload: {payload!r}")
    return payload[0]


def get_random_word(
    client: Optional[httpx.Client] = None,
    url: str = DEFAULT_WORD_API_URL,
    timeout: float = DEFAULT_TIMEOUT,
    max_retries: int = 3,
    base_delay: float = 2.0,
) -> str:
    """
    Fetch a random word.

    Args:
        client: httpx.Client to use (a short-lived one is created if None)
        url: Word API endpoint
        timeout: Request timeout in seconds
        max_retries: Attempts for rate-limit/server errors
        base_delay: Linear backoff base in seconds

    Returns:
        The word, or FALLBACK_MESSAGE if the request failed
    """
    def fetch(http: httpx.Client) -> str:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        return _extract_word(response.json())

    def run(http: httpx.Client):
        return retry_operation(
            lambda: fetch(http),
            max_retries=max_retries,
            base_delay=base_delay,
            non_retryable_exceptions=(WordFetchError, ValueError),
        )

    if client is None:
        with httpx.Client() as http:
            result = run(http)
    else:
        result = run(client)

    if not result.success:
        logger.error(f"Failed to fetch random word: {result.error}")
        return FALLBACK_MESSAGE

    return result.value


class WordPoller:
    """
    Calls a fetch function on a fixed interval.

    Args:
        fetch: Callable returning the next word (defaults to get_random_word)
        interval: Seconds to wait between fetches
        sleep: Function used to wait, replaceable in tests

    Example:
        >>> poller = WordPoller(interval=60)
        >>> poller.poll(print, iterations=1)
    """

    def __init__(
        self,
        fetch: Callable[[], str] = get_random_word,
        interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self.fetch = fetch
        self.interval = interval
        self._sleep = sleep

    def poll(self, on_word: Callable[[str], None], iterations: Optional[int] = None) -> int:
        """
        Fetch and deliver words until ``iterations`` is reached.

        The first fetch happens immediately; later ones follow after
        ``interval`` seconds. With ``iterations=None`` this runs until
        interrupted.

        Returns:
            Number of words delivered
        """
        delivered = 0
        while iterations is None or delivered < iterations:
            if delivered:
                self._sleep(self.interval)
            word = self.fetch()
            on_word(word)
            delivered += 1
        return delivered
