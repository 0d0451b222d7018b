"""
Unit tests for the random word fetcher and poller.

Run with: pytest tests/test_word_fetcher.py -v

HTTP calls go through httpx.MockTransport, so no network is used.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.word_fetcher import (
    DEFAULT_WORD_API_URL,
    FALLBACK_MESSAGE,
    WordPoller,
    get_random_word,
)


def mock_client(*responses):
    """Client that replays the given (status, json) pairs in order."""
    calls = []
    queue = list(responses)

    def handler(request):
        calls.append(str(request.url))
        status, body = queue.pop(0)
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    return httpx.Client(transport=httpx.MockTransport(handler)), calls


class TestGetRandomWord:
    """Tests for a single fetch."""

    def test_returns_first_word(self):
        client, calls = mock_client((200, ["example", "other"]))

        assert get_random_word(client=client) == "example"
        assert calls == [DEFAULT_WORD_API_URL]

    def test_custom_url(self):
        client, calls = mock_client((200, ["word"]))

        get_random_word(client=client, url="https://words.test/word")

        assert calls == ["https://words.test/word"]

    def test_server_error_is_retried(self):
        client, calls = mock_client((503, {}), (200, ["again"]))

        assert get_random_word(client=client, base_delay=0) == "again"
        assert len(calls) == 2

    def test_not_found_returns_fallback_without_retry(self):
        client, calls = mock_client((404, {}), (200, ["never"]))

        assert get_random_word(client=client, base_delay=0) == FALLBACK_MESSAGE
        assert len(calls) == 1

    def test_exhausted_retries_return_fallback(self):
        client, calls = mock_client((500, {}), (500, {}), (500, {}))

        assert get_random_word(client=client, max_retries=3, base_delay=0) == FALLBACK_MESSAGE
        assert len(calls) == 3

    def test_unexpected_payload_returns_fallback(self):
        client, calls = mock_client((200, {"word": "nope"}))

        assert get_random_word(client=client, base_delay=0) == FALLBACK_MESSAGE
        assert len(calls) == 1

    def test_invalid_json_returns_fallback(self):
        client, calls = mock_client((200, "<html>oops</html>"))

        assert get_random_word(client=client, base_delay=0) == FALLBACK_MESSAGE
        assert len(calls) == 1

    def test_connection_error_returns_fallback(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))

        assert get_random_word(client=client, max_retries=2, base_delay=0) == FALLBACK_MESSAGE


class TestWordPoller:
    """Tests for the polling loop."""

    def test_delivers_words_with_interval_between(self):
        words = iter(["alpha", "beta", "gamma"])
        received = []
        sleeps = []

        poller = WordPoller(fetch=lambda: next(words), interval=60, sleep=sleeps.append)
        delivered = poller.poll(received.append, iterations=3)

        assert delivered == 3
        assert received == ["alpha", "beta", "gamma"]
        assert sleeps == [60, 60]

    def test_first_fetch_is_immediate(self):
        sleeps = []

        poller = WordPoller(fetch=lambda: "word", interval=60, sleep=sleeps.append)
        poller.poll(lambda word: None, iterations=1)

        assert sleeps == []

    def test_zero_iterations(self):
        poller = WordPoller(fetch=lambda: pytest.fail("should not fetch"), sleep=lambda s: None)
        assert poller.poll(lambda word: None, iterations=0) == 0

    def test_invalid_interval(self):
        with pytest.raises(ValueError, match="must be positive"):
            WordPoller(interval=0)
