"""Unit tests for the rate limit retry decorator."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from githubkit.exception import RequestFailed
from pytest import MonkeyPatch

from github_labeler.utils.retry import retry_on_rate_limit


def make_request_failed(status_code: int, headers: dict[str, str] | None = None) -> RequestFailed:
    """Create a githubkit RequestFailed error with the given status code and headers."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    return RequestFailed(response)


@pytest.fixture
def sleeps(monkeypatch: MonkeyPatch) -> list[float]:
    """Record sleeps instead of waiting."""
    recorded: list[float] = []
    monkeypatch.setattr("github_labeler.utils.retry.time.sleep", recorded.append)
    return recorded


def test_returns_result_without_retrying(sleeps: list[float]) -> None:
    """Test that a successful call is not retried."""
    func = MagicMock(return_value="ok", __name__="func")
    assert retry_on_rate_limit()(func)("arg", key="value") == "ok"
    func.assert_called_once_with("arg", key="value")
    assert sleeps == []


def test_retries_rate_limit_using_retry_after_header(sleeps: list[float]) -> None:
    """Test that a 429 is retried after the delay given by the retry-after header."""
    func = MagicMock(side_effect=[make_request_failed(429, {"retry-after": "7"}), "ok"], __name__="func")
    assert retry_on_rate_limit()(func)() == "ok"
    assert func.call_count == 2
    assert sleeps == [7.0]


def test_retries_with_exponential_backoff(sleeps: list[float]) -> None:
    """Test that the delay doubles when GitHub gives no hint, capped at max_delay."""
    errors: list[Any] = [make_request_failed(429) for _ in range(3)]
    func = MagicMock(side_effect=[*errors, "ok"], __name__="func")
    assert retry_on_rate_limit(initial_delay=1.0, max_delay=3.0)(func)() == "ok"
    assert sleeps == [1.0, 2.0, 3.0]


def test_raises_after_max_retries(sleeps: list[float]) -> None:
    """Test that the rate limit error is raised once retries are exhausted."""
    func = MagicMock(side_effect=make_request_failed(429), __name__="func")
    with pytest.raises(RequestFailed):
        retry_on_rate_limit(max_retries=2, initial_delay=1.0)(func)()
    assert func.call_count == 3
    assert len(sleeps) == 2


def test_does_not_retry_other_errors(sleeps: list[float]) -> None:
    """Test that errors other than rate limits are raised immediately."""
    func = MagicMock(side_effect=make_request_failed(422), __name__="func")
    with pytest.raises(RequestFailed):
        retry_on_rate_limit()(func)()
    func.assert_called_once()
    assert sleeps == []
