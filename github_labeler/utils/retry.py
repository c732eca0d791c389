"""Retry decorator for GitHub API calls that hit the rate limit.

Label synchronization runs strictly one call after another, so the decorator
blocks with time.sleep until GitHub allows the next attempt.
"""

import functools
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _wait_time_from_headers(exc: RequestFailed, default: float, function_name: str) -> float:
    """Work out how long to wait from the retry-after or x-ratelimit-reset headers."""
    retry_after = exc.response.headers.get("retry-after")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after, function=function_name)
            return default

    rate_limit_reset = exc.response.headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset, function=function_name)
            return default
        current_timestamp = int(time.time())
        if reset_timestamp > current_timestamp:
            return reset_timestamp - current_timestamp + 1
    return default


def _is_rate_limit_error(exc: RequestFailed) -> bool:
    if isinstance(exc, (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded)):
        return True
    if exc.response.status_code == 429:
        return True
    return exc.response.status_code == 403 and "rate limit" in str(exc).lower()


def retry_on_rate_limit(
    max_retries: int = 5,
    initial_delay: float = 10.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying GitHub API calls when they encounter GitHub rate limits.

    Primary and secondary rate limits (HTTP 403/429) are retried, honoring the
    retry_after of githubkit's rate limit exceptions and the retry-after and
    x-ratelimit-reset headers. Without any hint the delay grows exponentially.
    Every other error is raised immediately.

    Args:
        max_retries: Maximum number of retry attempts (default: 5)
        initial_delay: Initial delay in seconds between retries (default: 10.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Returns:
        Decorated function with retry logic
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except RequestFailed as e:
                    if not _is_rate_limit_error(e):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.response.status_code,
                            error_type=type(e).__name__,
                        )
                        raise

                    retry_after = getattr(e, "retry_after", None)
                    if retry_after:
                        wait_time = retry_after.total_seconds()
                    else:
                        wait_time = _wait_time_from_headers(e, delay, func.__name__)
                    wait_time = min(wait_time, max_delay)

                    logger.warning(
                        f"GitHub rate limit exceeded, waiting {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=e.response.status_code,
                    )
                    time.sleep(wait_time)

                    delay = min(delay * exponential_base, max_delay)

        return wrapper  # type: ignore

    return decorator
