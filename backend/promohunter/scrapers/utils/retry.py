"""Resilient page fetching with linear backoff between attempts."""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from promohunter.config import settings
from promohunter.core.exceptions import FetchError, RateLimitError
from promohunter.scrapers.utils.user_agents import build_browser_headers


logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]

# Statuses answered by the marketplace when it throttles us
THROTTLE_STATUSES = frozenset([429, 503])

RETRYABLE_ERRORS = (FetchError, httpx.TransportError)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log each scheduled retry before tenacity sleeps."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "fetch_retry_scheduled",
        url=retry_state.kwargs.get("url"),
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(exc),
    )


async def _get_once(client: httpx.AsyncClient, url: str) -> httpx.Response:
    """Single GET attempt. Raises for every outcome that should be retried."""
    response = await client.get(url, headers=build_browser_headers())

    if response.is_success or response.status_code == 404:
        return response
    if response.status_code in THROTTLE_STATUSES:
        raise RateLimitError(url, response.status_code)
    raise FetchError(url, response.status_code)


async def fetch_with_retry(
    url: str,
    max_retries: int = 3,
    backoff_base: float = 1.5,
    *,
    client: Optional[httpx.AsyncClient] = None,
    sleep: SleepFunc = asyncio.sleep,
) -> httpx.Response:
    """GET a page, retrying throttling, server errors and network failures.

    A 2xx or 404 response is returned immediately. Anything else is retried
    up to ``max_retries`` attempts in total, waiting ``backoff_base * n``
    seconds after the n-th failed attempt.

    Args:
        url: Absolute page URL
        max_retries: Total number of attempts
        backoff_base: Backoff unit in seconds
        client: Shared httpx client; a short-lived one is created if omitted
        sleep: Awaitable delay primitive (injectable for tests)

    Returns:
        The successful (or 404) response

    Raises:
        FetchError: Last non-successful status after all attempts
        httpx.TransportError: Last network failure after all attempts
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.SCRAPER_TIMEOUT, follow_redirects=True)

    try:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, max_retries)),
            wait=wait_incrementing(start=backoff_base, increment=backoff_base),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=_log_retry,
            sleep=sleep,
            reraise=True,
        )
        return await retrying(_get_once, client, url=url)
    finally:
        if owns_client:
            await client.aclose()
