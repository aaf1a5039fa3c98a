"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and the retry policy for output files.
- Eases testing: callers may pass their own client (e.g. on a MockTransport).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from core.config import AppSettings
from core.errors import FetchError

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the project's defaults.

    `transport` is only meant for tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _status_of(exc: Exception) -> int | None:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code
    return None


async def fetch_with_retry(
    url: str,
    max_retries: int = 3,
    initial_backoff_ms: int = 500,
    *,
    client: httpx.AsyncClient | None = None,
    sleep: Sleeper = asyncio.sleep,
) -> str:
    """GET `url` and return its body, retrying server errors.

    Only responses with status >= 500 are retried: the delay starts at
    `initial_backoff_ms` and doubles after every retry (no jitter, no cap).
    Client errors, transport errors and malformed URLs fail on the first
    attempt. Raises `FetchError` once the request cannot succeed.
    """

    owns_client = client is None
    if client is None:
        client = build_async_client()

    retries = max_retries
    backoff = initial_backoff_ms
    attempts = 0
    try:
        while True:
            attempts += 1
            try:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                status = _status_of(exc)
                if retries > 0 and status is not None and status >= 500:
                    logger.error(
                        "Error fetching file content. Retrying in %sms... (Retries left: %s)",
                        backoff,
                        retries,
                    )
                    await sleep(backoff / 1000)
                    retries -= 1
                    backoff *= 2
                    continue

                logger.error("Error fetching file content: %s", exc)
                raise FetchError(
                    url,
                    str(exc),
                    status_code=status,
                    attempts=attempts,
                ) from exc
    finally:
        if owns_client:
            await client.aclose()
