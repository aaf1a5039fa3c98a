from __future__ import annotations

import httpx
import pytest

from adapters.http_client import build_async_client, fetch_with_retry
from core.errors import FetchError


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_returns_body_on_success(recording_sleep) -> None:
    async with _client(lambda request: httpx.Response(200, text="12.3456\n")) as client:
        content = await fetch_with_retry("https://files.test/stdout", client=client, sleep=recording_sleep)

    assert content == "12.3456\n"
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_fetch_retries_server_errors_with_doubling_backoff(recording_sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, text="busy")

    async with _client(handler) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_with_retry(
                "https://files.test/stdout",
                max_retries=3,
                initial_backoff_ms=500,
                client=client,
                sleep=recording_sleep,
            )

    assert len(calls) == 4
    assert recording_sleep.delays == [0.5, 1.0, 2.0]
    assert excinfo.value.status_code == 503
    assert excinfo.value.attempts == 4


@pytest.mark.asyncio
async def test_fetch_recovers_after_transient_server_error(recording_sleep) -> None:
    responses = [httpx.Response(500), httpx.Response(502), httpx.Response(200, text="7")]

    async with _client(lambda request: responses.pop(0)) as client:
        content = await fetch_with_retry("https://files.test/stdout", client=client, sleep=recording_sleep)

    assert content == "7"
    assert recording_sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_fetch_does_not_retry_client_errors(recording_sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, text="missing")

    async with _client(handler) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_with_retry("https://files.test/stdout", client=client, sleep=recording_sleep)

    assert len(calls) == 1
    assert recording_sleep.delays == []
    assert excinfo.value.status_code == 404
    assert excinfo.value.attempts == 1


@pytest.mark.asyncio
async def test_fetch_does_not_retry_network_errors(recording_sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_with_retry("https://files.test/stdout", client=client, sleep=recording_sleep)

    assert len(calls) == 1
    assert excinfo.value.status_code is None
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_zero_retries_is_a_single_attempt(recording_sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    async with _client(handler) as client:
        with pytest.raises(FetchError):
            await fetch_with_retry(
                "https://files.test/stdout", max_retries=0, client=client, sleep=recording_sleep
            )

    assert len(calls) == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_malformed_url_fails_immediately(recording_sleep) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200)

    async with _client(handler) as client:
        with pytest.raises(FetchError) as excinfo:
            await fetch_with_retry("http://[::gg]/stdout", client=client, sleep=recording_sleep)

    assert calls == []
    assert excinfo.value.attempts == 1
    assert recording_sleep.delays == []


def test_build_async_client_applies_settings(settings) -> None:
    client = build_async_client(settings, extra_headers={"Authorization": "abc"})

    assert client.headers["User-Agent"] == settings.user_agent
    assert client.headers["Authorization"] == "abc"
    assert client.timeout.read == settings.http_timeout_seconds
