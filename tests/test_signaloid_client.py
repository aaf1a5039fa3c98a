from __future__ import annotations

import json

import httpx
import pytest

from adapters.signaloid_client import SignaloidTaskClient
from core.domain.currency import Currency
from core.domain.models import ConversionRequest, ResultStatus, TaskStatus
from core.errors import TaskOutputsError, TaskSubmissionError
from core.services.conversion_pipeline import ConversionPipeline
from core.services.task_builder import build_task_descriptor


def _client(settings, handler) -> SignaloidTaskClient:
    return SignaloidTaskClient(settings, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_submit_posts_descriptor_with_credential(settings) -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(202, json={"TaskID": "Tx1"})

    handle = await _client(settings, handler).submit_task(build_task_descriptor(1.1, 1.2, 100))

    assert handle.task_id == "Tx1"
    assert captured["method"] == "POST"
    assert captured["url"] == "https://api.test/tasks"
    assert captured["auth"] == "test-key"
    body = captured["body"]
    assert body["Type"] == "SourceCode"
    assert body["Overrides"]["Arguments"] == "minRate=1.1 maxRate=1.2 value=100"


@pytest.mark.asyncio
async def test_submit_error_carries_response_body(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text='{"message":"Unauthorized"}')

    with pytest.raises(TaskSubmissionError, match="Unauthorized"):
        await _client(settings, handler).submit_task(build_task_descriptor(1, 2, 3))


@pytest.mark.asyncio
async def test_submit_without_credential_omits_header(settings) -> None:
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(401, text="missing key")

    anonymous = settings.model_copy(update={"api_key": None})
    with pytest.raises(TaskSubmissionError, match="missing key"):
        await _client(anonymous, handler).submit_task(build_task_descriptor(1, 2, 3))

    assert seen == [None]


@pytest.mark.asyncio
async def test_submit_rejects_response_without_task_id(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Status": "Accepted"})

    with pytest.raises(TaskSubmissionError, match="Unexpected submission response"):
        await _client(settings, handler).submit_task(build_task_descriptor(1, 2, 3))


@pytest.mark.asyncio
async def test_get_outputs_parses_locators(settings) -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"Stdout": "https://files.test/out", "Stderr": "https://files.test/err"})

    locators = await _client(settings, handler).get_task_outputs("Tx1")

    assert captured == {"url": "https://api.test/tasks/Tx1/outputs", "auth": "test-key"}
    assert locators.stdout == "https://files.test/out"
    assert locators.stderr == "https://files.test/err"


@pytest.mark.asyncio
async def test_get_outputs_tolerates_missing_locators(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    locators = await _client(settings, handler).get_task_outputs("Tx1")

    assert locators.stdout is None
    assert locators.stderr is None


@pytest.mark.asyncio
async def test_get_outputs_network_error(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TaskOutputsError, match="connection refused"):
        await _client(settings, handler).get_task_outputs("Tx1")


@pytest.mark.asyncio
async def test_get_task_status(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://api.test/tasks/Tx1"
        return httpx.Response(200, json={"TaskID": "Tx1", "Status": "Completed"})

    status = await _client(settings, handler).get_task_status("Tx1")

    assert status is TaskStatus.COMPLETED
    assert status.is_terminal


@pytest.mark.asyncio
async def test_get_task_status_rejects_unknown_status(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Status": "Teleporting"})

    with pytest.raises(TaskOutputsError):
        await _client(settings, handler).get_task_status("Tx1")


@pytest.mark.asyncio
async def test_non_ascii_key_fails_only_the_current_conversion(settings) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(202, json={"TaskID": "Tx1"})

    accented = settings.model_copy(update={"api_key": "clé"})
    pipeline = ConversionPipeline(service=_client(accented, handler), settings=accented)
    request = ConversionRequest(
        value=100,
        source_currency=Currency.GBP,
        target_currency=Currency.EUR,
        min_rate=1.1,
        max_rate=1.2,
    )

    result = await pipeline.run(request)

    assert result.status is ResultStatus.FAILED
    assert "ASCII" in (result.detail or "")
    assert calls == []


@pytest.mark.asyncio
async def test_non_ascii_key_on_outputs_raises_outputs_error(settings) -> None:
    accented = settings.model_copy(update={"api_key": "clé"})

    with pytest.raises(TaskOutputsError, match="ASCII"):
        await _client(accented, lambda request: httpx.Response(200, json={})).get_task_outputs("Tx1")
