"""Signaloid task API adapter.

Implements `core.interfaces.task_service.TaskService` over the REST endpoint:
- `POST {api_url}` submits a task and answers `{TaskID}`.
- `GET {api_url}/{id}` answers `{Status}`.
- `GET {api_url}/{id}/outputs` answers `{Stdout?, Stderr?}` locators.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.models import OutputLocators, TaskDescriptor, TaskHandle, TaskStatus
from core.errors import TaskOutputsError, TaskSubmissionError
from core.interfaces.task_service import TaskService

logger = logging.getLogger(__name__)


def _error_text(exc: Exception) -> str:
    """Prefer the response body, fall back to the exception message."""

    if isinstance(exc, httpx.HTTPStatusError):
        body = exc.response.text.strip()
        if body:
            return body
    if isinstance(exc, UnicodeEncodeError):
        return f"Request headers must be ASCII; check the API key ({exc})"
    return str(exc) or exc.__class__.__name__


class SignaloidTaskClient(TaskService):
    """Talks to the task endpoint with the configured credential."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._settings.api_url.rstrip("/")

    def _auth_headers(self) -> dict[str, str]:
        # A missing key is not an error here: the service answers 401.
        if self._settings.api_key is None:
            return {}
        return {"Authorization": self._settings.api_key}

    def _client(self, extra_headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        headers = self._auth_headers()
        if extra_headers:
            headers.update(extra_headers)
        return build_async_client(
            self._settings,
            extra_headers=headers,
            transport=self._transport,
        )

    async def submit_task(self, descriptor: TaskDescriptor) -> TaskHandle:
        logger.debug("Sending request to Signaloid API...")
        try:
            async with self._client({"Content-Type": "application/json"}) as client:
                resp = await client.post(self.base_url, json=descriptor.to_payload())
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TaskSubmissionError(_error_text(exc)) from exc

        try:
            return TaskHandle.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise TaskSubmissionError(f"Unexpected submission response: {resp.text!r}") from exc

    async def get_task_status(self, task_id: str) -> TaskStatus:
        try:
            async with self._client() as client:
                resp = await client.get(f"{self.base_url}/{task_id}")
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TaskOutputsError(_error_text(exc)) from exc

        try:
            data = resp.json()
            return TaskStatus(data.get("Status"))
        except (ValueError, AttributeError) as exc:
            raise TaskOutputsError(f"Unexpected status response: {resp.text!r}") from exc

    async def get_task_outputs(self, task_id: str) -> OutputLocators:
        logger.debug("Fetching results for Task ID: %s...", task_id)
        try:
            async with self._client() as client:
                resp = await client.get(f"{self.base_url}/{task_id}/outputs")
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise TaskOutputsError(_error_text(exc)) from exc

        try:
            locators = OutputLocators.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise TaskOutputsError(f"Unexpected outputs response: {resp.text!r}") from exc
        logger.debug("Task results retrieved successfully.")
        return locators
