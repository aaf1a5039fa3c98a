"""Conversion orchestration.

Submits the conversion task, waits for it, reads its outputs and turns them
into a `ConversionResult`. Printing and prompting stay in the CLI layer; this
module only logs.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from adapters.http_client import Sleeper, fetch_with_retry
from core.config import AppSettings
from core.domain.models import (
    ConversionRequest,
    ConversionResult,
    ResultStatus,
    TaskHandle,
    TaskStatus,
)
from core.errors import FetchError, TaskOutputsError, TaskSubmissionError
from core.interfaces.task_service import TaskService
from core.services.task_builder import build_task_descriptor

logger = logging.getLogger(__name__)

Fetcher = Callable[..., Awaitable[str]]


def format_converted_value(content: str) -> str:
    """Truncate the fractional part of a printed number to two digits.

    No rounding: `"12.3456"` becomes `"12.34"`. Content without a decimal
    point is returned as is (minus surrounding whitespace).
    """

    parts = content.strip().split(".")
    if len(parts) > 1:
        parts[1] = parts[1][:2]
    return ".".join(parts)


@dataclass
class ConversionPipeline:
    """Runs one conversion at a time against a `TaskService`."""

    service: TaskService
    settings: AppSettings = field(default_factory=AppSettings)
    fetch: Fetcher = fetch_with_retry
    sleep: Sleeper = asyncio.sleep

    async def submit_conversion_task(
        self, min_rate: float, max_rate: float, value: float
    ) -> TaskHandle:
        """Submit the task; no retry at this layer. Raises `TaskSubmissionError`."""

        logger.debug("Preparing task request for Signaloid API...")
        descriptor = build_task_descriptor(min_rate, max_rate, value)
        handle = await self.service.submit_task(descriptor)
        logger.info("Task created successfully. Task ID: %s", handle.task_id)
        return handle

    async def wait_for_task(self, task_id: str) -> TaskStatus | None:
        """Poll until the task reaches a terminal state.

        Returns None when the poll budget runs out first.
        """

        for attempt in range(self.settings.poll_max_attempts):
            status = await self.service.get_task_status(task_id)
            logger.debug("Task %s status: %s", task_id, status.value)
            if status.is_terminal:
                return status
            if attempt + 1 < self.settings.poll_max_attempts:
                await self.sleep(self.settings.poll_interval_seconds)
        return None

    async def _fetch_content(self, url: str, label: str) -> str | None:
        try:
            return await self.fetch(
                url,
                self.settings.fetch_max_retries,
                self.settings.fetch_initial_backoff_ms,
                sleep=self.sleep,
            )
        except FetchError as exc:
            logger.error("Could not fetch %s (%s attempt(s)): %s", label, exc.attempts, exc)
            return None

    async def collect_result(self, task_id: str) -> ConversionResult:
        """Read the task outputs and extract the converted value.

        Non-empty stderr wins over stdout. When neither locator yields content
        the result is `incomplete` rather than silently empty.
        """

        try:
            if self.settings.wait_for_completion:
                status = await self.wait_for_task(task_id)
                if status is None:
                    return ConversionResult(
                        status=ResultStatus.INCOMPLETE,
                        task_id=task_id,
                        detail="Task did not finish before the polling budget ran out.",
                    )
                if status is not TaskStatus.COMPLETED:
                    return ConversionResult(
                        status=ResultStatus.FAILED,
                        task_id=task_id,
                        detail=f"Task ended with status {status.value}.",
                    )
            locators = await self.service.get_task_outputs(task_id)
        except TaskOutputsError as exc:
            logger.error("Error fetching task results: %s", exc)
            return ConversionResult(status=ResultStatus.FAILED, task_id=task_id, detail=str(exc))

        fetch_failed = False
        if locators.stderr:
            stderr = await self._fetch_content(locators.stderr, "stderr")
            fetch_failed = stderr is None
            if stderr:
                logger.info("Task Error %s", stderr)
                return ConversionResult(
                    status=ResultStatus.TASK_ERROR,
                    task_id=task_id,
                    detail=stderr,
                )

        if locators.stdout:
            stdout = await self._fetch_content(locators.stdout, "stdout")
            fetch_failed = fetch_failed or stdout is None
            if stdout and stdout.strip():
                value = format_converted_value(stdout)
                logger.debug("Converted value for task %s: %s", task_id, value)
                return ConversionResult(
                    status=ResultStatus.CONVERTED,
                    task_id=task_id,
                    value=value,
                )

        detail = (
            "Task output could not be fetched."
            if fetch_failed
            else "Task produced no output."
        )
        logger.warning("%s Task ID: %s", detail, task_id)
        return ConversionResult(status=ResultStatus.INCOMPLETE, task_id=task_id, detail=detail)

    async def run(self, request: ConversionRequest) -> ConversionResult:
        """Submit then collect. Errors end this conversion only."""

        try:
            handle = await self.submit_conversion_task(
                request.min_rate, request.max_rate, request.value
            )
        except TaskSubmissionError as exc:
            logger.error("Error creating task: %s", exc)
            return ConversionResult(status=ResultStatus.FAILED, detail=str(exc))
        return await self.collect_result(handle.task_id)
