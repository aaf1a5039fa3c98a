"""Contract of the remote task-execution service.

Why Protocol:
- The conversion pipeline only needs three calls; tests substitute a fake
  without touching HTTP.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import OutputLocators, TaskDescriptor, TaskHandle, TaskStatus


@runtime_checkable
class TaskService(Protocol):
    """Minimal contract for submitting tasks and reading their outputs.

    All calls are asynchronous because they perform network I/O.
    """

    async def submit_task(self, descriptor: TaskDescriptor) -> TaskHandle:
        """Submit a task and return its handle. Raises `TaskSubmissionError`."""

        ...

    async def get_task_status(self, task_id: str) -> TaskStatus:
        """Return the current lifecycle state. Raises `TaskOutputsError`."""

        ...

    async def get_task_outputs(self, task_id: str) -> OutputLocators:
        """Return the output locators. Raises `TaskOutputsError`."""

        ...
