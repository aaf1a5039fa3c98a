"""Domain models (Pydantic v2).

These models describe *what* a conversion and a remote task are, not *how*
they are submitted. Wire-facing models use the service's PascalCase field
names as aliases so they can be dumped straight into a request body.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from core.domain.currency import Currency


class ConversionRequest(BaseModel):
    """Parameters collected from the user for one conversion."""

    model_config = ConfigDict(frozen=True)

    value: float = Field(
        ...,
        description="Amount in the source currency.",
    )
    source_currency: Currency = Field(
        ...,
        description="Currency the value is expressed in.",
    )
    target_currency: Currency = Field(
        ...,
        description="Currency to convert into.",
    )
    min_rate: float = Field(
        ...,
        description="Lower bound of the uniformly distributed conversion rate.",
    )
    max_rate: float = Field(
        ...,
        description="Upper bound of the uniformly distributed conversion rate.",
    )

    @model_validator(mode="after")
    def _check_rate_bounds(self) -> "ConversionRequest":
        if self.min_rate > self.max_rate:
            raise ValueError(
                f"minimum rate {self.min_rate} is greater than maximum rate {self.max_rate}"
            )
        return self


class SourceCode(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    object: str = Field(default="SourceCode", alias="Object")
    code: str = Field(..., alias="Code")
    language: str = Field(default="C", alias="Language")


class TaskOverrides(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    arguments: str = Field(default="", alias="Arguments")


class TaskDescriptor(BaseModel):
    """Request body for a source-code task.

    Created per conversion and discarded after submission.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field(default="SourceCode", alias="Type")
    source_code: SourceCode = Field(..., alias="SourceCode")
    overrides: TaskOverrides = Field(default_factory=TaskOverrides, alias="Overrides")

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class TaskHandle(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    task_id: str = Field(..., min_length=1, alias="TaskID")


class TaskStatus(str, Enum):
    """Lifecycle states reported by the task endpoint."""

    ACCEPTED = "Accepted"
    INITIALISING = "Initialising"
    EXECUTING = "Executing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    STOPPED = "Stopped"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.CANCELLED, TaskStatus.STOPPED)


class OutputLocators(BaseModel):
    """URLs of the stored stdout/stderr of a finished task."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    stdout: str | None = Field(default=None, alias="Stdout")
    stderr: str | None = Field(default=None, alias="Stderr")


class ResultStatus(str, Enum):
    CONVERTED = "converted"
    TASK_ERROR = "task_error"
    INCOMPLETE = "incomplete"
    FAILED = "failed"


class ConversionResult(BaseModel):
    """Terminal state of one conversion attempt."""

    status: ResultStatus = Field(
        ...,
        description="How the conversion ended.",
    )
    task_id: str | None = Field(
        default=None,
        description="Remote task identifier, once the submission succeeded.",
    )
    value: str | None = Field(
        default=None,
        description="Converted value truncated to two decimals (only when converted).",
    )
    detail: str | None = Field(
        default=None,
        description="Task stderr or the reason the conversion did not complete.",
    )

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.CONVERTED
