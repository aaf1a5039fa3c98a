"""Exception hierarchy for the converter.

Adapters raise these; the conversion pipeline turns them into
`ConversionResult` values and the CLI logs them.
"""

from __future__ import annotations


class ConverterError(Exception):
    """Base class for every error raised by this package."""


class InputValidationError(ConverterError):
    """User input could not be turned into a `ConversionRequest`."""


class CurrencyValidationError(InputValidationError):
    def __init__(self, code: str, allowed: list[str]) -> None:
        self.code = code
        self.allowed = allowed
        super().__init__(
            f"Source and Target currencies must be one of {','.join(allowed)} (got {code!r})"
        )


class TaskSubmissionError(ConverterError):
    """The task endpoint rejected the submission or could not be reached."""


class TaskOutputsError(ConverterError):
    """Task status or output locators could not be retrieved."""


class FetchError(ConverterError):
    """An output file could not be fetched, even after retries."""

    def __init__(
        self,
        url: str,
        message: str,
        *,
        status_code: int | None = None,
        attempts: int = 1,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.attempts = attempts
        super().__init__(message)
