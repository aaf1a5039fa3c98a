"""Interactive conversion loop.

One `InteractiveSession` owns the console, the prompt function and the
pipeline for the whole run; repeats are iterations of a plain loop.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Callable

import typer
from pydantic import ValidationError
from rich.console import Console

from cli.ui_components import build_result_panel
from core.domain.currency import Currency
from core.domain.models import ConversionRequest, ConversionResult
from core.errors import CurrencyValidationError, InputValidationError
from core.services.conversion_pipeline import ConversionPipeline

logger = logging.getLogger(__name__)

Prompter = Callable[[str], str]

REPEAT_PROMPT = "Do you want to perform another conversion? (yes/no)"


def _ask(text: str) -> str:
    return typer.prompt(text, default="", show_default=False)


def _parse_number(raw: str, label: str) -> float:
    try:
        number = float((raw or "").strip())
    except ValueError:
        raise InputValidationError(f"{label} must be a number (got {raw!r})") from None
    if not math.isfinite(number):
        raise InputValidationError(f"{label} must be a finite number (got {raw!r})")
    return number


def parse_conversion_request(
    value: str,
    source_currency: str,
    target_currency: str,
    min_rate: str,
    max_rate: str,
) -> ConversionRequest:
    """Validate raw user input.

    Currencies are checked first, then the numbers, then the rate ordering.
    Raises `CurrencyValidationError` or `InputValidationError`.
    """

    source = Currency.parse(source_currency)
    target = Currency.parse(target_currency)
    if source is None or target is None:
        bad = source_currency if source is None else target_currency
        raise CurrencyValidationError((bad or "").strip().upper(), Currency.codes())

    amount = _parse_number(value, "Value")
    low = _parse_number(min_rate, "Minimum conversion rate")
    high = _parse_number(max_rate, "Maximum conversion rate")
    try:
        return ConversionRequest(
            value=amount,
            source_currency=source,
            target_currency=target,
            min_rate=low,
            max_rate=high,
        )
    except ValidationError as exc:
        message = "; ".join(err.get("msg", "") for err in exc.errors())
        raise InputValidationError(message.removeprefix("Value error, ")) from exc


class InteractiveSession:
    """Prompt, convert, offer to repeat; until the user declines."""

    def __init__(
        self,
        pipeline: ConversionPipeline,
        *,
        console: Console | None = None,
        prompt: Prompter = _ask,
    ) -> None:
        self._pipeline = pipeline
        self._console = console or Console()
        self._prompt = prompt

    def read_request(self) -> ConversionRequest:
        value = self._prompt("Enter value to be converted")
        source = self._prompt("Enter source currency (e.g., GBP)")
        target = self._prompt("Enter target currency (e.g., EUR)")
        min_rate = self._prompt("Enter the minimum conversion rate")
        max_rate = self._prompt("Enter the maximum conversion rate")
        logger.debug("Validating input...")
        return parse_conversion_request(value, source, target, min_rate, max_rate)

    def run_once(self) -> ConversionResult | None:
        """One prompt/convert cycle. Returns None when validation fails."""

        try:
            request = self.read_request()
        except InputValidationError as exc:
            logger.error("Error: %s", exc)
            return None

        result = asyncio.run(self._pipeline.run(request))
        self._console.print(build_result_panel(result, request))
        return result

    def wants_repeat(self) -> bool:
        answer = self._prompt(REPEAT_PROMPT)
        return answer.strip().lower() == "yes"

    def run(self) -> list[ConversionResult | None]:
        results: list[ConversionResult | None] = []
        while True:
            results.append(self.run_once())
            if not self.wants_repeat():
                break
        logger.info("Exiting program...")
        return results
