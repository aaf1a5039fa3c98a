"""Currency codes accepted by the converter.

The allow-list lives in the domain layer so the CLI and the pipeline share a
single source of truth.
"""

from __future__ import annotations

from enum import Enum


class Currency(str, Enum):
    """Supported ISO 4217 codes."""

    GBP = "GBP"
    EUR = "EUR"

    @classmethod
    def codes(cls) -> list[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls, raw: str) -> "Currency | None":
        """Normalize user input to upper case and look it up.

        Returns None for codes outside the allow-list.
        """

        code = (raw or "").strip().upper()
        try:
            return cls(code)
        except ValueError:
            return None
