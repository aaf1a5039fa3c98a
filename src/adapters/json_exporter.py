"""JSON export of a conversion result.

Lets scripts and pipelines consume a conversion without scraping console
output.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import ConversionRequest, ConversionResult


def result_payload(
    *, result: ConversionResult, request: ConversionRequest | None = None
) -> dict[str, object]:
    payload: dict[str, object] = {"result": result.model_dump(mode="json")}
    if request is not None:
        payload["request"] = request.model_dump(mode="json")
    return payload


def export_result_json(
    *,
    result: ConversionResult,
    output_path: Path,
    request: ConversionRequest | None = None,
) -> Path:
    """Write the result (and optionally its request) as stable UTF-8 JSON."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result_payload(result=result, request=request)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
