"""Builds the source-code task submitted for a conversion.

The C program samples the conversion rate from a uniform distribution
between the two bounds (`UxHwFloatUniformDist`) and prints the product with
the value, so the printed number carries the rate's uncertainty.
"""

from __future__ import annotations

from core.domain.models import SourceCode, TaskDescriptor, TaskOverrides

CONVERSION_TEMPLATE = """
#include <stdio.h>
#include <stdlib.h>
#include <uxhw.h>

int main() {{
  float conversionRate = UxHwFloatUniformDist({min_rate}, {max_rate});
  float convertedValue = {value} * conversionRate;
  printf("%f\\n", convertedValue);
  return 0;
}}
"""


def format_number(value: float) -> str:
    """Render a number the way the user typed it: `100`, not `100.0`."""

    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def build_arguments(min_rate: float, max_rate: float, value: float) -> str:
    return (
        f"minRate={format_number(min_rate)} "
        f"maxRate={format_number(max_rate)} "
        f"value={format_number(value)}"
    )


def build_task_descriptor(min_rate: float, max_rate: float, value: float) -> TaskDescriptor:
    """Embed the three parameters in the C template and in the arguments string."""

    code = CONVERSION_TEMPLATE.format(
        min_rate=format_number(min_rate),
        max_rate=format_number(max_rate),
        value=format_number(value),
    )
    return TaskDescriptor(
        source_code=SourceCode(code=code, language="C"),
        overrides=TaskOverrides(arguments=build_arguments(min_rate, max_rate, value)),
    )
