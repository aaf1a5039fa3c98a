"""CLI UI components (Rich).

Keeps visual details out of the command functions so the interactive loop
and the one-shot `convert` command render results the same way.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ConversionRequest, ConversionResult, ResultStatus


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in non-interactive modes)."""

    title = Text("uxconvert", style="bold cyan")
    subtitle = Text("Currency conversion with uncertain rates • Signaloid", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_request_table(request: ConversionRequest) -> Table:
    table = Table(title="Conversion request", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Value", f"{request.value:g} {request.source_currency.value}")
    table.add_row("Target", request.target_currency.value)
    table.add_row("Rate range", f"{request.min_rate:g} – {request.max_rate:g}")
    return table


def build_result_panel(result: ConversionResult, request: ConversionRequest | None = None) -> Panel:
    """Panel for a `ConversionResult`, colored by status."""

    body = Text()
    if result.status is ResultStatus.CONVERTED:
        suffix = f" {request.target_currency.value}" if request else ""
        body.append(f"{result.value}{suffix}", style="bold green")
        title, border = "CONVERTED VALUE", "green"
    elif result.status is ResultStatus.TASK_ERROR:
        body.append((result.detail or "").strip(), style="red")
        title, border = "Task Error", "red"
    elif result.status is ResultStatus.INCOMPLETE:
        body.append(result.detail or "No result.", style="yellow")
        title, border = "Incomplete", "yellow"
    else:
        body.append(result.detail or "Conversion failed.", style="red")
        title, border = "Failed", "red"

    if result.task_id:
        body.append(f"\nTask ID: {result.task_id}", style="dim")
    return Panel(body, title=title, border_style=border)
