"""Typer application.

`uxconvert` without a subcommand starts the interactive loop; `convert`
runs a single conversion from options; `doctor` checks the environment.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_result_json, result_payload
from adapters.signaloid_client import SignaloidTaskClient
from cli import doctor
from cli.interactive import InteractiveSession, parse_conversion_request
from cli.ui_components import build_request_table, build_result_panel, print_banner
from core.config import AppSettings
from core.errors import InputValidationError
from core.logging import init_logging
from core.services.conversion_pipeline import ConversionPipeline

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Convert currencies with an uncertain exchange rate on the Signaloid cloud.",
    invoke_without_command=True,
)
app.add_typer(doctor.app, name="doctor")

_console = Console()


def build_pipeline(settings: AppSettings) -> ConversionPipeline:
    return ConversionPipeline(service=SignaloidTaskClient(settings), settings=settings)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug log lines."),
) -> None:
    settings = AppSettings()
    init_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings
    if ctx.invoked_subcommand is None:
        interactive(ctx)


@app.command()
def interactive(ctx: typer.Context) -> None:
    """Prompt for conversions until you decline to continue."""

    settings: AppSettings = ctx.obj or AppSettings()
    print_banner(_console)
    InteractiveSession(build_pipeline(settings), console=_console).run()


@app.command()
def convert(
    ctx: typer.Context,
    value: str = typer.Option(..., "--value", help="Amount to convert."),
    source: str = typer.Option(..., "--source", help="Source currency (GBP or EUR)."),
    target: str = typer.Option(..., "--target", help="Target currency (GBP or EUR)."),
    min_rate: str = typer.Option(..., "--min-rate", help="Minimum conversion rate."),
    max_rate: str = typer.Option(..., "--max-rate", help="Maximum conversion rate."),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the result to a JSON file."),
) -> None:
    """Run a single conversion without prompts."""

    settings: AppSettings = ctx.obj or AppSettings()
    try:
        request = parse_conversion_request(value, source, target, min_rate, max_rate)
    except InputValidationError as exc:
        logger.error("Error: %s", exc)
        raise typer.Exit(code=1) from exc

    result = asyncio.run(build_pipeline(settings).run(request))

    if as_json:
        typer.echo(json.dumps(result_payload(result=result, request=request), indent=2, sort_keys=True))
    else:
        _console.print(build_request_table(request))
        _console.print(build_result_panel(result, request))

    if output is not None:
        path = export_result_json(result=result, output_path=output, request=request)
        logger.info("Result written to %s", path)

    if not result.ok:
        raise typer.Exit(code=1)


def run() -> None:
    app()
