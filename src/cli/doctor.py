"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    headers = {"Authorization": settings.api_key} if settings.api_key else None
    try:
        async with build_async_client(settings, extra_headers=headers) as client:
            response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
        return False, str(exc) or exc.__class__.__name__
    if response.status_code in (401, 403):
        return False, f"HTTP {response.status_code} (credential rejected)"
    return True, f"HTTP {response.status_code}"


def build_doctor_table(settings: AppSettings, http_result: tuple[bool, str]) -> Table:
    table = Table(title="uxconvert Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    if settings.api_key:
        table.add_row("API key", "OK", "Sent as Authorization header")
    else:
        table.add_row("API key", "MISSING", "Set SIGNALOID_API_KEY or run `doctor setup`")
    table.add_row("API URL", "OK", settings.api_url)
    table.add_row(
        "Retry policy",
        "OK",
        f"{settings.fetch_max_retries} retries from {settings.fetch_initial_backoff_ms}ms",
    )

    ok_http, detail_http = http_result
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)
    return table


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    http_result = asyncio.run(_check_http(settings.api_url, settings))
    _console.print(build_doctor_table(settings, http_result))


@app.command(name="setup")
def setup() -> None:
    """Interactive API setup (stores config in the user config .env)."""

    settings = AppSettings()
    api_url = typer.prompt("API URL", default=settings.api_url, show_default=True).strip()
    api_key = typer.prompt("API key", hide_input=True, confirmation_prompt=False).strip()

    if not api_url or not api_key:
        raise typer.BadParameter("API URL and API key are required")

    env_path = write_user_env_vars(
        {
            "SIGNALOID_API_URL": api_url,
            "SIGNALOID_API_KEY": api_key,
        }
    )

    _console.print(f"[green]Saved API config to:[/green] {env_path}")
