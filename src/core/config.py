"""Configuration for the converter core.

Centralizes environment variables (pydantic-settings) so the CLI and the
HTTP adapters read credentials and tuning knobs the same way.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "uxconvert"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "uxconvert"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "uxconvert"
    return Path.home() / ".config" / "uxconvert"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str]) -> Path:
    """Write or update variables in the user's global .env file."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# uxconvert user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Values come from `SIGNALOID_*` environment variables, then the project
    `.env`, then the per-user `.env` written by `doctor setup`.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIGNALOID_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Credential sent verbatim in the Authorization header.",
    )
    api_url: str = Field(
        default="https://api.signaloid.io/tasks",
        min_length=8,
        description="Base URL of the task endpoint.",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="uxconvert/0.1",
        min_length=1,
        description="User-Agent for API and output-file requests.",
    )

    fetch_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Retries for output-file fetches that hit a server error.",
    )
    fetch_initial_backoff_ms: int = Field(
        default=500,
        gt=0,
        description="First retry delay in milliseconds; doubles on each retry.",
    )

    wait_for_completion: bool = Field(
        default=True,
        description="Poll the task status until it is terminal before reading outputs.",
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Delay between task status polls (seconds).",
    )
    poll_max_attempts: int = Field(
        default=60,
        ge=1,
        description="Maximum number of task status polls.",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )
