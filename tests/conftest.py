from __future__ import annotations

import pytest

from core.config import AppSettings
from tests.fakes import RecordingSleep


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_key="test-key",
        api_url="https://api.test/tasks",
        wait_for_completion=False,
    )


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
