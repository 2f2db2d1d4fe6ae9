import os
from pathlib import Path

import pytest


SAMPLE_LOG = Path(__file__).parent / "data" / "proxy_access.log"


@pytest.fixture(scope="session", autouse=True)
def baseline_settings_env():
    """Provide baseline env vars so tests are not affected by local .env.

    Pydantic-settings precedence: init args > env vars > .env > defaults.
    Setting these ensures stable defaults regardless of any .env present.
    """
    os.environ.update({
        "LOG_LEVEL": "WARNING",
        "SCAN_ENCODING": "utf-8",
        "SCAN_SENTINEL": "pattern: NGINXPROXYACCESS",
    })
    os.environ.pop("SCAN_DEFAULT_TOP", None)


@pytest.fixture(autouse=True)
def refresh_settings_cache():
    """Clear settings cache so env changes take effect per test.

    Ensures tests using monkeypatch.setenv() get a fresh Settings instance.
    """
    from npma.config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_log_path() -> Path:
    """Path of the bundled sample log with four records."""
    return SAMPLE_LOG


@pytest.fixture
def sample_lines() -> list[str]:
    """Non-empty lines of the sample log."""
    with open(SAMPLE_LOG, "r", encoding="utf-8") as f:
        return [line.rstrip("\r\n") for line in f if line.strip()]


@pytest.fixture
def record_lines() -> list[str]:
    """A single complete, well-formed record without the closing sentinel."""
    return [
        "request: /api/v1/items?from=10:20",
        "timestamp: 10/Oct/2023:13:55:36 +0200",
        'agent: "Mozilla/5.0 (X11; Linux x86_64)"',
        "clientip: 192.168.1.10",
        "method: GET",
        "schema: https",
        "length: 1024",
        "status: 200",
        "referrer: https://example.com/start",
    ]
