"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import inspect
import os
import sys
from typing import Any

import pytest

# Ensure src/ is on sys.path for tests so the src layout is used during test runs
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

_WEB_CARBON_ENV = (
    "WEB_CARBON_DEFAULT_REGION",
    "WEB_CARBON_MONTHLY_VISITS",
    "WEB_CARBON_NAVIGATION_TIMEOUT_MS",
    "WEB_CARBON_SETTLE_DELAY_MS",
    "WEB_CARBON_CAPTURE_DRAIN_MS",
    "WEB_CARBON_ANALYSIS_TIMEOUT",
    "WEB_CARBON_HEADLESS",
    "WEB_CARBON_USER_AGENT",
    "WEB_CARBON_BROWSER_USER_AGENT",
    "WEB_CARBON_GREENCHECK_URL",
    "WEB_CARBON_GREENCHECK_TIMEOUT",
    "WEB_CARBON_GREENCHECK_TTL",
    "WEB_CARBON_KNOWN_HOSTS_FALLBACK",
    "WEB_CARBON_HISTORY_PATH",
    "WEB_CARBON_INTENSITY_FILE",
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "asyncio: mark test as requiring an event loop")


def pytest_pyfunc_call(pyfuncitem: Any) -> bool | None:
    """Execute async test functions without requiring pytest-asyncio."""

    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames  # type: ignore[attr-defined]
        }

        event_loop = asyncio.new_event_loop()
        try:
            event_loop.run_until_complete(pyfuncitem.obj(**call_kwargs))
        finally:
            event_loop.close()
        return True
    return None


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of settings-driven tests."""

    for name in _WEB_CARBON_ENV:
        monkeypatch.delenv(name, raising=False)
