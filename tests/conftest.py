"""Shared test fixtures for all test modules."""

import logging
import os

import httpx
import pytest

# ── Environment overrides (must be set before importing envsh modules) ──────
os.environ["ENVSH_HOST_URL"] = "https://envs.sh"
os.environ["ENVSH_DISPLAY_TIMEZONE"] = "UTC"
os.environ["ENVSH_LOG_LEVEL"] = "WARNING"

# 2025-02-09T13:55:27.476Z
FIXED_NOW_MS = 1_739_109_327_476


@pytest.fixture
def now_ms():
    """A fixed invocation instant in epoch milliseconds."""
    return FIXED_NOW_MS


@pytest.fixture
def recorded():
    """Requests seen by the mock host, in order."""
    return []


@pytest.fixture
def mock_host(recorded):
    """Build an httpx MockTransport that records requests and returns a canned reply."""

    def factory(status=200, body="https://envs.sh/Ej-.txt\n", headers=None):
        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            recorded.append(request)
            return httpx.Response(status, text=body, headers=headers or {})

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture(autouse=True)
def isolated_runtime():
    """Undo per-invocation global state: cached settings and the root log level."""
    from envsh.config import get_settings

    root = logging.getLogger()
    level = root.level
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    root.setLevel(level)
