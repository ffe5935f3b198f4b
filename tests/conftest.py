"""Shared pytest fixtures for FishEye client tests.

Fixture Organization:
    - Environment fixtures: isolate FISHEYE_* variables and the config singleton
    - Server fixtures: scripted FishEye responses via httpx.MockTransport
    - Client fixtures: FisheyeClient wired to the scripted server
"""

import logging
import os
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from src.fisheye.client import FisheyeClient
from src.fisheye.config import FisheyeGlobalConfig, reset_config

# Add tests directory to sys.path so test modules can import fisheye_test_helpers
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from fisheye_test_helpers import API_TOKEN, BASE_URL, ScriptedServer  # noqa: E402


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_fisheye_env(monkeypatch) -> Iterator[None]:
    """Remove FISHEYE_* variables and clear the cached config around each test."""
    for key in list(os.environ.keys()):
        if key.upper().startswith("FISHEYE_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def propagate_fisheye_logs() -> Iterator[None]:
    """Let caplog see records from the fisheye logger hierarchy."""
    logger = logging.getLogger("fisheye")
    previous = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = previous


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def global_config() -> FisheyeGlobalConfig:
    return FisheyeGlobalConfig(url=BASE_URL, api_token=API_TOKEN)


@pytest.fixture
def server() -> ScriptedServer:
    return ScriptedServer()


@pytest.fixture
def http_client(server) -> Iterator[httpx.Client]:
    client = httpx.Client(transport=httpx.MockTransport(server))
    yield client
    client.close()


@pytest.fixture
def make_client(global_config, http_client) -> Callable[..., FisheyeClient]:
    """Factory for FisheyeClient instances bound to the scripted server."""

    def _make(configuration: FisheyeGlobalConfig | None = None) -> FisheyeClient:
        return FisheyeClient(configuration or global_config, http_client=http_client)

    return _make


@pytest.fixture
def fisheye_client(make_client) -> FisheyeClient:
    return make_client()
