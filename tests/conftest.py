"""Pytest configuration and shared fixtures for heroku-api-core tests."""

from pathlib import Path

import certifi
import pytest

from heroku_api_core.client import APIClient, ClientConfig
from heroku_api_core.config.settings import ClientSettings
from heroku_api_core.testing import PageScript


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear client-related environment variables before each test.

    This prevents a developer's own HEROKU_* settings from leaking into tests.
    """
    import os

    for key in list(os.environ.keys()):
        if key.startswith("HEROKU_") or key == "XDG_DATA_HOME":
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def settings(tmp_path) -> ClientSettings:
    """Default settings with the data directory inside tmp_path."""
    return ClientSettings(data_dir=tmp_path / "heroku")


@pytest.fixture
def config(settings) -> ClientConfig:
    return ClientConfig(settings=settings)


@pytest.fixture
def pem_bundle() -> bytes:
    """A real CA bundle (certifi's), with comments between the certificates."""
    return Path(certifi.where()).read_bytes()


@pytest.fixture
def make_client(config):
    """Build an APIClient whose requests are answered by a PageScript."""

    def _make(script: PageScript, client_config: ClientConfig | None = None) -> APIClient:
        return APIClient(client_config or config, transport=script.transport)

    return _make
