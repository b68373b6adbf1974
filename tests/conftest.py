"""Shared test fixtures."""

import os

import pytest

from gcweb.api.client import GCWebClient
from gcweb.config import Config
from gcweb.services.geocaching import GeocachingService
from tests.fakes import FakeTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep GCWEB_* variables of the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("GCWEB_"):
            monkeypatch.delenv(key)


@pytest.fixture
def config():
    return Config(_env_file=None)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport, config):
    with GCWebClient(transport=transport, config=config) as client:
        yield client


@pytest.fixture
def service(client):
    return GeocachingService(client)
