from typing import Optional
from unittest.mock import Mock

import pytest

from openweather.config import AppSettings
from openweather.ingestion import RequestClient

from .fakes import fake_session_factory


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, api_key="test-key", request_timeout_s=2.0, max_workers=2)


@pytest.fixture
def make_client(settings):
    clients = []

    def _make(response: Optional[Mock] = None, error: Optional[Exception] = None) -> RequestClient:
        factory = fake_session_factory(response, error)
        client = RequestClient(settings, session_factory=factory)
        client.sessions = factory.sessions
        clients.append(client)
        return client

    yield _make
    for c in clients:
        c.close()
