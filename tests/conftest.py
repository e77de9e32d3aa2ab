"""
Shared fixtures
"""

import httpx
import pytest

from leanstore import Configuration, LeanStorage

from .fakes import APP_ID, TABLE, FakeLeanCloud


@pytest.fixture
def config():
    return Configuration.from_credentials(
        app_id=APP_ID,
        app_key="test-key",
        table_name=TABLE,
        write_session_token="session-token",
    )


@pytest.fixture
def read_only_config():
    return Configuration.from_credentials(
        app_id=APP_ID,
        app_key="test-key",
        table_name=TABLE,
    )


@pytest.fixture
def server():
    return FakeLeanCloud()


def _storage(config, server):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
    return LeanStorage(config, http_client=http_client)


@pytest.fixture
def storage(config, server):
    return _storage(config, server)


@pytest.fixture
def read_only_storage(read_only_config, server):
    return _storage(read_only_config, server)
