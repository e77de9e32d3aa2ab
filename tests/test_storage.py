"""
LeanStorage facade
"""

import httpx
import pytest

from leanstore import LeanStorage

pytestmark = pytest.mark.asyncio


async def test_owned_http_client_is_closed(config):
    async with LeanStorage(config) as storage:
        http = storage.client.http
        assert http.timeout.read == config.http_timeout

    assert http.is_closed


async def test_borrowed_http_client_stays_open(config, server):
    http = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))

    async with LeanStorage(config, http_client=http):
        pass

    assert not http.is_closed
    await http.aclose()


async def test_configuration_from_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LEANCLOUD_APP_ID", "envapp")
    monkeypatch.setenv("LEANCLOUD_APP_KEY", "envkey")
    monkeypatch.setenv("LEANCLOUD_TABLE_NAME", "Books")

    storage = LeanStorage()

    assert storage.config.app_id == "envapp"
    assert "envkey" not in repr(storage)
    await storage.aclose()
