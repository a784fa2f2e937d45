"""Unit tests for the mock managers and their factory."""
from __future__ import annotations

import httpx
import pytest

from netkit.domain.errors import MockNotFoundError
from netkit.domain.models import MockRecord
from netkit.infrastructure.mock.base_url_mock_manager import BaseURLMockManager
from netkit.infrastructure.mock.directory_mock_manager import DirectoryMockManager
from netkit.infrastructure.mock.factory import create_mock_manager
from netkit.infrastructure.mock.in_memory_mock_manager import InMemoryMockManager
from netkit.ports.endpoint import MockManager, MockRecorder
from tests.conftest import make_settings

TARGET = httpx.URL("https://api.example.test/users/1")


def _live_response(content: bytes, **headers: str) -> httpx.Response:
    return httpx.Response(
        200,
        headers={"content-type": "application/json", **headers},
        content=content,
        request=httpx.Request("GET", TARGET),
    )


def test_capture_drops_wire_encoding_headers():
    response = _live_response(b"{}", **{"content-encoding": "identity", "x-request-id": "abc"})

    record = MockRecord.capture(b"{}", response, url=TARGET)

    assert "content-encoding" not in record.response.headers
    assert record.response.headers["x-request-id"] == "abc"
    assert record.response.content == b"{}"
    assert record.response.request.url == TARGET


def test_in_memory_store_and_load():
    manager = InMemoryMockManager()
    manager.store("user", b'{"id": 1}', status_code=202, headers={"content-type": "application/json"})

    record = manager.load_mock("user", TARGET)

    assert isinstance(manager, MockRecorder)
    assert record.data == b'{"id": 1}'
    assert record.response.status_code == 202
    assert record.response.request.url == TARGET


def test_in_memory_missing_key():
    with pytest.raises(MockNotFoundError):
        InMemoryMockManager().load_mock("nope", TARGET)


@pytest.mark.asyncio
async def test_directory_records_and_replays(tmp_path):
    manager = DirectoryMockManager(tmp_path / "mocks", recording=True)

    await manager.record_mock("users/1?full=true", TARGET, b'{"id": 1}', _live_response(b'{"id": 1}'))
    record = await manager.load_mock("users/1?full=true", TARGET)

    assert record.data == b'{"id": 1}'
    assert record.response.status_code == 200
    assert record.response.headers["content-type"] == "application/json"
    assert sorted(path.suffix for path in (tmp_path / "mocks").iterdir()) == [".body", ".json"]


@pytest.mark.asyncio
async def test_directory_missing_key(tmp_path):
    with pytest.raises(MockNotFoundError):
        await DirectoryMockManager(tmp_path).load_mock("absent", TARGET)


@pytest.mark.asyncio
async def test_base_url_manager_fetches_key_from_base_url():
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.path.endswith("missing.json"):
            return httpx.Response(404)
        return httpx.Response(200, headers={"content-type": "application/json"}, content=b'{"mock": true}')

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    manager = BaseURLMockManager("https://mocks.example.test/fixtures/", client=client)

    record = await manager.load_mock("user.json", TARGET)
    with pytest.raises(MockNotFoundError):
        await manager.load_mock("missing.json", TARGET)
    await client.aclose()

    assert seen[0] == "https://mocks.example.test/fixtures/user.json"
    assert record.data == b'{"mock": true}'
    assert record.response.request.url == TARGET
    assert isinstance(manager, MockManager)
    assert not isinstance(manager, MockRecorder)


def test_factory_selects_backend(tmp_path):
    assert create_mock_manager(make_settings()) is None

    in_memory = create_mock_manager(make_settings(mock_backend="inmemory", mock_enabled=True))
    assert isinstance(in_memory, InMemoryMockManager)
    assert in_memory.enabled is True

    directory = create_mock_manager(make_settings(mock_backend="Directory", mock_directory=str(tmp_path)))
    assert isinstance(directory, DirectoryMockManager)
    assert directory.directory == tmp_path

    base_url = create_mock_manager(make_settings(mock_backend="base_url", mock_base_url="http://m.test/"))
    assert isinstance(base_url, BaseURLMockManager)


def test_factory_rejects_unknown_backend():
    with pytest.raises(ValueError, match="Unsupported mock backend"):
        create_mock_manager(make_settings(mock_backend="redis"))
