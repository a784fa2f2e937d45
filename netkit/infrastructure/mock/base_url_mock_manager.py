"""Mock source that serves substitute responses from a static file server.

The mock key is appended to the configured base URL and fetched with a
plain GET; whatever comes back is replayed as the response for the
original request URL.
"""
from __future__ import annotations

from typing import Any

import httpx

from netkit.domain.errors import MockNotFoundError
from netkit.domain.models import MockRecord


class BaseURLMockManager:
    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        enabled: bool = True,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self._base_url = base_url
        self._client = client
        self._owns_client = client is None
        self.enabled = enabled

    @property
    def base_url(self) -> str:
        return self._base_url

    def mocking_enabled(self, request: Any) -> bool:
        return self.enabled

    def mock_url(self, key: str) -> str:
        return f"{self._base_url}{key}"

    async def load_mock(self, key: str, url: httpx.URL) -> MockRecord:
        if self._client is None:
            self._client = httpx.AsyncClient()
        source = self.mock_url(key)
        response = await self._client.get(source)
        if response.status_code == 404:
            raise MockNotFoundError(f"no mock at {source}")
        return MockRecord.capture(response.content, response, url=url)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
