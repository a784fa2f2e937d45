"""In-memory mock store for tests and local mode."""
from __future__ import annotations

import threading
from typing import Any, Mapping

import httpx

from netkit.domain.errors import MockNotFoundError
from netkit.domain.models import MockRecord


class InMemoryMockManager:
    def __init__(self, *, enabled: bool = True, recording: bool = False) -> None:
        self.enabled = enabled
        self.recording = recording
        self._lock = threading.Lock()
        self._records: dict[str, MockRecord] = {}

    def mocking_enabled(self, request: Any) -> bool:
        return self.enabled

    def recording_enabled(self, request: Any) -> bool:
        return self.recording

    def store(
        self,
        key: str,
        data: bytes,
        *,
        status_code: int = 200,
        headers: Mapping[str, str] | None = None,
        url: httpx.URL | str = "http://mock.invalid/",
    ) -> None:
        record = MockRecord.build(data, url=url, status_code=status_code, headers=headers)
        with self._lock:
            self._records[key] = record

    def load_mock(self, key: str, url: httpx.URL) -> MockRecord:
        with self._lock:
            record = self._records.get(key)
        if record is None:
            raise MockNotFoundError(f"no mock stored for key {key!r}")
        return MockRecord.capture(record.data, record.response, url=url)

    def record_mock(self, key: str, url: httpx.URL, data: bytes, response: httpx.Response) -> None:
        record = MockRecord.capture(data, response, url=url)
        with self._lock:
            self._records[key] = record

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._records)
