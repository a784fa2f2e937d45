"""Directory-backed mock store.

Each key maps to two files: `<name>.body` holds the raw response bytes and
`<name>.json` holds the response metadata (status, headers, URL, method).
Both are written atomically, body first, so a reader never sees metadata
without its body.
"""
from __future__ import annotations

import asyncio
import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Any

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from netkit.domain.errors import MockNotFoundError
from netkit.domain.models import MockRecord

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


class StoredResponse(BaseModel):
    url: str
    method: str = "GET"
    status_code: int
    headers: list[tuple[str, str]] = []


def _file_stem(key: str) -> str:
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:10]
    slug = _UNSAFE.sub("_", key).strip("._")[:80] or "mock"
    return f"{slug}-{digest}"


def _write_atomic(path: Path, payload: bytes) -> None:
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise


class DirectoryMockManager:
    def __init__(self, directory: str | Path, *, enabled: bool = True, recording: bool = False) -> None:
        self._directory = Path(directory)
        self.enabled = enabled
        self.recording = recording

    @property
    def directory(self) -> Path:
        return self._directory

    def mocking_enabled(self, request: Any) -> bool:
        return self.enabled

    def recording_enabled(self, request: Any) -> bool:
        return self.recording

    def _paths(self, key: str) -> tuple[Path, Path]:
        stem = _file_stem(key)
        return self._directory / f"{stem}.body", self._directory / f"{stem}.json"

    def _load(self, key: str, url: httpx.URL) -> MockRecord:
        body_path, meta_path = self._paths(key)
        try:
            meta = StoredResponse.model_validate_json(meta_path.read_bytes())
            data = body_path.read_bytes()
        except FileNotFoundError as exc:
            raise MockNotFoundError(f"no mock stored for key {key!r} in {self._directory}") from exc
        except ValidationError as exc:
            raise MockNotFoundError(f"mock metadata for key {key!r} is unreadable: {exc}") from exc
        return MockRecord.build(
            data,
            url=url,
            status_code=meta.status_code,
            headers=meta.headers,
            method=meta.method,
        )

    def _store(self, key: str, url: httpx.URL, data: bytes, response: httpx.Response) -> None:
        record = MockRecord.capture(data, response, url=url)
        meta = StoredResponse(
            url=str(url),
            method=record.response.request.method,
            status_code=record.response.status_code,
            headers=list(record.response.headers.multi_items()),
        )
        body_path, meta_path = self._paths(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        _write_atomic(body_path, data)
        _write_atomic(meta_path, meta.model_dump_json().encode("utf-8"))
        logger.debug("recorded mock {} -> {}", key, meta_path)

    async def load_mock(self, key: str, url: httpx.URL) -> MockRecord:
        return await asyncio.to_thread(self._load, key, url)

    async def record_mock(self, key: str, url: httpx.URL, data: bytes, response: httpx.Response) -> None:
        await asyncio.to_thread(self._store, key, url, data, response)
