"""Domain value objects shared by the lifecycle, endpoints and mock managers."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import httpx

# Headers that describe the wire framing, not the decoded body.
_REPLAY_DROPPED_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})

# completion(value, response, error)
ResponseCallback = Callable[[Any, "httpx.Response | None", "BaseException | None"], None]


@dataclass(frozen=True)
class Outcome:
    """What a request produced: decoded value, response, error and raw bytes.

    `value` is the decoded body (raw bytes when no converter matched).
    `mock` is True when the response came from a mock manager.
    """

    value: Any = None
    response: httpx.Response | None = None
    error: BaseException | None = None
    data: bytes | None = None
    mock: bool = False

    def replace(self, **changes: Any) -> "Outcome":
        return dataclasses.replace(self, **changes)

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None


@dataclass(frozen=True)
class Ready:
    """Response post-processing finished synchronously with this outcome."""

    outcome: Outcome


@dataclass(frozen=True)
class Pending:
    """Response post-processing continues asynchronously; the endpoint will
    call the continuation it was given exactly once."""


ParseDecision = Ready | Pending

Continuation = Callable[[Outcome], None]


@dataclass(frozen=True)
class MockRecord:
    """Stored substitute for a network exchange."""

    data: bytes
    response: httpx.Response

    @classmethod
    def build(
        cls,
        data: bytes,
        *,
        url: httpx.URL | str,
        status_code: int = 200,
        headers: Mapping[str, str] | list[tuple[str, str]] | None = None,
        method: str = "GET",
    ) -> "MockRecord":
        response = httpx.Response(
            status_code,
            headers=headers or {},
            content=data,
            request=httpx.Request(method, url),
        )
        return cls(data=data, response=response)

    @classmethod
    def capture(
        cls,
        data: bytes,
        response: httpx.Response,
        *,
        url: httpx.URL | str,
    ) -> "MockRecord":
        """Snapshot a live response for replay against `url`. `data` is the
        already-decoded body, so transfer and content encodings are dropped."""
        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in _REPLAY_DROPPED_HEADERS
        ]
        try:
            method = response.request.method
        except RuntimeError:
            method = "GET"
        return cls.build(data, url=url, status_code=response.status_code, headers=headers, method=method)
