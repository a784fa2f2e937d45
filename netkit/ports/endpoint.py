"""Endpoint capability ports.

An endpoint is a long-lived collaborator for one API family. It implements
any subset of the capabilities below; a request resolves which ones are
present once, at construction (see `EndpointHooks`). Every hook except
`create_session` may return an awaitable instead of a plain value.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Protocol, runtime_checkable

import httpx

from netkit.domain.models import Continuation, MockRecord, Outcome, ParseDecision
from netkit.ports.session import Session

if TYPE_CHECKING:
    from netkit.application.request import Request

Flags = Mapping[str, Any]

# resume(on_finished=None): lets a gated request proceed. on_finished runs
# once after the request's completion has been delivered.
Resume = Callable[..., None]


@runtime_checkable
class Endpoint(Protocol):
    @property
    def identifier(self) -> str: ...


@runtime_checkable
class SessionProvider(Protocol):
    def create_session(self, request: "Request", flags: Flags) -> Session:
        """Build the endpoint's session. Runs inside the session cache's critical
        section, so it must return a Session directly and must not block."""
        ...


@runtime_checkable
class RequestConfiguration(Protocol):
    def configure_request(self, request: "Request", flags: Flags) -> None | Awaitable[None]:
        """Mutate url builder, headers or body before the URL is materialized. Raise to fail."""
        ...


@runtime_checkable
class ControlPoint(Protocol):
    def control_point(self, request: "Request", resume: Resume) -> None:
        """Decide when the request may proceed by calling `resume`; never calling it parks the request."""
        ...


@runtime_checkable
class URLRequestConfiguration(Protocol):
    def configure_url_request(
        self,
        url_request: httpx.Request,
        request: "Request",
        flags: Flags,
    ) -> None | Awaitable[None]:
        """Rewrite the materialized wire request (e.g. add signing headers). Raise to fail."""
        ...


@runtime_checkable
class ResponseParsing(Protocol):
    def parse_response(
        self,
        request: "Request",
        outcome: Outcome,
        continuation: Continuation,
    ) -> ParseDecision | Awaitable[ParseDecision]:
        """Return Ready(new_outcome), or Pending() and call `continuation` later."""
        ...


@runtime_checkable
class MockManager(Protocol):
    def mocking_enabled(self, request: "Request") -> bool: ...

    def load_mock(self, key: str, url: httpx.URL) -> MockRecord | Awaitable[MockRecord]: ...


@runtime_checkable
class MockRecorder(MockManager, Protocol):
    def recording_enabled(self, request: "Request") -> bool: ...

    def record_mock(
        self,
        key: str,
        url: httpx.URL,
        data: bytes,
        response: httpx.Response,
    ) -> None | Awaitable[None]: ...


@runtime_checkable
class MockProviding(Protocol):
    @property
    def mock_manager(self) -> MockManager | None: ...


@runtime_checkable
class ErrorReasonExtracting(Protocol):
    def error_reason(
        self,
        request: "Request",
        value: Any,
        data: bytes | None,
        response: httpx.Response,
    ) -> str | None:
        """Pull a human-readable reason out of a non-success response body."""
        ...
