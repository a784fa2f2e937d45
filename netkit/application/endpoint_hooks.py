"""Resolve an endpoint's optional capabilities into hook slots, once."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from netkit.ports.endpoint import (
    ControlPoint,
    Endpoint,
    ErrorReasonExtracting,
    MockManager,
    MockProviding,
    RequestConfiguration,
    ResponseParsing,
    SessionProvider,
    URLRequestConfiguration,
)

Hook = Callable[..., Any]


@dataclass(frozen=True)
class EndpointHooks:
    """Bound endpoint methods, or None where the capability is absent."""

    identifier: str | None = None
    create_session: Hook | None = None
    configure_request: Hook | None = None
    control_point: Hook | None = None
    configure_url_request: Hook | None = None
    parse_response: Hook | None = None
    error_reason: Hook | None = None
    mock_manager: MockManager | None = None

    @classmethod
    def resolve(cls, endpoint: Any | None) -> "EndpointHooks":
        if endpoint is None:
            return cls()
        if isinstance(endpoint, Endpoint):
            identifier = str(endpoint.identifier)
        else:
            identifier = f"{type(endpoint).__module__}.{type(endpoint).__qualname__}"
        mock_manager = endpoint.mock_manager if isinstance(endpoint, MockProviding) else None
        if mock_manager is not None and not isinstance(mock_manager, MockManager):
            raise TypeError(f"{type(mock_manager).__name__} does not implement MockManager")
        return cls(
            identifier=identifier,
            create_session=endpoint.create_session if isinstance(endpoint, SessionProvider) else None,
            configure_request=(
                endpoint.configure_request if isinstance(endpoint, RequestConfiguration) else None
            ),
            control_point=endpoint.control_point if isinstance(endpoint, ControlPoint) else None,
            configure_url_request=(
                endpoint.configure_url_request if isinstance(endpoint, URLRequestConfiguration) else None
            ),
            parse_response=endpoint.parse_response if isinstance(endpoint, ResponseParsing) else None,
            error_reason=endpoint.error_reason if isinstance(endpoint, ErrorReasonExtracting) else None,
            mock_manager=mock_manager,
        )
