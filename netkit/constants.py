"""Library-level constants shared across modules."""
from __future__ import annotations

from enum import Enum


class HTTPMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"


class RequestState(str, Enum):
    """Request lifecycle states. COMPLETED and CANCELLED are terminal."""

    IDLE = "IDLE"
    PREPARING = "PREPARING"
    AWAITING_CONTROL = "AWAITING_CONTROL"
    BUILDING = "BUILDING"
    DISPATCHED = "DISPATCHED"
    PARSING = "PARSING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


TERMINAL_STATES = frozenset({RequestState.COMPLETED, RequestState.CANCELLED})

REQUEST_DID_START = "NETRequestDidStartNotification"
REQUEST_DID_END = "NETRequestDidEndNotification"

DEFAULT_SUCCESS_CODES = range(200, 300)

SHARED_SESSION_DESCRIPTION = "shared session"

# Content types decoded to str with the response charset instead of a converter.
TEXT_MIME_TYPES = frozenset({"text/html"})
DEFAULT_CHARSET = "utf-8"
