"""Error taxonomy for requests, sessions and MIME conversion.

Transport errors raised by httpx are not wrapped; they reach callers as-is.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from netkit.domain.result import Issue


class RequestAlreadyStartedError(RuntimeError):
    """Programming fault: a Request's lifecycle was started a second time."""


class NetKitError(Exception):
    """Base for recoverable request failures."""


class RequestCancelledError(NetKitError):
    """The request was cancelled before or while the transport call ran."""

    def __init__(self, message: str = "request cancelled") -> None:
        super().__init__(message)


class BadURLError(NetKitError):
    """The URL builder did not produce a usable URL at dispatch time."""

    def __init__(self, message: str = "bad URL") -> None:
        super().__init__(message)


class SessionInvalidatedError(NetKitError):
    """A task was requested from a session that has been invalidated."""


class ControlGateTimeoutError(NetKitError):
    """An endpoint control gate did not resume the request in time."""


class NoResponseError(NetKitError):
    """The transport finished without a response and without an error."""


class MockNotFoundError(NetKitError):
    """No substitute response is stored for a mock key."""


class MimeConversionError(NetKitError):
    """Base for body encode/decode failures."""


class JSONMimeConverterError(MimeConversionError):
    """JSON body could not be produced or parsed."""


class ImageMimeConverterError(MimeConversionError):
    """Image body could not be produced or parsed."""


class MultipartMimeConverterError(MimeConversionError):
    """Multipart body could not be built or parsed."""


class HTTPIssueError(NetKitError):
    """Raised by Result.unwrap() when the exchange ended with a non-success status."""

    def __init__(self, issue: "Issue") -> None:
        self.issue = issue
        status = issue.response.status_code
        message = f"http status {status}"
        if issue.reason:
            message = f"{message}: {issue.reason}"
        super().__init__(message)
