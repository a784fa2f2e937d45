"""NetKit: HTTP requests customized through endpoint hooks."""
from netkit.application.background import BackgroundTransferRegistry
from netkit.application.request import Request
from netkit.application.session_registry import SessionCache, SessionRegistry
from netkit.composition import (
    NetKitDependencies,
    close_default_dependencies,
    create_netkit_dependencies,
    get_default_dependencies,
    set_default_dependencies,
)
from netkit.config.settings import Settings
from netkit.constants import REQUEST_DID_END, REQUEST_DID_START, HTTPMethod, RequestState
from netkit.domain.errors import (
    BadURLError,
    ControlGateTimeoutError,
    HTTPIssueError,
    ImageMimeConverterError,
    JSONMimeConverterError,
    MimeConversionError,
    MockNotFoundError,
    MultipartMimeConverterError,
    NetKitError,
    NoResponseError,
    RequestAlreadyStartedError,
    RequestCancelledError,
    SessionInvalidatedError,
)
from netkit.domain.mime.image_converter import ImageMimeConverter
from netkit.domain.mime.json_converter import JSONMimeConverter
from netkit.domain.mime.multipart_converter import MultipartMimeConverter, MultipartMimeType, MultipartPart
from netkit.domain.mime.registry import ContentTypeRegistry
from netkit.domain.models import MockRecord, Outcome, Pending, Ready
from netkit.domain.result import Failure, Issue, Result, Success
from netkit.domain.url_builder import URLBuilder
from netkit.infrastructure.http.factory import create_session
from netkit.infrastructure.http.httpx_session import HttpxSession
from netkit.infrastructure.mock.base_url_mock_manager import BaseURLMockManager
from netkit.infrastructure.mock.directory_mock_manager import DirectoryMockManager
from netkit.infrastructure.mock.factory import create_mock_manager
from netkit.infrastructure.mock.in_memory_mock_manager import InMemoryMockManager
from netkit.infrastructure.notifications.in_memory_notification_center import NotificationCenter

__all__ = [
    "BackgroundTransferRegistry",
    "BadURLError",
    "BaseURLMockManager",
    "ContentTypeRegistry",
    "ControlGateTimeoutError",
    "DirectoryMockManager",
    "Failure",
    "HTTPIssueError",
    "HTTPMethod",
    "HttpxSession",
    "ImageMimeConverter",
    "ImageMimeConverterError",
    "InMemoryMockManager",
    "Issue",
    "JSONMimeConverter",
    "JSONMimeConverterError",
    "MimeConversionError",
    "MockNotFoundError",
    "MockRecord",
    "MultipartMimeConverter",
    "MultipartMimeConverterError",
    "MultipartMimeType",
    "MultipartPart",
    "NetKitDependencies",
    "NetKitError",
    "NoResponseError",
    "NotificationCenter",
    "Outcome",
    "Pending",
    "REQUEST_DID_END",
    "REQUEST_DID_START",
    "Ready",
    "Request",
    "RequestAlreadyStartedError",
    "RequestCancelledError",
    "RequestState",
    "Result",
    "SessionCache",
    "SessionInvalidatedError",
    "SessionRegistry",
    "Settings",
    "Success",
    "URLBuilder",
    "close_default_dependencies",
    "create_mock_manager",
    "create_netkit_dependencies",
    "create_session",
    "get_default_dependencies",
    "set_default_dependencies",
]
