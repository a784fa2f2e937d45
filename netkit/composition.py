"""NetKit composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle. Requests take a NetKitDependencies instance, or
fall back to the process-wide default built from the environment.
"""
from __future__ import annotations

import threading
from typing import Any

from loguru import logger

from netkit.application.background import BackgroundTransferRegistry
from netkit.application.session_registry import SessionRegistry
from netkit.config.settings import Settings
from netkit.constants import SHARED_SESSION_DESCRIPTION
from netkit.core import SERVICE_NAME
from netkit.domain.mime.registry import ContentTypeRegistry, default_content_type_registry
from netkit.infrastructure.http.factory import create_session
from netkit.infrastructure.mock.factory import create_mock_manager
from netkit.infrastructure.notifications.in_memory_notification_center import NotificationCenter
from netkit.ports.endpoint import MockManager
from netkit.ports.notification_publisher import NotificationPublisher
from netkit.ports.session import Session


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class NetKitDependencies:
    """Holds wired NetKit dependencies and their lifecycle."""

    def __init__(self, *, settings: Settings, shared_session: Session | None = None) -> None:
        self._settings = settings
        self._lock = threading.Lock()
        self._shared_session = shared_session
        self._session_registry = SessionRegistry()
        self._notifications = NotificationCenter(enabled=settings.notifications_enabled)
        self._background_registry = BackgroundTransferRegistry()
        self._content_types = default_content_type_registry()
        self._mock_manager = create_mock_manager(settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session_registry(self) -> SessionRegistry:
        return self._session_registry

    @property
    def notifications(self) -> NotificationPublisher:
        return self._notifications

    @property
    def background_registry(self) -> BackgroundTransferRegistry:
        return self._background_registry

    @property
    def content_types(self) -> ContentTypeRegistry:
        return self._content_types

    @property
    def mock_manager(self) -> MockManager | None:
        return self._mock_manager

    @property
    def shared_session(self) -> Session:
        with self._lock:
            if self._shared_session is None or self._shared_session.invalidated:
                self._shared_session = create_session(self._settings, description=SHARED_SESSION_DESCRIPTION)
                _log("shared_session_created")
            return self._shared_session

    async def close(self) -> None:
        try:
            self._session_registry.close()
        except Exception as exc:
            logger.warning("session registry close failed: {}", exc)

        with self._lock:
            session, self._shared_session = self._shared_session, None
        if session is not None:
            try:
                aclose = getattr(session, "aclose", None)
                if aclose is not None:
                    await aclose()
                else:
                    session.invalidate_and_cancel()
            except Exception as exc:
                logger.warning("shared session close failed: {}", exc)

        aclose = getattr(self._mock_manager, "aclose", None)
        if aclose is not None:
            try:
                await aclose()
            except Exception as exc:
                logger.warning("mock manager close failed: {}", exc)


def create_netkit_dependencies(
    settings: Settings | None = None,
    *,
    shared_session: Session | None = None,
) -> NetKitDependencies:
    return NetKitDependencies(settings=settings or Settings(), shared_session=shared_session)


_default_lock = threading.Lock()
_default_dependencies: NetKitDependencies | None = None


def get_default_dependencies() -> NetKitDependencies:
    global _default_dependencies
    with _default_lock:
        if _default_dependencies is None:
            _default_dependencies = create_netkit_dependencies()
        return _default_dependencies


def set_default_dependencies(dependencies: NetKitDependencies | None) -> None:
    global _default_dependencies
    with _default_lock:
        _default_dependencies = dependencies


async def close_default_dependencies() -> None:
    global _default_dependencies
    with _default_lock:
        dependencies, _default_dependencies = _default_dependencies, None
    if dependencies is not None:
        await dependencies.close()
