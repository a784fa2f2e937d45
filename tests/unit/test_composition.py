from __future__ import annotations

import pytest

from netkit.composition import (
    close_default_dependencies,
    create_netkit_dependencies,
    get_default_dependencies,
    set_default_dependencies,
)
from netkit.config.settings import Settings
from netkit.constants import SHARED_SESSION_DESCRIPTION
from netkit.infrastructure.http.httpx_session import HttpxSession
from netkit.infrastructure.notifications.in_memory_notification_center import NotificationCenter
from netkit.ports.notification_publisher import NotificationPublisher
from tests.conftest import FakeSession, make_settings


def test_settings_read_netkit_environment(monkeypatch):
    monkeypatch.setenv("NETKIT_USER_AGENT", "EnvAgent/1.0")
    monkeypatch.setenv("NETKIT_CONTROL_GATE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("NETKIT_NOTIFICATIONS_ENABLED", "true")

    settings = Settings(_env_file=None)

    assert settings.user_agent == "EnvAgent/1.0"
    assert settings.control_gate_timeout_seconds == 2.5
    assert settings.notifications_enabled is True
    assert settings.mock_backend == "none"


def test_settings_defaults():
    settings = make_settings()

    assert settings.control_gate_timeout_seconds is None
    assert settings.default_timeout_seconds == 60.0
    assert settings.follow_redirects is True


@pytest.mark.asyncio
async def test_shared_session_is_created_lazily_and_closed():
    deps = create_netkit_dependencies(make_settings(debug_logging=True))

    session = deps.shared_session

    assert isinstance(session, HttpxSession)
    assert session.description == SHARED_SESSION_DESCRIPTION
    assert deps.shared_session is session

    await deps.close()
    assert session.invalidated is True


@pytest.mark.asyncio
async def test_close_invalidates_endpoint_sessions():
    deps = create_netkit_dependencies(make_settings(), shared_session=FakeSession())
    endpoint_session = deps.session_registry.get_or_create("api", FakeSession)

    await deps.close()

    assert endpoint_session.invalidated is True


@pytest.mark.asyncio
async def test_default_dependencies_can_be_replaced_and_closed():
    custom = create_netkit_dependencies(make_settings(), shared_session=FakeSession())
    set_default_dependencies(custom)
    try:
        assert get_default_dependencies() is custom
    finally:
        await close_default_dependencies()
    set_default_dependencies(None)


def test_notification_center_observers():
    center = NotificationCenter(enabled=True)
    seen: list[tuple[str, object]] = []

    def explode(name: str, request: object) -> None:
        raise RuntimeError("observer bug")

    token = center.add_observer("started", lambda name, request: seen.append((name, request)))
    center.add_observer("started", explode)
    center.publish("started", "req")
    center.remove_observer(token)
    center.publish("started", "req")
    center.enabled = False
    center.publish("started", "req")

    assert seen == [("started", "req")]
    assert isinstance(center, NotificationPublisher)
