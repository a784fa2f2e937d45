"""Session factory: builds a transport Session from settings (no provider logic in composition)."""
from __future__ import annotations

import httpx

from netkit.config.settings import Settings
from netkit.infrastructure.http.httpx_session import HttpxSession
from netkit.ports.session import Session


def create_session(
    settings: Settings,
    *,
    description: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Session:
    """Build a session. A per-request timeout on the wire request overrides the default here."""
    timeout = httpx.Timeout(settings.default_timeout_seconds, connect=settings.connect_timeout_seconds)
    async_client = httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=settings.follow_redirects,
        transport=transport,
    )
    return HttpxSession(async_client, description=description)
