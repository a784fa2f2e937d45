"""Registry of endpoints eligible to resume background transfers."""
from __future__ import annotations

import threading
from typing import Any


class BackgroundTransferRegistry:
    """Maps a background session identifier to the endpoint that owns it."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._endpoints: dict[str, Any] = {}

    def register(self, session_identifier: str, endpoint: Any) -> None:
        with self._lock:
            self._endpoints[session_identifier] = endpoint

    def unregister(self, session_identifier: str) -> None:
        with self._lock:
            self._endpoints.pop(session_identifier, None)

    def endpoint_for(self, session_identifier: str) -> Any | None:
        with self._lock:
            return self._endpoints.get(session_identifier)

    def identifiers(self) -> list[str]:
        with self._lock:
            return sorted(self._endpoints)
