"""Endpoint session caches.

Sessions created by an endpoint's SessionProvider are cached per endpoint
identifier, either process-wide or in a caller-supplied SessionCache whose
lifetime matches a screen or view. Lookup-or-create is one critical section.
"""
from __future__ import annotations

import threading
from typing import Any, Callable

from loguru import logger

from netkit.core import SERVICE_NAME
from netkit.ports.session import Session

SessionFactory = Callable[[], Session]


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class SessionCache:
    """Identifier -> Session map guarded by its own lock."""

    def __init__(self, name: str = "default", *, finish_tasks_on_close: bool = False) -> None:
        self.name = name
        self.finish_tasks_on_close = finish_tasks_on_close
        self._lock = threading.RLock()
        self._sessions: dict[str, Session] = {}

    def get(self, identifier: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(identifier)
            if session is not None and session.invalidated:
                return None
            return session

    def get_or_create(self, identifier: str, factory: SessionFactory) -> Session:
        with self._lock:
            session = self._sessions.get(identifier)
            if session is not None and not session.invalidated:
                return session
            session = factory()
            self._sessions[identifier] = session
        _log("session_created", cache=self.name, identifier=identifier)
        return session

    def remove(self, identifier: str) -> Session | None:
        with self._lock:
            return self._sessions.pop(identifier, None)

    def identifiers(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def close(self) -> None:
        """Invalidate every cached session and empty the cache."""
        with self._lock:
            sessions = list(self._sessions.items())
            self._sessions.clear()
        for identifier, session in sessions:
            try:
                if self.finish_tasks_on_close:
                    session.finish_tasks_and_invalidate()
                else:
                    session.invalidate_and_cancel()
            except Exception as exc:
                logger.warning("session {} invalidation failed: {}", identifier, exc)
        _log("session_cache_closed", cache=self.name, sessions=len(sessions))

    def __enter__(self) -> "SessionCache":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionRegistry:
    """Routes session lookups to the process-wide cache or a scoped one."""

    def __init__(self) -> None:
        self._global = SessionCache("global")

    @property
    def global_cache(self) -> SessionCache:
        return self._global

    def get_or_create(
        self,
        identifier: str,
        factory: SessionFactory,
        *,
        scope: SessionCache | None = None,
    ) -> Session:
        cache = scope if scope is not None else self._global
        return cache.get_or_create(identifier, factory)

    def get(self, identifier: str, *, scope: SessionCache | None = None) -> Session | None:
        cache = scope if scope is not None else self._global
        return cache.get(identifier)

    def invalidate(self, identifier: str, *, scope: SessionCache | None = None) -> None:
        cache = scope if scope is not None else self._global
        session = cache.remove(identifier)
        if session is not None:
            session.invalidate_and_cancel()

    def close(self) -> None:
        self._global.close()
