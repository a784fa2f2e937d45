"""In-process notification center for request started / ended events."""
from __future__ import annotations

import itertools
import threading
from typing import Any, Callable

from loguru import logger

Observer = Callable[[str, Any], None]


class NotificationCenter:
    """Delivers `observer(name, request)` synchronously on the publishing thread.

    Publishing is a no-op while disabled, so observers can be registered
    ahead of time and switched on later.
    """

    def __init__(self, *, enabled: bool = False) -> None:
        self._enabled = enabled
        self._lock = threading.Lock()
        self._tokens = itertools.count(1)
        self._observers: dict[int, tuple[str, Observer]] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    def add_observer(self, name: str, callback: Observer) -> int:
        with self._lock:
            token = next(self._tokens)
            self._observers[token] = (name, callback)
        return token

    def remove_observer(self, token: int) -> None:
        with self._lock:
            self._observers.pop(token, None)

    def publish(self, name: str, request: Any) -> None:
        if not self._enabled:
            return
        with self._lock:
            callbacks = [callback for observed, callback in self._observers.values() if observed == name]
        for callback in callbacks:
            try:
                callback(name, request)
            except Exception as exc:
                logger.warning("observer for {} failed: {}", name, exc)
