"""Port: request lifecycle notifications (started / ended)."""
from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class NotificationPublisher(Protocol):
    """Interface for publishing request notifications."""

    @property
    def enabled(self) -> bool: ...

    def publish(self, name: str, request: Any) -> None: ...

    def add_observer(self, name: str, callback: Callable[[str, Any], None]) -> int: ...

    def remove_observer(self, token: int) -> None: ...
