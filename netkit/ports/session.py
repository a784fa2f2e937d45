"""Transport session port: contract for creating and driving network tasks.

The request lifecycle depends on this port; infrastructure (httpx)
implements it. Sessions are long-lived and may be shared by many requests.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Protocol, runtime_checkable

import httpx

# completion(data, response, error); may be invoked from any thread.
TransportCompletion = Callable[[bytes | None, httpx.Response | None, BaseException | None], None]


class TaskState(str, Enum):
    SUSPENDED = "SUSPENDED"
    RUNNING = "RUNNING"
    CANCELING = "CANCELING"
    COMPLETED = "COMPLETED"


@runtime_checkable
class SessionTask(Protocol):
    """Handle for one in-flight transport call."""

    @property
    def task_id(self) -> int: ...

    @property
    def state(self) -> TaskState: ...

    def resume(self) -> None:
        """Start the call. Must be invoked on the event loop that owns the session."""
        ...

    def cancel(self) -> None:
        """Request cancellation; safe from any thread. Completion still fires once."""
        ...


@runtime_checkable
class Session(Protocol):
    """Port: create data and upload tasks. Implementations live in infrastructure."""

    @property
    def description(self) -> str | None: ...

    @property
    def invalidated(self) -> bool: ...

    def data_task(self, request: httpx.Request, completion: TransportCompletion) -> SessionTask:
        """Create a suspended task; raise SessionInvalidatedError if the session is invalid."""
        ...

    def upload_task(
        self,
        request: httpx.Request,
        file_path: Path,
        completion: TransportCompletion,
    ) -> SessionTask:
        """Create a suspended task that sends `file_path` as the body and deletes it afterwards."""
        ...

    def finish_tasks_and_invalidate(self) -> None:
        """Refuse new tasks, let outstanding ones finish, then release resources."""
        ...

    def invalidate_and_cancel(self) -> None:
        """Refuse new tasks and cancel outstanding ones."""
        ...
