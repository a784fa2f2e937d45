from __future__ import annotations

import asyncio
import itertools
from pathlib import Path
from typing import Any

import httpx
import pytest

from netkit.composition import NetKitDependencies, create_netkit_dependencies
from netkit.config.settings import Settings
from netkit.domain.errors import SessionInvalidatedError
from netkit.ports.session import TaskState, TransportCompletion

_fake_task_ids = itertools.count(1)


class FakeTask:
    """Implements SessionTask; the owning FakeSession decides when it completes."""

    def __init__(
        self,
        session: "FakeSession",
        request: httpx.Request,
        completion: TransportCompletion,
        upload_path: Path | None = None,
    ) -> None:
        self.session = session
        self.request = request
        self.upload_path = upload_path
        self.upload_body: bytes | None = None
        self.cancel_calls = 0
        self._completion = completion
        self._task_id = next(_fake_task_ids)
        self._state = TaskState.SUSPENDED

    @property
    def task_id(self) -> int:
        return self._task_id

    @property
    def state(self) -> TaskState:
        return self._state

    def resume(self) -> None:
        self._state = TaskState.RUNNING
        self.session.network_calls += 1
        if self.upload_path is not None:
            self.upload_body = self.upload_path.read_bytes()
            self.upload_path.unlink()
        if self.session.auto_complete:
            self.complete_with_reply()

    def cancel(self) -> None:
        # Like a real transport, cancellation only takes effect when the call unwinds.
        self.cancel_calls += 1
        if self._state is TaskState.RUNNING:
            self._state = TaskState.CANCELING

    def complete(
        self,
        data: bytes | None = None,
        response: httpx.Response | None = None,
        error: BaseException | None = None,
    ) -> None:
        self._state = TaskState.COMPLETED
        self._completion(data, response, error)

    def complete_with_reply(self) -> None:
        status, content, headers, error = self.session.reply
        if error is not None:
            self.complete(None, None, error)
            return
        response = httpx.Response(status, headers=headers, content=content, request=self.request)
        self.complete(content, response, None)


class FakeSession:
    """Implements Session for tests; counts network calls instead of performing them."""

    def __init__(self, description: str | None = "fake session", *, auto_complete: bool = True) -> None:
        self._description = description
        self._invalidated = False
        self.auto_complete = auto_complete
        self.network_calls = 0
        self.tasks: list[FakeTask] = []
        self.reply: tuple[int, bytes, dict[str, str], BaseException | None] = (200, b"", {}, None)

    def respond(
        self,
        status: int = 200,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> "FakeSession":
        self.reply = (status, content, headers or {}, None)
        return self

    def fail(self, error: BaseException) -> "FakeSession":
        self.reply = (0, b"", {}, error)
        return self

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def invalidated(self) -> bool:
        return self._invalidated

    def data_task(self, request: httpx.Request, completion: TransportCompletion) -> FakeTask:
        return self._new_task(request, completion, None)

    def upload_task(self, request: httpx.Request, file_path: Path, completion: TransportCompletion) -> FakeTask:
        return self._new_task(request, completion, Path(file_path))

    def _new_task(
        self,
        request: httpx.Request,
        completion: TransportCompletion,
        upload_path: Path | None,
    ) -> FakeTask:
        if self._invalidated:
            raise SessionInvalidatedError("fake session invalidated")
        task = FakeTask(self, request, completion, upload_path)
        self.tasks.append(task)
        return task

    def finish_tasks_and_invalidate(self) -> None:
        self._invalidated = True

    def invalidate_and_cancel(self) -> None:
        self._invalidated = True
        for task in self.tasks:
            task.cancel()


class CompletionRecorder:
    """Collects completion triples delivered by Request.start()."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any, Any]] = []
        self._event = asyncio.Event()

    def __call__(self, value: Any, response: Any, error: Any) -> None:
        self.calls.append((value, response, error))
        self._event.set()

    async def wait(self, timeout: float = 2.0) -> tuple[Any, Any, Any]:
        await asyncio.wait_for(self._event.wait(), timeout)
        return self.calls[0]


def make_settings(**overrides: Any) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture()
def deps(fake_session: FakeSession) -> NetKitDependencies:
    return create_netkit_dependencies(make_settings(), shared_session=fake_session)


async def wait_until(predicate: Any, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)
