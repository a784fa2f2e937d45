"""Transport session implemented with httpx.AsyncClient (injected where Session is needed)."""
from __future__ import annotations

import asyncio
import itertools
import os
import threading
from pathlib import Path
from typing import AsyncIterator

import httpx
from loguru import logger

from netkit.domain.errors import RequestCancelledError, SessionInvalidatedError
from netkit.ports.session import SessionTask, TaskState, TransportCompletion

UPLOAD_CHUNK_SIZE = 64 * 1024

_task_ids = itertools.count(1)


async def _file_chunks(path: Path) -> AsyncIterator[bytes]:
    handle = await asyncio.to_thread(open, path, "rb")
    try:
        while True:
            chunk = await asyncio.to_thread(handle.read, UPLOAD_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        handle.close()


def _remove_upload_file(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("upload body {} could not be removed: {}", path, exc)


class HttpxSessionTask:
    """One client.send() call, started by resume() on the session's event loop."""

    def __init__(
        self,
        session: "HttpxSession",
        request: httpx.Request,
        completion: TransportCompletion,
        upload_path: Path | None = None,
    ) -> None:
        self._session = session
        self._request = request
        self._completion = completion
        self._upload_path = upload_path
        self._task_id = next(_task_ids)
        self._state = TaskState.SUSPENDED
        self._lock = threading.Lock()
        self._completed = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._aio_task: asyncio.Task[None] | None = None

    @property
    def task_id(self) -> int:
        return self._task_id

    @property
    def state(self) -> TaskState:
        with self._lock:
            return self._state

    def resume(self) -> None:
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._state is not TaskState.SUSPENDED:
                return
            self._state = TaskState.RUNNING
            self._loop = loop
            self._aio_task = loop.create_task(self._run())
            self._aio_task.add_done_callback(self._on_done)

    def cancel(self) -> None:
        with self._lock:
            state = self._state
            if state in (TaskState.CANCELING, TaskState.COMPLETED):
                return
            if state is TaskState.RUNNING:
                self._state = TaskState.CANCELING
                loop, aio_task = self._loop, self._aio_task
            else:
                self._state = TaskState.COMPLETED
                loop, aio_task = None, None
        if loop is not None and aio_task is not None:
            loop.call_soon_threadsafe(aio_task.cancel)
            return
        self._complete(None, None, RequestCancelledError())
        self._cleanup()

    def _complete(
        self,
        data: bytes | None,
        response: httpx.Response | None,
        error: BaseException | None,
    ) -> None:
        with self._lock:
            if self._completed:
                return
            self._completed = True
        self._completion(data, response, error)

    def _cleanup(self) -> None:
        if self._upload_path is not None:
            _remove_upload_file(self._upload_path)
        self._session._discard(self)

    def _wire_request(self) -> httpx.Request:
        if self._upload_path is None:
            return self._request
        headers = httpx.Headers(self._request.headers)
        headers["Content-Length"] = str(self._upload_path.stat().st_size)
        return httpx.Request(
            self._request.method,
            self._request.url,
            headers=headers,
            content=_file_chunks(self._upload_path),
            extensions=self._request.extensions,
        )

    async def _run(self) -> None:
        try:
            response = await self._session.client.send(self._wire_request())
            data = response.content
        except Exception as exc:
            self._complete(None, None, exc)
            return
        self._complete(data, response, None)

    def _on_done(self, aio_task: asyncio.Task[None]) -> None:
        # Also covers a cancel that lands before _run takes its first step.
        if aio_task.cancelled():
            self._complete(None, None, RequestCancelledError())
        with self._lock:
            self._state = TaskState.COMPLETED
        self._cleanup()


class HttpxSession:
    """Session implementation using httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient, *, description: str | None = None) -> None:
        self._client = client
        self._description = description
        self._lock = threading.Lock()
        self._tasks: set[HttpxSessionTask] = set()
        self._invalidated = False
        self._close_when_idle = False
        self._closing: asyncio.Task[None] | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    @property
    def description(self) -> str | None:
        return self._description

    @property
    def invalidated(self) -> bool:
        with self._lock:
            return self._invalidated

    def data_task(self, request: httpx.Request, completion: TransportCompletion) -> SessionTask:
        return self._new_task(request, completion, None)

    def upload_task(
        self,
        request: httpx.Request,
        file_path: Path,
        completion: TransportCompletion,
    ) -> SessionTask:
        return self._new_task(request, completion, Path(file_path))

    def _new_task(
        self,
        request: httpx.Request,
        completion: TransportCompletion,
        upload_path: Path | None,
    ) -> HttpxSessionTask:
        with self._lock:
            if self._invalidated:
                raise SessionInvalidatedError(f"session {self._description or id(self)} is invalidated")
            if "timeout" not in request.extensions:
                request.extensions["timeout"] = self._client.timeout.as_dict()
            task = HttpxSessionTask(self, request, completion, upload_path)
            self._tasks.add(task)
        return task

    def _discard(self, task: HttpxSessionTask) -> None:
        with self._lock:
            self._tasks.discard(task)
            close_now = self._close_when_idle and not self._tasks
        if close_now:
            self._schedule_close(task._loop)

    def _schedule_close(self, loop: asyncio.AbstractEventLoop | None) -> None:
        if loop is None or loop.is_closed():
            return

        def _start_close() -> None:
            if self._closing is None:
                self._closing = loop.create_task(self._client.aclose())

        loop.call_soon_threadsafe(_start_close)

    def finish_tasks_and_invalidate(self) -> None:
        with self._lock:
            self._invalidated = True
            self._close_when_idle = True
            idle = not self._tasks
        if idle:
            try:
                self._schedule_close(asyncio.get_running_loop())
            except RuntimeError:
                logger.debug("session {} invalidated outside an event loop; call aclose()", self._description)

    def invalidate_and_cancel(self) -> None:
        with self._lock:
            self._invalidated = True
            self._close_when_idle = True
            tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if not tasks:
            try:
                self._schedule_close(asyncio.get_running_loop())
            except RuntimeError:
                logger.debug("session {} invalidated outside an event loop; call aclose()", self._description)

    async def aclose(self) -> None:
        with self._lock:
            self._invalidated = True
            tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"HttpxSession({self._description!r})"
