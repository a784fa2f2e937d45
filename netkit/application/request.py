"""Request lifecycle.

A Request is configured by the caller, optionally customized by an endpoint,
and started exactly once. Starting runs a driver coroutine on an asyncio
event loop that walks the hook pipeline in a fixed order:

    mock check -> session resolution -> configure_request -> control gate
    -> wire request build -> configure_url_request -> dispatch
    -> arrival -> decode -> mock recording -> parse_response -> completion

Any hook may raise; the error short-circuits straight to completion. The
completion is delivered exactly once, on the caller's event loop or on an
executor, and never on the calling stack of `start`.
"""
from __future__ import annotations

import asyncio
import functools
import inspect
import itertools
import os
import tempfile
import threading
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Callable, Mapping

import httpx
from loguru import logger

from netkit.application.endpoint_hooks import EndpointHooks
from netkit.application.session_registry import SessionCache
from netkit.composition import NetKitDependencies, get_default_dependencies
from netkit.constants import (
    DEFAULT_SUCCESS_CODES,
    REQUEST_DID_END,
    REQUEST_DID_START,
    SHARED_SESSION_DESCRIPTION,
    TERMINAL_STATES,
    HTTPMethod,
    RequestState,
)
from netkit.core import SERVICE_NAME
from netkit.domain.errors import (
    BadURLError,
    ControlGateTimeoutError,
    MimeConversionError,
    NoResponseError,
    RequestAlreadyStartedError,
    RequestCancelledError,
    SessionInvalidatedError,
)
from netkit.domain.models import Outcome, Pending, Ready, ResponseCallback
from netkit.domain.result import Failure, Issue, Result, Success
from netkit.domain.url_builder import URLBuilder
from netkit.ports.endpoint import MockManager, MockRecorder
from netkit.ports.mime_converter import MimeConverter
from netkit.ports.session import Session, SessionTask

BODY_PREVIEW_BYTES = 512

_uid_lock = threading.Lock()
_uid_counter = itertools.count(1)

# Started requests that have not delivered their completion yet.
_in_flight: set["Request"] = set()
_in_flight_lock = threading.Lock()

_background_tasks: set[asyncio.Task[Any]] = set()


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def _next_uid() -> int:
    with _uid_lock:
        return next(_uid_counter)


def in_flight_count() -> int:
    with _in_flight_lock:
        return len(_in_flight)


def in_flight_requests() -> list["Request"]:
    with _in_flight_lock:
        return list(_in_flight)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _set_result_if_pending(future: asyncio.Future[Any], value: Any) -> None:
    if not future.done():
        future.set_result(value)


def _resolve_continuation(future: asyncio.Future[Outcome], outcome: Outcome, uid: int) -> None:
    if future.done():
        logger.warning("request #{} continuation called more than once; ignoring", uid)
        return
    future.set_result(outcome)


def _expected(value: Any, expect: type | None) -> Any:
    if expect is None or isinstance(value, expect):
        return value
    return None


def _preview(data: bytes | None) -> str:
    if not data:
        return "<empty>"
    head = data[:BODY_PREVIEW_BYTES].decode("utf-8", errors="replace")
    if len(data) > BODY_PREVIEW_BYTES:
        head += f"... ({len(data)} bytes)"
    return head


def _deliver_on_loop(callback: Callable[[Any], None], payload: Any, on_finished: Callable[[], None] | None) -> None:
    try:
        callback(payload)
    finally:
        if on_finished is not None:
            on_finished()


def _after_executor_delivery(uid: int, on_finished: Callable[[], None] | None, future: Future[Any]) -> None:
    exc = future.exception()
    if exc is not None:
        logger.opt(exception=exc).warning("completion for request #{} raised: {}", uid, exc)
    if on_finished is not None:
        on_finished()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class Request:
    """One HTTP exchange, customizable through an endpoint's hooks."""

    def __init__(
        self,
        endpoint: Any | None = None,
        session: Session | None = None,
        method: HTTPMethod | str = HTTPMethod.GET,
        flags: Mapping[str, Any] | None = None,
        *,
        dependencies: NetKitDependencies | None = None,
    ) -> None:
        self._deps = dependencies or get_default_dependencies()
        settings = self._deps.settings

        self.uid = _next_uid()
        self.method = method if isinstance(method, HTTPMethod) else HTTPMethod(method.upper())
        self.flags: dict[str, Any] = dict(flags or {})
        self.headers = httpx.Headers()
        self.url_builder = URLBuilder()
        self.body: MimeConverter | None = None
        self.timeout: float | None = None
        # Not used by the lifecycle; endpoints that resubmit a request count attempts here.
        self.retries = 0
        self.success_codes: range | frozenset[int] = DEFAULT_SUCCESS_CODES
        self.mock_key: str | None = None
        self.mock_enabled: bool | None = None
        self.session_cache: SessionCache | None = None
        self.quiet = not settings.debug_logging
        self.log_raw_response_data = settings.log_raw_response_data
        self.strict_decoding = False
        self.control_gate_timeout: float | None = settings.control_gate_timeout_seconds

        self._endpoint = endpoint
        self._hooks = EndpointHooks.resolve(endpoint)
        self._session = session
        self._provided_session = False

        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._state = RequestState.IDLE
        self._started = False
        self._executing = False
        self._finished = False
        self._task: SessionTask | None = None
        self._gate: asyncio.Future[None] | None = None
        self._resumed = False
        self._gate_finished: Callable[[], None] | None = None

        self._upload = False
        self._on_task: Callable[[SessionTask], None] | None = None
        self._wants_reason = False
        self._render: Callable[[Outcome, str | None], Any] | None = None
        self._callback: Callable[[Any], None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._executor: Executor | None = None
        self._driver: asyncio.Task[None] | Future[None] | None = None
        self._task_handover: Future[Any] | None = None

    # -- read-only state ---------------------------------------------------

    @property
    def endpoint(self) -> Any | None:
        return self._endpoint

    @property
    def hooks(self) -> EndpointHooks:
        return self._hooks

    @property
    def dependencies(self) -> NetKitDependencies:
        return self._deps

    @property
    def session(self) -> Session:
        session = self._session
        return session if session is not None else self._deps.shared_session

    @property
    def session_description(self) -> str:
        if self._session is None:
            return SHARED_SESSION_DESCRIPTION
        if self._provided_session and self._hooks.identifier:
            return self._hooks.identifier
        return self._session.description or SHARED_SESSION_DESCRIPTION

    @property
    def mock_manager(self) -> MockManager | None:
        """The endpoint's mock manager, else the one configured in settings."""
        manager = self._hooks.mock_manager
        return manager if manager is not None else self._deps.mock_manager

    @property
    def state(self) -> RequestState:
        with self._lock:
            return self._state

    @property
    def started(self) -> bool:
        with self._lock:
            return self._started

    @property
    def executing(self) -> bool:
        with self._lock:
            return self._executing

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    # -- URL and header helpers --------------------------------------------

    @property
    def url(self) -> httpx.URL | None:
        return self.url_builder.url

    @url.setter
    def url(self, value: httpx.URL | str | None) -> None:
        self.url_builder.url = value

    @property
    def url_string(self) -> str | None:
        return self.url_builder.url_string

    @url_string.setter
    def url_string(self, value: str | None) -> None:
        self.url_builder.url_string = value

    def build_url(self, fn: Callable[[URLBuilder], None]) -> None:
        fn(self.url_builder)

    def add_headers(self, headers: Mapping[str, str]) -> None:
        self.headers.update(headers)

    # -- starting ----------------------------------------------------------

    def start(
        self,
        completion: ResponseCallback,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        executor: Executor | None = None,
        expect: type | None = None,
    ) -> None:
        """Run the request and call `completion(value, response, error)` once."""

        def render(outcome: Outcome, reason: str | None) -> tuple[Any, Any, Any]:
            return _expected(outcome.value, expect), outcome.response, outcome.error

        self._launch(render, lambda triple: completion(*triple), loop=loop, executor=executor)

    def begin(
        self,
        on_result: Callable[[Result[Any]], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        executor: Executor | None = None,
        expect: type | None = None,
    ) -> None:
        """Run the request and call `on_result` once with a classified Result."""
        self._launch(
            functools.partial(self._classify, expect=expect),
            on_result,
            loop=loop,
            executor=executor,
            wants_reason=True,
        )

    def start_upload(
        self,
        on_task: Callable[[SessionTask], None],
        completion: ResponseCallback | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        executor: Executor | None = None,
        expect: type | None = None,
    ) -> None:
        """Upload the body from a temporary file; `on_task` gets the transport task after dispatch."""

        def render(outcome: Outcome, reason: str | None) -> tuple[Any, Any, Any]:
            return _expected(outcome.value, expect), outcome.response, outcome.error

        def deliver(triple: tuple[Any, Any, Any]) -> None:
            if completion is not None:
                completion(*triple)

        self._launch(render, deliver, loop=loop, executor=executor, on_task=on_task)

    async def send(self, *, expect: type | None = None) -> Result[Any]:
        """Start the request on the running loop and wait for its Result."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Result[Any]] = loop.create_future()
        self.begin(functools.partial(_set_result_if_pending, future), loop=loop, expect=expect)
        try:
            return await future
        except asyncio.CancelledError:
            self.cancel()
            raise

    async def fetch(self, *, expect: type | None = None) -> Outcome:
        """Start the request on the running loop and wait for its final Outcome."""
        loop = asyncio.get_running_loop()
        future: asyncio.Future[Outcome] = loop.create_future()

        def render(outcome: Outcome, reason: str | None) -> Outcome:
            return outcome.replace(value=_expected(outcome.value, expect))

        self._launch(render, functools.partial(_set_result_if_pending, future), loop=loop, executor=None)
        try:
            return await future
        except asyncio.CancelledError:
            self.cancel()
            raise

    def cancel(self) -> None:
        """Safe from any thread. Has no effect once the completion was delivered."""
        with self._lock:
            if self._finished or self._cancelled.is_set():
                return
            self._cancelled.set()
            if self._state not in TERMINAL_STATES:
                self._state = RequestState.CANCELLED
            task = self._task
            gate = self._gate
        _log("request_cancelled", uid=self.uid)
        if task is not None:
            task.cancel()
        if gate is not None:
            # Wake a parked control gate; the pre-dispatch check reports the cancellation.
            gate.get_loop().call_soon_threadsafe(_set_result_if_pending, gate, None)

    def _launch(
        self,
        render: Callable[[Outcome, str | None], Any],
        callback: Callable[[Any], None],
        *,
        loop: asyncio.AbstractEventLoop | None,
        executor: Executor | None,
        on_task: Callable[[SessionTask], None] | None = None,
        wants_reason: bool = False,
    ) -> None:
        current = _running_loop()
        target = loop or current
        with self._lock:
            if self._started:
                raise RequestAlreadyStartedError(f"{self!r} was already started")
            if target is None:
                raise RuntimeError("Request.start() needs a running event loop or an explicit loop=")
            self._started = True
            self._executing = True
            self._render = render
            self._callback = callback
            self._loop = target
            self._executor = executor
            self._upload = on_task is not None
            self._on_task = on_task
            self._wants_reason = wants_reason
        with _in_flight_lock:
            _in_flight.add(self)

        _log(
            "request_started",
            uid=self.uid,
            method=self.method.value,
            url=self.url_string,
            endpoint=self._hooks.identifier,
        )
        if current is target:
            self._driver = target.create_task(self._drive())
        else:
            self._driver = asyncio.run_coroutine_threadsafe(self._drive(), target)

    # -- driver ------------------------------------------------------------

    async def _drive(self) -> None:
        reason: str | None = None
        try:
            outcome = await self._pipeline()
            reason = await self._issue_reason(outcome)
        except asyncio.CancelledError:
            self._cancelled.set()
            self._finish(Outcome(error=RequestCancelledError()), None)
            raise
        except Exception as exc:
            outcome = Outcome(error=exc)
        self._finish(outcome, reason)

    async def _pipeline(self) -> Outcome:
        hooks = self._hooks

        if self.cancelled:
            raise RequestCancelledError()
        mocked = await self._load_mock()
        if mocked is not None:
            return await self._process(mocked)

        self._set_state(RequestState.PREPARING)
        self._resolve_session()
        if hooks.configure_request is not None:
            await _maybe_await(hooks.configure_request(self, self.flags))

        self._set_state(RequestState.AWAITING_CONTROL)
        if hooks.control_point is not None:
            await self._await_control_gate()

        if self.cancelled:
            raise RequestCancelledError()
        self._set_state(RequestState.BUILDING)
        url_request, content = await self._build_url_request()
        if hooks.configure_url_request is not None:
            await _maybe_await(hooks.configure_url_request(url_request, self, self.flags))

        if self.cancelled:
            raise RequestCancelledError()
        arrived = await self._dispatch(url_request, content)
        return await self._process(arrived)

    def _set_state(self, state: RequestState) -> None:
        with self._lock:
            if self._state is not RequestState.CANCELLED:
                self._state = state

    async def _load_mock(self) -> Outcome | None:
        manager = self.mock_manager
        if manager is None or not self.mock_key:
            return None
        enabled = self.mock_enabled if self.mock_enabled is not None else manager.mocking_enabled(self)
        url = self.url
        if not enabled or url is None:
            return None
        record = await _maybe_await(manager.load_mock(self.mock_key, url))
        _log("mock_loaded", uid=self.uid, key=self.mock_key, url=str(url), mock=True)
        return Outcome(response=record.response, data=record.data, mock=True)

    def _resolve_session(self) -> None:
        hooks = self._hooks
        if self._session is not None or hooks.create_session is None:
            return
        self._session = self._deps.session_registry.get_or_create(
            hooks.identifier,
            lambda: hooks.create_session(self, self.flags),
            scope=self.session_cache,
        )
        self._provided_session = True

    async def _await_control_gate(self) -> None:
        loop = asyncio.get_running_loop()
        gate: asyncio.Future[None] = loop.create_future()
        with self._lock:
            self._gate = gate
            cancelled = self._cancelled.is_set()
        if cancelled:
            return

        def resume(on_finished: Callable[[], None] | None = None) -> None:
            with self._lock:
                if self._resumed:
                    return
                self._resumed = True
                finished = self._finished
                if not finished:
                    self._gate_finished = on_finished
            if finished:
                if on_finished is not None:
                    on_finished()
                return
            loop.call_soon_threadsafe(_set_result_if_pending, gate, None)

        await _maybe_await(self._hooks.control_point(self, resume))
        if self.control_gate_timeout is None:
            await gate
            return
        try:
            await asyncio.wait_for(gate, self.control_gate_timeout)
        except asyncio.TimeoutError as exc:
            raise ControlGateTimeoutError(
                f"control gate did not resume request #{self.uid} within {self.control_gate_timeout}s"
            ) from exc

    async def _build_url_request(self) -> tuple[httpx.Request, bytes | None]:
        url = self.url
        if url is None:
            raise BadURLError(f"request #{self.uid} has no valid URL ({self.url_builder!r})")

        headers = httpx.Headers(self.headers)
        user_agent = self._deps.settings.user_agent
        if user_agent and "user-agent" not in headers:
            headers["User-Agent"] = user_agent

        content: bytes | None = None
        if self.body is not None:
            content = await asyncio.to_thread(self.body.convert)
            headers["Content-Type"] = self.body.mime_type

        extensions: dict[str, Any] = {}
        if self.timeout is not None:
            extensions["timeout"] = httpx.Timeout(self.timeout).as_dict()

        if self._upload:
            url_request = httpx.Request(self.method.value, url, headers=headers, extensions=extensions)
        else:
            url_request = httpx.Request(
                self.method.value,
                url,
                headers=headers,
                content=content,
                extensions=extensions,
            )
        return url_request, content

    def _write_upload_body(self, content: bytes | None) -> Path:
        directory = self._deps.settings.upload_temp_dir or None
        fd, partial = tempfile.mkstemp(prefix=f"netkit-upload-{self.uid}-", suffix=".partial", dir=directory)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content or b"")
            path = Path(partial).with_suffix(".upload")
            os.replace(partial, path)
        except BaseException:
            try:
                os.unlink(partial)
            except FileNotFoundError:
                pass
            raise
        return path

    async def _dispatch(self, url_request: httpx.Request, content: bytes | None) -> Outcome:
        loop = asyncio.get_running_loop()
        arrival: asyncio.Future[tuple[Any, Any, Any]] = loop.create_future()

        def completion(
            data: bytes | None,
            response: httpx.Response | None,
            error: BaseException | None,
        ) -> None:
            loop.call_soon_threadsafe(_set_result_if_pending, arrival, (data, response, error))

        session = self.session
        upload_path: Path | None = None
        try:
            if self._upload:
                upload_path = await asyncio.to_thread(self._write_upload_body, content)
                task = session.upload_task(url_request, upload_path, completion)
            else:
                task = session.data_task(url_request, completion)
        except SessionInvalidatedError as exc:
            if upload_path is not None:
                upload_path.unlink(missing_ok=True)
            raise RequestCancelledError(f"session invalidated: {exc}") from exc
        except BaseException:
            if upload_path is not None:
                upload_path.unlink(missing_ok=True)
            raise

        with self._lock:
            self._task = task
            cancelled = self._cancelled.is_set()
        if cancelled:
            # Cancelling a suspended task completes it without starting the transport call.
            task.cancel()
            raise RequestCancelledError()
        self._set_state(RequestState.DISPATCHED)
        self._publish(REQUEST_DID_START)
        self._debug_request(url_request, content)
        task.resume()
        if self._on_task is not None:
            self._hand_over_task(self._on_task, task)

        data, response, error = await arrival
        self._publish(REQUEST_DID_END)
        return Outcome(response=response, error=error, data=data)

    # -- arrival -----------------------------------------------------------

    async def _process(self, outcome: Outcome) -> Outcome:
        if self.cancelled:
            return Outcome(error=RequestCancelledError(), mock=outcome.mock)
        if outcome.response is None and outcome.error is None:
            outcome = outcome.replace(error=NoResponseError(f"request #{self.uid} finished without a response"))

        self._set_state(RequestState.PARSING)
        if outcome.error is None and outcome.data:
            outcome = await self._decode(outcome)
        else:
            outcome = outcome.replace(value=outcome.data)
        self._debug_response(outcome)

        if not outcome.mock:
            self._record(outcome)
        if self._hooks.parse_response is not None:
            outcome = await self._parse(outcome)
        return outcome

    async def _decode(self, outcome: Outcome) -> Outcome:
        response = outcome.response
        content_type = response.headers.get("content-type") if response is not None else None
        try:
            value = await asyncio.to_thread(self._deps.content_types.decode, outcome.data, content_type)
        except MimeConversionError as exc:
            if self.strict_decoding:
                return outcome.replace(value=outcome.data, error=exc)
            logger.warning("request #{} body kept raw, {} decode failed: {}", self.uid, content_type, exc)
            return outcome.replace(value=outcome.data)
        return outcome.replace(value=value)

    def _record(self, outcome: Outcome) -> None:
        manager = self.mock_manager
        recorder = manager if isinstance(manager, MockRecorder) else None
        url = self.url
        if recorder is None or not self.mock_key or url is None:
            return
        if outcome.response is None or outcome.data is None or outcome.error is not None:
            return
        if not recorder.recording_enabled(self):
            return
        task = asyncio.get_running_loop().create_task(
            self._record_mock(recorder, self.mock_key, url, outcome.data, outcome.response)
        )
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)

    async def _record_mock(
        self,
        recorder: Any,
        key: str,
        url: httpx.URL,
        data: bytes,
        response: httpx.Response,
    ) -> None:
        try:
            await _maybe_await(recorder.record_mock(key, url, data, response))
        except Exception as exc:
            logger.warning("mock recording for {} failed: {}", key, exc)
            return
        _log("mock_recorded", uid=self.uid, key=key, url=str(url))

    async def _parse(self, outcome: Outcome) -> Outcome:
        loop = asyncio.get_running_loop()
        later: asyncio.Future[Outcome] = loop.create_future()

        def continuation(new_outcome: Outcome) -> None:
            loop.call_soon_threadsafe(_resolve_continuation, later, new_outcome, self.uid)

        try:
            decision = await _maybe_await(self._hooks.parse_response(self, outcome, continuation))
        except Exception as exc:
            return outcome.replace(value=None, error=exc)
        if isinstance(decision, Ready):
            return decision.outcome
        if isinstance(decision, Pending):
            return await later
        raise TypeError(f"parse_response must return Ready or Pending, not {type(decision).__name__}")

    async def _issue_reason(self, outcome: Outcome) -> str | None:
        hook = self._hooks.error_reason
        response = outcome.response
        if not self._wants_reason or hook is None or response is None:
            return None
        if response.status_code in self.success_codes:
            return None
        try:
            return await _maybe_await(hook(self, outcome.value, outcome.data, response))
        except Exception as exc:
            logger.warning("request #{} error reason extraction failed: {}", self.uid, exc)
            return None

    # -- completion --------------------------------------------------------

    def _classify(self, outcome: Outcome, reason: str | None, *, expect: type | None = None) -> Result[Any]:
        response = outcome.response
        if response is not None:
            if response.status_code in self.success_codes:
                return Success(_expected(outcome.value, expect), response)
            return Issue(response, outcome.value, reason)
        return Failure(outcome.error or NoResponseError(f"request #{self.uid} finished without a response"))

    def _finish(self, outcome: Outcome, reason: str | None) -> None:
        with self._lock:
            if self._finished:
                logger.warning("request #{} completion attempted twice; ignoring", self.uid)
                return
            self._finished = True
            self._executing = False
            if isinstance(outcome.error, RequestCancelledError):
                self._state = RequestState.CANCELLED
            elif self._state is not RequestState.CANCELLED:
                self._state = RequestState.COMPLETED
            on_finished, self._gate_finished = self._gate_finished, None
            render, callback = self._render, self._callback

        _log(
            "request_finished",
            uid=self.uid,
            status=outcome.status_code,
            error=type(outcome.error).__name__ if outcome.error is not None else None,
            mock=outcome.mock,
        )
        try:
            if render is not None and callback is not None:
                self._deliver(callback, render(outcome, reason), on_finished)
        finally:
            with _in_flight_lock:
                _in_flight.discard(self)

    def _deliver(
        self,
        callback: Callable[[Any], None],
        payload: Any,
        on_finished: Callable[[], None] | None,
    ) -> None:
        if self._executor is None:
            self._loop.call_soon_threadsafe(_deliver_on_loop, callback, payload, on_finished)
            return
        handed_over = self._task_handover
        if handed_over is None:
            self._submit(callback, payload, on_finished)
            return
        # The upload task handle reaches the caller before the completion does.
        handed_over.add_done_callback(lambda _: self._submit(callback, payload, on_finished))

    def _submit(
        self,
        callback: Callable[[Any], None],
        payload: Any,
        on_finished: Callable[[], None] | None,
    ) -> Future[Any]:
        future = self._executor.submit(callback, payload)
        future.add_done_callback(functools.partial(_after_executor_delivery, self.uid, on_finished))
        return future

    def _hand_over_task(self, on_task: Callable[[SessionTask], None], task: SessionTask) -> None:
        if self._executor is None:
            self._loop.call_soon_threadsafe(_deliver_on_loop, on_task, task, None)
            return
        self._task_handover = self._submit(on_task, task, None)

    def _publish(self, name: str) -> None:
        notifications = self._deps.notifications
        if notifications.enabled:
            notifications.publish(name, self)

    # -- debug output ------------------------------------------------------

    def _debug_request(self, url_request: httpx.Request, content: bytes | None) -> None:
        if self.quiet:
            return
        logger.debug(
            "{} #{} [{}] {}\nheaders: {}\nbody: {}",
            url_request.method,
            self.uid,
            self.session_description,
            url_request.url,
            dict(url_request.headers),
            _preview(content),
        )

    def _debug_response(self, outcome: Outcome) -> None:
        if self.quiet:
            return
        response = outcome.response
        if response is None:
            logger.debug("#{} no response{}: {}", self.uid, " (mock)" if outcome.mock else "", outcome.error)
            return
        size = len(outcome.data or b"")
        encoding = response.headers.get("content-encoding")
        logger.debug(
            "#{} {} {}{} ({} bytes{})",
            self.uid,
            response.status_code,
            self.url_string,
            " (mock)" if outcome.mock else "",
            size,
            f", {encoding}" if encoding else "",
        )
        if self.log_raw_response_data or isinstance(outcome.value, (bytes, bytearray)):
            logger.debug("#{} body: {}", self.uid, _preview(outcome.data))

    def __repr__(self) -> str:
        return f"<Request #{self.uid} {self.method.value} {self.url_string}>"

