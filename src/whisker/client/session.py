"""Client session — one logical connection to an update server.

State machine::

    idle -> connecting -> connected -> started
                 ^            |           |
                 |            v           v
                 +-------- retry <--------+
                              |
                              v
                            error

*connected* is reported when the websocket opens, *started* when the
server's ``hello`` frame confirms the subscription.  Failed attempts move
to *retry* with the backoff delay (milliseconds) as auxiliary data; once
the retry budget is spent, or on a failure that retrying cannot fix, the
session ends in *error*.  A session that reached *started* gets a fresh
retry budget when it drops.

``destroy()`` cancels the connection task, including any pending
reconnection sleep; a destroyed session never reports again.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import (
    ConnectionClosed,
    InvalidStatus,
    InvalidURI,
    WebSocketException,
)

from whisker._errors import ResourceError
from whisker._log import make_logger
from whisker.reactive.resolver import ResourceRecord

if TYPE_CHECKING:
    from whisker._log import LogFunc
    from whisker._types import SessionStatus

type StatusCallback = Callable[..., None]
type ResourceCallback = Callable[[ResourceRecord], None]
type Connect = Callable[[str], Awaitable[Any]]

# Failures worth another attempt; anything else is a bug and propagates.
_CONNECT_ERRORS = (OSError, TimeoutError, WebSocketException)


@dataclass(frozen=True, slots=True)
class Backoff:
    """Capped exponential reconnection delays.

    Attempt ``n`` (0-based) waits ``initial_ms * factor**n`` milliseconds,
    never more than ``max_ms``.  After ``max_retries`` failed attempts in a
    row the session gives up.

    """

    initial_ms: int = 1000
    factor: float = 2.0
    max_ms: int = 30_000
    max_retries: int = 10

    def delay_ms(self, attempt: int) -> int:
        return int(min(self.max_ms, self.initial_ms * self.factor**attempt))

    def exhausted(self, attempt: int) -> bool:
        return attempt >= self.max_retries


def is_retryable(exc: BaseException) -> bool:
    """Whether a connection failure may succeed on a later attempt."""
    if isinstance(exc, InvalidURI):
        return False
    if isinstance(exc, InvalidStatus):
        return not 400 <= exc.response.status_code < 500
    return isinstance(exc, _CONNECT_ERRORS)


class Session:
    """A connection to ``ws://host:port/`` that reports its state.

    Args:
        host: Update server host.
        port: Update server port.
        on_status: Called as ``on_status(status, aux)`` on every transition;
            ``aux`` is the delay in milliseconds for ``retry``, else None.
        on_resource: Receives each delivered ResourceRecord.
        backoff: Reconnection policy.
        connect: Async ``url -> websocket`` factory; websockets' client by
            default.
        log: Logger for connection activity.

    """

    def __init__(
        self,
        host: str,
        port: int,
        on_status: StatusCallback,
        *,
        on_resource: ResourceCallback | None = None,
        backoff: Backoff | None = None,
        connect: Connect | None = None,
        log: LogFunc | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.state: SessionStatus | str = "idle"
        self._on_status = on_status
        self._on_resource = on_resource
        self._backoff = backoff or Backoff()
        self._connect = connect or ws_connect
        self._log = log or make_logger(False, "session")
        self._task: asyncio.Task[None] | None = None
        self._attempt = 0
        self._destroyed = False

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}/"

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def start(self) -> None:
        """Begin connecting.  Must be called from a running event loop."""
        if self._destroyed:
            msg = "a destroyed session cannot be restarted"
            raise RuntimeError(msg)
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def destroy(self) -> None:
        """Tear the session down from any state.  Idempotent."""
        self._destroyed = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            self._log("Session destroyed", self.url)

    async def wait(self) -> None:
        """Wait for the session to reach *error* or be destroyed."""
        task = self._task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _status(self, status: SessionStatus, aux: int | None = None) -> None:
        if self._destroyed:
            return
        self.state = status
        self._on_status(status, aux)

    async def _run(self) -> None:
        while True:
            self._status("connecting")
            self._log("Connecting to", self.url)
            try:
                websocket = await self._connect(self.url)
            except _CONNECT_ERRORS as exc:
                self._log("Connection failed:", exc)
                if not is_retryable(exc):
                    self._status("error")
                    return
                if not await self._retry():
                    return
                continue

            self._status("connected")
            try:
                async for frame in websocket:
                    self._handle_frame(frame)
            except ConnectionClosed as exc:
                self._log("Connection closed:", exc)
            finally:
                with contextlib.suppress(*_CONNECT_ERRORS):
                    await websocket.close()

            self._log("Connection lost", self.url)
            if not await self._retry():
                return

    async def _retry(self) -> bool:
        """Report and sleep out the next backoff delay; False when exhausted."""
        if self._backoff.exhausted(self._attempt):
            self._log("Giving up after", self._attempt, "retries")
            self._status("error")
            return False
        delay = self._backoff.delay_ms(self._attempt)
        self._attempt += 1
        self._status("retry", delay)
        await asyncio.sleep(delay / 1000)
        return True

    def _handle_frame(self, frame: str | bytes) -> None:
        try:
            message = json.loads(frame)
        except ValueError:
            self._log("Ignoring malformed frame")
            return
        if not isinstance(message, dict):
            self._log("Ignoring malformed frame")
            return

        kind = message.get("type")
        if kind == "hello":
            self._attempt = 0
            self._status("started")
        elif kind == "resource":
            try:
                resource = ResourceRecord.from_wire(message)
            except ResourceError as exc:
                self._log("Ignoring resource:", exc)
                return
            self._log("Received", resource.resource_url)
            if self._on_resource is None or self._destroyed:
                return
            try:
                self._on_resource(resource)
            except Exception as exc:  # noqa: BLE001 - host code must not end the session
                self._log("Resource handler failed:", exc)
        else:
            self._log("Ignoring frame of type", repr(kind))
