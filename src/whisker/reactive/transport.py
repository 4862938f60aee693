"""Websocket transport — serves the broadcaster to remote client sessions.

Each accepted websocket is registered with the ``Broadcaster`` and gets a
``hello`` frame once its subscription is live; that frame is what moves a
client session from *connected* to *started*.  Afterwards the handler
drains the connection's queue into the socket until either side closes.

Wire frames are JSON text::

    {"type": "hello"}
    {"type": "resource", "resourceURL": "app.js", "contents": "..."}
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from typing import TYPE_CHECKING, Any

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from whisker._errors import TransportError
from whisker._log import make_logger
from whisker.reactive.broadcaster import Broadcaster, Connection

if TYPE_CHECKING:
    from websockets.asyncio.server import Server, ServerConnection

    from whisker._log import LogFunc
    from whisker.observability.collector import StackCollector
    from whisker.reactive.resolver import ResourceRecord

HELLO_FRAME: dict[str, Any] = {"type": "hello"}


def _format_remote(address: Any) -> str:
    if isinstance(address, tuple) and len(address) >= 2:
        return f"{address[0]}:{address[1]}"
    return str(address or "")


class WebSocketServer:
    """Websocket server exposing ``broadcast(resource)`` and ``close()``.

    Args:
        host: Bind address.
        port: Bind port (0 picks a free port; see ``port`` after start).
        broadcaster: Connection registry; a fresh one is created if omitted.
        collector: Optional observability collector.
        log: Logger for connection activity.

    """

    def __init__(
        self,
        host: str,
        port: int,
        broadcaster: Broadcaster | None = None,
        *,
        collector: StackCollector | None = None,
        log: LogFunc | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._broadcaster = broadcaster if broadcaster is not None else Broadcaster()
        self._collector = collector
        self._log = log or make_logger(False, "server")
        self._server: Server | None = None

    @property
    def broadcaster(self) -> Broadcaster:
        return self._broadcaster

    @property
    def port(self) -> int:
        """The bound port (the requested one until the server has started)."""
        if self._server is not None:
            for sock in self._server.sockets:
                return sock.getsockname()[1]
        return self._port

    @property
    def url(self) -> str:
        return f"ws://{self._host}:{self.port}/"

    async def start(self) -> None:
        """Bind and start accepting client sessions."""
        if self._server is not None:
            return
        try:
            self._server = await serve(self._handler, self._host, self._port)
        except OSError as exc:
            msg = f"cannot listen on {self._host}:{self._port}: {exc}"
            raise TransportError(msg) from exc
        self._log("Listening on", self.url)

    def broadcast(self, resource: ResourceRecord) -> int:
        """Deliver a resource to every connected session."""
        count = self._broadcaster.broadcast(resource)
        self._log("Broadcast", resource.resource_url, f"to {count} client(s)")
        return count

    async def close(self) -> None:
        """Disconnect every session and release the listening socket."""
        self._broadcaster.close()
        server, self._server = self._server, None
        if server is None:
            return
        self._log("Shutting down")
        server.close()
        await server.wait_closed()

    async def _handler(self, websocket: ServerConnection) -> None:
        conn = Connection(
            client_id=str(websocket.id),
            remote=_format_remote(websocket.remote_address),
        )
        self._broadcaster.subscribe(conn)
        self._log("Client connected", conn.remote)
        if self._collector is not None:
            self._collector.record_connect(conn.client_id, conn.remote)

        sender = asyncio.create_task(self._pump(websocket, conn))
        closed = asyncio.create_task(websocket.wait_closed())
        try:
            await asyncio.wait({sender, closed}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sender, closed):
                task.cancel()
            for task in (sender, closed):
                with contextlib.suppress(asyncio.CancelledError, ConnectionClosed):
                    await task
            self._broadcaster.unsubscribe(conn)
            self._log("Client disconnected", conn.remote)
            if self._collector is not None:
                self._collector.record_disconnect(conn.client_id)

    async def _pump(self, websocket: ServerConnection, conn: Connection) -> None:
        """Send the hello frame, then every queued frame, to one client."""
        await websocket.send(json.dumps(HELLO_FRAME))
        async for frame in self._broadcaster.client_generator(conn):
            await websocket.send(json.dumps(frame))
        await websocket.close()
