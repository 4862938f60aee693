"""Broadcaster — fans resource records out to every connected client.

Each connected client owns a bounded queue.  ``broadcast`` enqueues the
record's wire frame on every queue; the transport drains each queue into
its socket independently, so fan-out order across clients is unspecified.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from whisker.reactive.resolver import ResourceRecord

# Frames a client may fall behind by before new ones are dropped for it.
CLIENT_QUEUE_SIZE = 256

# Queued after close() so each client generator finishes.
_CLOSED = None


def _client_queue() -> asyncio.Queue[Any]:
    return asyncio.Queue(maxsize=CLIENT_QUEUE_SIZE)


@dataclass(frozen=True, slots=True)
class Connection:
    """A connected client session.

    Attributes:
        client_id: Unique identifier for this connection.
        remote: Printable peer address.
        queue: Outgoing wire frames for this client.

    """

    client_id: str
    remote: str = ""
    queue: asyncio.Queue[Any] = field(default_factory=_client_queue, compare=False, hash=False)


class Broadcaster:
    """Owns the set of connected clients and pushes records to all of them.

    Thread-safe: the connection set is protected by a lock.  After
    ``close()`` every later broadcast is discarded and returns 0.

    """

    def __init__(self) -> None:
        self._connections: set[Connection] = set()
        self._lock = threading.Lock()
        self._closed = False

    @property
    def client_count(self) -> int:
        """Number of currently connected clients."""
        with self._lock:
            return len(self._connections)

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, conn: Connection) -> None:
        """Register a client.  A client arriving after close is ended at once."""
        with self._lock:
            if not self._closed:
                self._connections.add(conn)
                return
        conn.queue.put_nowait(_CLOSED)

    def unsubscribe(self, conn: Connection) -> None:
        """Remove a client."""
        with self._lock:
            self._connections.discard(conn)

    def get_connections(self) -> frozenset[Connection]:
        """Snapshot of connected clients (no lock held on return)."""
        with self._lock:
            return frozenset(self._connections)

    def broadcast(self, resource: ResourceRecord) -> int:
        """Queue a resource frame for every connected client.

        Returns:
            Number of clients the frame was queued for.

        """
        if self._closed:
            return 0
        frame = {"type": "resource", **resource.to_wire()}
        count = 0
        for conn in self.get_connections():
            try:
                conn.queue.put_nowait(frame)
                count += 1
            except asyncio.QueueFull:
                pass  # Slow client; it will get the next change
        return count

    def close(self) -> None:
        """Disconnect every client and refuse further broadcasts."""
        with self._lock:
            self._closed = True
            connections = list(self._connections)
            self._connections.clear()
        for conn in connections:
            _force_put(conn.queue, _CLOSED)

    async def client_generator(self, conn: Connection) -> AsyncIterator[dict[str, Any]]:
        """Yield wire frames queued for *conn* until the broadcaster closes.

        Catches ``CancelledError`` (client disconnect / task cancellation)
        so the transport can tear the generator down quietly.

        """
        try:
            while True:
                frame = await conn.queue.get()
                if frame is _CLOSED:
                    return
                yield frame
        except (asyncio.CancelledError, GeneratorExit):
            return


def _force_put(queue: asyncio.Queue[Any], item: Any) -> None:
    """Put *item* even on a full queue by dropping the oldest frame."""
    while True:
        try:
            queue.put_nowait(item)
            return
        except asyncio.QueueFull:
            queue.get_nowait()
