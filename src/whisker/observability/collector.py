"""Stack collector — records pipeline and server events into an EventLog.

The change pipeline and the websocket server each hold an optional
collector and call its ``record_*`` methods; when no collector is wired
they skip recording entirely.

"""

from __future__ import annotations

from whisker.observability.events import (
    ChangeResolved,
    ClientConnected,
    ClientDisconnected,
    ResourceBroadcast,
    now_ns,
)
from whisker.observability.log import EventLog


class StackCollector:
    """Unified event collector for the update server.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    def record_resolve(
        self,
        path: str,
        resource_url: str,
        *,
        size: int = 0,
        resolve_ms: float = 0.0,
    ) -> None:
        """Record a resolver call that produced a resource."""
        self._log.append(
            ChangeResolved(
                path=path,
                resource_url=resource_url,
                size=size,
                resolve_ms=resolve_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_broadcast(
        self,
        resource_url: str,
        *,
        clients_notified: int,
        trigger_path: str,
        duration_ms: float,
    ) -> None:
        """Record a resource fan-out."""
        self._log.append(
            ResourceBroadcast(
                resource_url=resource_url,
                clients_notified=clients_notified,
                trigger_path=trigger_path,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_connect(self, client_id: str, remote: str = "") -> None:
        """Record a client subscribing to updates."""
        self._log.append(ClientConnected(client_id=client_id, remote=remote, timestamp_ns=now_ns()))

    def record_disconnect(self, client_id: str) -> None:
        """Record a client going away."""
        self._log.append(ClientDisconnected(client_id=client_id, timestamp_ns=now_ns()))
