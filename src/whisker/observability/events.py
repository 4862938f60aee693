"""Event model for pipeline and server observability.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Change pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChangeResolved:
    """A changed file was turned into a resource record.

    Attributes:
        path: Changed path, relative to the watched root.
        resource_url: URL of the resolved resource.
        size: Length of the resolved contents in characters.
        resolve_ms: Time spent in the resolver in milliseconds.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    resource_url: str
    size: int
    resolve_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ResourceBroadcast:
    """A resource record was fanned out to connected clients.

    Attributes:
        resource_url: URL of the broadcast resource.
        clients_notified: Number of connections the record was queued on.
        trigger_path: Changed path that produced the record.
        duration_ms: Time from change detection to broadcast.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    resource_url: str
    clients_notified: int
    trigger_path: str
    duration_ms: float
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Connection events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientConnected:
    """A client session subscribed to updates."""

    client_id: str
    remote: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ClientDisconnected:
    """A client session went away."""

    client_id: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = ChangeResolved | ResourceBroadcast | ClientConnected | ClientDisconnected


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
