"""Event log — bounded, queryable store of pipeline and server events.

Holds the most recent ``StackEvent`` objects in a ring buffer so the CLI
and tests can inspect what the server did.

Thread Safety:
    All methods take a ``threading.Lock``; the watcher and the websocket
    server may record from different tasks or threads.

"""

import threading
from collections import deque
from typing import Any

from whisker.observability.events import StackEvent


class EventLog:
    """Bounded event store with query support.

    Args:
        max_events: Maximum number of events to retain; the oldest are
            discarded first.

    """

    __slots__ = ("_events", "_lock", "_max_events")

    def __init__(self, max_events: int = 5_000) -> None:
        self._max_events = max_events
        self._events: deque[StackEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: StackEvent) -> None:
        """Record an event in the log."""
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        url: str | None = None,
        limit: int = 100,
    ) -> list[StackEvent]:
        """Query events, most recent first.

        Args:
            event_type: Only return events of this type.
            since_ns: Only return events recorded after this timestamp.
            url: Only return events whose path or resource URL contains this.
            limit: Maximum number of events to return.

        """
        with self._lock:
            snapshot = list(self._events)

        results: list[StackEvent] = []
        for event in reversed(snapshot):
            if len(results) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if since_ns and event.timestamp_ns < since_ns:
                continue
            if url is not None:
                haystack = " ".join(
                    str(getattr(event, attr, "") or "")
                    for attr in ("path", "resource_url", "trigger_path")
                )
                if url not in haystack:
                    continue
            results.append(event)
        return results

    def recent(self, n: int = 20) -> list[StackEvent]:
        """Return the N most recent events, oldest first."""
        with self._lock:
            items = list(self._events)
        return items[-n:]

    def clear(self) -> int:
        """Clear all events and return the count that was cleared."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def stats(self) -> dict[str, Any]:
        """Return summary statistics about stored events."""
        with self._lock:
            events = list(self._events)

        type_counts: dict[str, int] = {}
        for event in events:
            name = type(event).__name__
            type_counts[name] = type_counts.get(name, 0) + 1

        return {
            "total": len(events),
            "max_events": self._max_events,
            "by_type": type_counts,
        }
