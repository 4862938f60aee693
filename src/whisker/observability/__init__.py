"""Server observability — a small event model for the update pipeline.

Aggregates events from:
- **Change pipeline**: resolver calls and broadcasts
- **Websocket server**: client connects and disconnects

All events are frozen dataclasses with monotonic nanosecond timestamps.

Quick Start:
    >>> from whisker.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to ChangePipeline and WebSocketServer

"""

from whisker.observability.collector import StackCollector
from whisker.observability.events import (
    ChangeResolved,
    ClientConnected,
    ClientDisconnected,
    ResourceBroadcast,
    StackEvent,
    now_ns,
)
from whisker.observability.log import EventLog

__all__ = [
    "ChangeResolved",
    "ClientConnected",
    "ClientDisconnected",
    "EventLog",
    "ResourceBroadcast",
    "StackCollector",
    "StackEvent",
    "now_ns",
]
