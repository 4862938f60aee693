"""Reactive layer — change propagation from watched files to clients.

Connects file changes to connected client sessions through the resolver,
the broadcaster, and the websocket transport.
"""

from whisker.reactive.broadcaster import Broadcaster, Connection
from whisker.reactive.pipeline import ChangePipeline
from whisker.reactive.resolver import ResourceRecord, file_resolver, validate_resource
from whisker.reactive.transport import WebSocketServer

__all__ = [
    "Broadcaster",
    "ChangePipeline",
    "Connection",
    "ResourceRecord",
    "WebSocketServer",
    "file_resolver",
    "validate_resource",
]
