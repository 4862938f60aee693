"""Console panel — a terminal stand-in for the browser panel.

Prints status changes and log lines to stderr and remembers the latest
status so ``whisker connect`` can stop once the session errors out.
"""

from __future__ import annotations

import asyncio
import sys

from whisker.client.channel import ConfigLoaded, LogLine, PanelMessage, StatusChange
from whisker.reactive.resolver import ResourceRecord

_HINTS = {
    "enable": "run again with --enable to allow this host",
    "retry": "is `whisker serve` running?",
}


class ConsolePanel:
    """Panel printing to stderr.

    ``done`` is set when the status becomes ``error`` or ``disabled``.

    """

    def __init__(self) -> None:
        self.last_status: StatusChange | None = None
        self.done = asyncio.Event()

    def deliver(self, message: PanelMessage) -> None:
        if isinstance(message, StatusChange):
            self.last_status = message
            line = f"  [{message.type}] {message.text}"
            if message.action is not None:
                line += f" ({_HINTS[message.action]})"
            print(line, file=sys.stderr)
            if message.type in ("error", "disabled"):
                self.done.set()
        elif isinstance(message, LogLine):
            print(f"  {message.text}", file=sys.stderr)
        elif isinstance(message, ConfigLoaded):
            rules = ", ".join(r.serialize() for r in message.config.host_rules) or "none"
            print(f"  port {message.config.port}, hosts: {rules}", file=sys.stderr)


def print_resource(resource: ResourceRecord) -> None:
    """Default ``on_resource`` for the CLI: report what arrived."""
    print(f"  updated {resource.resource_url} ({len(resource.contents)} chars)", file=sys.stderr)
