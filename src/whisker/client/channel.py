"""Panel channel — typed messages from the controller to the UI panel.

The panel may appear long after the controller starts (a devtools panel is
only created when first shown).  Until then every message is queued; on
``attach`` the queue is flushed once, in order, and never replayed to a
later panel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from whisker._types import StatusAction, StatusType
    from whisker.client.settings import ClientConfig


@dataclass(frozen=True, slots=True)
class StatusChange:
    """The session status changed."""

    type: StatusType
    text: str
    action: StatusAction | None = None


@dataclass(frozen=True, slots=True)
class ConfigLoaded:
    """The panel should (re)display this configuration."""

    config: ClientConfig


@dataclass(frozen=True, slots=True)
class LogLine:
    """A log line from the controller or its session."""

    text: str


type PanelMessage = StatusChange | ConfigLoaded | LogLine


class Panel(Protocol):
    """The UI surface: receives controller messages."""

    def deliver(self, message: PanelMessage) -> None: ...


class PanelChannel:
    """Ordered, buffered delivery of PanelMessages to a Panel."""

    def __init__(self) -> None:
        self._panel: Panel | None = None
        self._buffer: list[PanelMessage] = []

    @property
    def panel(self) -> Panel | None:
        return self._panel

    @property
    def pending(self) -> tuple[PanelMessage, ...]:
        """Messages waiting for a panel."""
        return tuple(self._buffer)

    def send(self, message: PanelMessage) -> None:
        if self._panel is None:
            self._buffer.append(message)
        else:
            self._panel.deliver(message)

    def attach(self, panel: Panel) -> None:
        """Route messages to *panel*, first flushing anything queued."""
        # Messages sent while flushing join the queue behind the buffered ones.
        self._panel = None
        while self._buffer:
            buffered, self._buffer = self._buffer, []
            for message in buffered:
                panel.deliver(message)
        self._panel = panel
