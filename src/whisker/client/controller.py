"""Client controller — binds configuration, host matching and the session.

The controller owns the client configuration and the (at most one) live
session.  It resolves the current page's hostname, starts a session when
the host is enabled, and translates session states into the status
vocabulary the panel renders.

Configuration changes only through two paths: ``replace_config`` (the
panel saved a whole new configuration) and ``enable_for_host`` (append a
literal rule for the current host).
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from whisker._errors import StatusError
from whisker._log import make_logger
from whisker.client.channel import ConfigLoaded, LogLine, PanelChannel, StatusChange
from whisker.client.session import Session
from whisker.client.settings import (
    ClientConfig,
    ConfigStore,
    MemoryStore,
    load_client_config,
    save_client_config,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from whisker._types import HostSource, StatusAction, StatusType
    from whisker.client.channel import Panel
    from whisker.client.session import ResourceCallback

    type SessionFactory = Callable[..., Session]


# status -> (text, action); "retry" text is completed with the delay.
STATUS_TABLE: dict[str, tuple[str, StatusAction | None]] = {
    "starting": ("Starting", None),
    "disabled": ("Disabled for this site", "enable"),
    "connecting": ("Connecting", None),
    "connected": ("Connected", None),
    "started": ("Started", None),
    "retry": ("Failed to connect, retrying in {seconds}s", None),
    "error": ("Error connecting", "retry"),
}


def format_seconds(delay_ms: float) -> str:
    """Render milliseconds as seconds the way a browser prints numbers.

    ``4500`` -> ``"4.5"``, ``2000`` -> ``"2"``.

    """
    seconds = delay_ms / 1000
    if math.isfinite(seconds) and seconds.is_integer():
        return str(int(seconds))
    return repr(seconds)


def status_event(status: str, aux: float | None = None) -> StatusChange:
    """Build the panel StatusChange for a status.

    Raises:
        StatusError: If *status* is not part of the vocabulary.

    """
    try:
        text, action = STATUS_TABLE[status]
    except KeyError:
        msg = f"Unknown session status: {status!r}"
        raise StatusError(msg) from None
    if status == "retry":
        text = text.format(seconds=format_seconds(aux or 0))
    return StatusChange(type=status, text=text, action=action)  # type: ignore[arg-type]


class Controller:
    """Orchestrates the session for the current page.

    Args:
        host_source: Async callable returning the current page hostname.
        store: Persistence for the configuration (in memory by default).
        on_resource: Host integration receiving delivered resources.
        session_factory: Builds sessions; ``Session`` by default.
        verbose: Forward log lines to the panel.

    """

    def __init__(
        self,
        host_source: HostSource,
        store: ConfigStore | None = None,
        *,
        on_resource: ResourceCallback | None = None,
        session_factory: SessionFactory | None = None,
        verbose: bool = True,
    ) -> None:
        self._host_source = host_source
        self._store = store if store is not None else MemoryStore()
        self._on_resource = on_resource
        self._session_factory = session_factory or Session
        self._channel = PanelChannel()
        self._verbose = verbose
        self._log = self.logger("whisker")
        self._config = load_client_config(self._store, self._log)
        self._session: Session | None = None
        # Bumped by every start_new_session(); a call whose host lookup
        # finishes after a newer call began must not create a session.
        self._generation = 0

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def channel(self) -> PanelChannel:
        return self._channel

    def logger(self, module: str) -> Callable[..., None]:
        """A logger whose lines travel to the panel as LogLine messages."""
        return make_logger(
            self._verbose, module, lambda line: self._channel.send(LogLine(line))
        )

    # ----- Panel surface -----

    def attach_panel(self, panel: Panel) -> None:
        """Connect the UI panel: flush buffered messages, then push the config."""
        self._channel.attach(panel)
        self._channel.send(ConfigLoaded(self._config))

    def status(self, status: StatusType | str, aux: float | None = None) -> None:
        """Report a status transition to the panel."""
        self._channel.send(status_event(status, aux))

    # ----- Lifecycle -----

    async def start(self) -> None:
        self.status("starting")
        await self.start_new_session()

    def stop(self) -> None:
        """Destroy the live session, if any."""
        if self._session is not None:
            self._session.destroy()
            self._session = None

    async def start_new_session(self) -> None:
        """Replace the live session according to the current host and config."""
        self._generation += 1
        generation = self._generation
        self.stop()

        host = await self._current_host()
        if generation != self._generation:
            return  # superseded while resolving the host
        self.stop()

        if host is None or not self._config.is_enabled(host):
            self.status("disabled")
            return

        session = self._session_factory(
            host,
            self._config.port,
            self.status,
            on_resource=self._on_resource,
            log=self.logger("session"),
        )
        self._session = session
        session.start()

    async def retry(self) -> None:
        """Panel asked to retry after an error."""
        await self.start_new_session()

    async def enable_for_host(self) -> None:
        """Enable live updates for the current host.  No-op when already enabled."""
        host = await self._current_host()
        if host is None or self._config.is_enabled(host):
            return
        self._config = self._config.with_host(host)
        save_client_config(self._store, self._config)
        self._channel.send(ConfigLoaded(self._config))
        await self.start_new_session()

    async def replace_config(self, config: ClientConfig) -> None:
        """Panel saved a new configuration: persist it and restart."""
        self._config = config
        save_client_config(self._store, config)
        await self.start_new_session()

    async def _current_host(self) -> str | None:
        try:
            host = await self._host_source()
        except Exception as exc:  # noqa: BLE001 - unknown host means disabled
            self._log("Cannot determine host:", exc)
            return None
        return host or None
