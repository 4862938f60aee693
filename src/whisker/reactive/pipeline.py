"""Change pipeline — connects the watcher to the resolver and broadcaster.

Orchestrates the change propagation flow:
    1. ChangeWatcher detects a file change (ChangeEvent)
    2. The path is made relative to the watched root
    3. The resolver turns it into a ResourceRecord
    4. The record is validated and handed to the broadcaster

Changes are not serialized: every event is resolved and broadcast in its
own task, so a slow resolve never holds back an unrelated file.  The
pipeline also owns shutdown of the watcher and the transport server.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from whisker._errors import ConfigError
from whisker._log import make_logger
from whisker.reactive.resolver import ResourceRecord, file_resolver, validate_resource

if TYPE_CHECKING:
    from collections.abc import Callable

    from whisker._log import LogFunc
    from whisker.observability.collector import StackCollector
    from whisker.reactive.resolver import Resolver
    from whisker.watch.watcher import ChangeWatcher


class BroadcastTarget(Protocol):
    """What the pipeline needs from the transport: fan-out and shutdown."""

    def broadcast(self, resource: ResourceRecord) -> Any: ...

    def close(self) -> Any: ...


def _first_error(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


class ChangePipeline:
    """Coordinates change propagation from file edit to connected clients.

    Args:
        root: Watched root; changed paths are reported relative to it.
        broadcaster: Transport surface with ``broadcast`` and ``close``.
        resolver: Async path-to-resource callable (default reads the file).
        watcher: Change detector driving ``run()``.
        collector: Optional observability collector.
        verbose: Print pipeline activity to stderr.
        log: Explicit logger, overriding ``verbose``.

    """

    def __init__(
        self,
        root: Path,
        broadcaster: BroadcastTarget,
        *,
        resolver: Resolver | None = None,
        watcher: ChangeWatcher | None = None,
        collector: StackCollector | None = None,
        verbose: bool = False,
        log: LogFunc | None = None,
    ) -> None:
        self._root = root
        self._broadcaster = broadcaster
        self._resolver = resolver if resolver is not None else file_resolver(root)
        self._watcher = watcher
        self._collector = collector
        self._log = log or make_logger(verbose, "whisker")
        self._ready_callbacks: list[Callable[[], None]] = []
        self._live = False
        self._closed = False

    @property
    def is_live(self) -> bool:
        """True once the watcher has reported ready and until close."""
        return self._live and not self._closed

    @property
    def closed(self) -> bool:
        return self._closed

    def on_ready(self, callback: Callable[[], None]) -> None:
        """Register a callback for the watcher's ready notification."""
        self._ready_callbacks.append(callback)

    def _mark_ready(self) -> None:
        if self._live or self._closed:
            return
        self._live = True
        self._log("Watching", str(self._root))
        for callback in self._ready_callbacks:
            callback()

    def relative_path(self, path: Path) -> str:
        """Path of *path* relative to the watched root, in posix form."""
        path = Path(path)
        if not path.is_absolute():
            return path.as_posix()
        return path.relative_to(self._root).as_posix()

    async def handle_change(self, path: Path) -> ResourceRecord | None:
        """Resolve one changed file and broadcast the result.

        Returns the broadcast record, or None when the pipeline was closed
        before the record could be delivered.  Resolver errors and
        malformed records propagate.

        """
        if self._closed:
            return None

        rel = self.relative_path(path)
        self._log("File changed", rel)

        t0 = time.perf_counter()
        resource = validate_resource(await self._resolver(rel))
        resolve_ms = (time.perf_counter() - t0) * 1000
        if self._collector is not None:
            self._collector.record_resolve(
                rel, resource.resource_url,
                size=len(resource.contents), resolve_ms=resolve_ms,
            )

        if self._closed:
            # Late result of a resolve that was in flight during close()
            self._log("Discarding", resource.resource_url, "(closed)")
            return None

        count = self._broadcaster.broadcast(resource)
        if self._collector is not None:
            self._collector.record_broadcast(
                resource.resource_url,
                clients_notified=count if isinstance(count, int) else 0,
                trigger_path=rel,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        return resource

    async def run(self) -> None:
        """Consume watcher events until close, handling each concurrently.

        Raises the first error from any change handler (resolver failure or
        malformed record); the remaining handlers are cancelled.

        """
        if self._watcher is None:
            msg = "ChangePipeline.run() requires a watcher"
            raise ConfigError(msg)

        try:
            async with asyncio.TaskGroup() as tg:
                async for event in self._watcher.changes(on_ready=self._mark_ready):
                    if self._closed:
                        break
                    tg.create_task(self.handle_change(event.path))
        except BaseExceptionGroup as group:
            raise _first_error(group) from None

    async def close(self) -> None:
        """Stop the watcher and the transport server.  Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._log("Shutting down whisker")
        if self._watcher is not None:
            self._watcher.stop()
        result = self._broadcaster.close()
        if inspect.isawaitable(result):
            await result
