"""Whisker application — wires the watcher, pipeline and websocket server.

``serve`` runs an update server until interrupted; ``connect`` runs a
client controller against it from the terminal.  ``run`` is the async
core of ``serve`` for callers that already own an event loop.
"""

from __future__ import annotations

import asyncio
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from whisker._log import make_logger
from whisker.config import WhiskerConfig
from whisker.config_loader import load_config

if TYPE_CHECKING:
    from whisker.observability.collector import StackCollector
    from whisker.reactive.pipeline import ChangePipeline
    from whisker.reactive.resolver import Resolver
    from whisker.reactive.transport import WebSocketServer


def create_pipeline(
    config: WhiskerConfig,
    resolver: Resolver | None = None,
    *,
    collector: StackCollector | None = None,
) -> tuple[ChangePipeline, WebSocketServer]:
    """Build the pipeline and the server it broadcasts through.

    The server is not started; ``run`` does that.

    """
    from whisker.reactive.pipeline import ChangePipeline
    from whisker.reactive.transport import WebSocketServer
    from whisker.watch.watcher import ChangeWatcher

    server = WebSocketServer(
        config.host,
        config.port,
        collector=collector,
        log=make_logger(config.verbose, "server"),
    )
    pipeline = ChangePipeline(
        config.root,
        server,
        resolver=resolver,
        watcher=ChangeWatcher(config.root, config.patterns),
        collector=collector,
        log=make_logger(config.verbose, "whisker"),
    )
    return pipeline, server


async def run(
    config: WhiskerConfig,
    resolver: Resolver | None = None,
    *,
    on_ready: Callable[[str], None] | None = None,
    collector: StackCollector | None = None,
) -> None:
    """Serve updates for ``config.root`` until cancelled.

    Args:
        config: Server configuration.
        resolver: Custom path-to-resource resolver.
        on_ready: Called with the bound websocket URL once files are watched.
        collector: Optional observability collector.

    """
    pipeline, server = create_pipeline(config, resolver, collector=collector)
    await server.start()
    if on_ready is not None:
        pipeline.on_ready(lambda: on_ready(server.url))
    try:
        await pipeline.run()
    finally:
        await pipeline.close()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def serve(root: str | Path = ".", resolver: Resolver | None = None, **kwargs: object) -> None:
    """Watch *root* and push changed files to connected clients.

    Args:
        root: Directory to watch.
        resolver: Custom path-to-resource resolver (default reads the file).
        **kwargs: Override WhiskerConfig fields.

    """
    from whisker.banner import print_banner
    from whisker.observability import StackCollector

    config = load_config(Path(root), **kwargs)
    t0 = time.perf_counter()

    def _ready(url: str) -> None:
        print_banner(config, url=url, load_ms=(time.perf_counter() - t0) * 1000)

    try:
        asyncio.run(run(config, resolver, on_ready=_ready, collector=StackCollector()))
    except KeyboardInterrupt:
        print("  Stopped", file=sys.stderr)


async def _connect(hostname: str, config_path: Path, *, enable: bool, verbose: bool) -> int:
    from whisker.banner import print_connect_banner
    from whisker.client.console import ConsolePanel, print_resource
    from whisker.client.controller import Controller
    from whisker.client.settings import FileStore

    async def _host() -> str:
        return hostname

    controller = Controller(
        _host, FileStore(config_path), on_resource=print_resource, verbose=verbose,
    )
    panel = ConsolePanel()
    print_connect_banner(hostname, f"ws://{hostname}:{controller.config.port}/")
    controller.attach_panel(panel)
    try:
        if enable and not controller.config.is_enabled(hostname):
            await controller.enable_for_host()
        else:
            await controller.start()
        await panel.done.wait()
    finally:
        controller.stop()
    status = panel.last_status
    return 0 if status is not None and status.type != "error" else 1


def connect(
    hostname: str,
    config_path: str | Path,
    *,
    enable: bool = False,
    verbose: bool = False,
) -> int:
    """Run a client controller for *hostname* in the terminal.

    Returns a process exit code: 1 if the session ended in error.

    """
    try:
        return asyncio.run(
            _connect(hostname, Path(config_path).expanduser(), enable=enable, verbose=verbose)
        )
    except KeyboardInterrupt:
        print("  Stopped", file=sys.stderr)
        return 0
