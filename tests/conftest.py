"""Shared test fixtures and fakes for whisker."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest

from whisker.reactive.resolver import ResourceRecord
from whisker.watch.watcher import ChangeEvent


@pytest.fixture
def watched_root(tmp_path: Path) -> Path:
    """A small asset tree: two scripts, a stylesheet and an unwatched file."""
    (tmp_path / "a.js").write_text("x")
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / "b.js").write_text("export const b = 1;\n")
    (tmp_path / "style.css").write_text("body { margin: 0; }\n")
    (tmp_path / "README.md").write_text("# assets\n")
    return tmp_path


class FakeBroadcaster:
    """Records broadcasts and close calls."""

    def __init__(self) -> None:
        self.broadcasts: list[ResourceRecord] = []
        self.close_count = 0

    def broadcast(self, resource: ResourceRecord) -> int:
        self.broadcasts.append(resource)
        return 1

    def close(self) -> None:
        self.close_count += 1


class FakeWatcher:
    """Reports ready, then yields the given events and finishes."""

    def __init__(self, events: list[ChangeEvent] | None = None) -> None:
        self.events = list(events or [])
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True

    async def changes(
        self, on_ready: Callable[[], None] | None = None
    ) -> AsyncIterator[ChangeEvent]:
        if on_ready is not None:
            on_ready()
        for event in self.events:
            if self.stopped:
                return
            yield event


class FakeWebSocket:
    """Client-side websocket double: yields frames, optionally stays open."""

    def __init__(self, frames: list[str] | None = None, *, hold_open: bool = False) -> None:
        self.frames = list(frames or [])
        self.hold_open = hold_open
        self.closed = False
        self._release = asyncio.Event()

    def __aiter__(self) -> AsyncIterator[str]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        for frame in self.frames:
            yield frame
        if self.hold_open:
            await self._release.wait()

    async def close(self) -> None:
        self.closed = True
        self._release.set()


class FakeConnector:
    """``connect`` double returning (or raising) queued outcomes in order.

    The last outcome repeats once the queue is down to one entry.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.urls: list[str] = []

    async def __call__(self, url: str) -> Any:
        self.urls.append(url)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class StatusRecorder:
    """Collects ``(status, aux)`` pairs from a session."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def __call__(self, status: str, aux: Any = None) -> None:
        self.calls.append((status, aux))

    @property
    def statuses(self) -> list[str]:
        return [status for status, _ in self.calls]

    async def wait_for(self, status: str, count: int = 1, timeout: float = 2.0) -> None:
        async with asyncio.timeout(timeout):
            while self.statuses.count(status) < count:
                await asyncio.sleep(0.001)


class RecordingPanel:
    """Panel double keeping every delivered message."""

    def __init__(self) -> None:
        self.messages: list[Any] = []

    def deliver(self, message: Any) -> None:
        self.messages.append(message)
