"""File watcher — reports changed assets under the watched root.

Wraps ``watchfiles.awatch`` (which already debounces bursts of OS events)
and narrows its output to the files selected by the configured glob
patterns.  Consumers see one ``ready`` notification once the OS watch is
installed, followed by a stream of ``ChangeEvent`` objects.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change, awatch

from whisker.config import DEFAULT_PATTERNS

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A file change detected by the watcher.

    Attributes:
        path: Absolute path to the changed file.
        kind: Type of filesystem change.

    """

    path: Path
    kind: Literal["created", "modified"]


# Deleted files cannot be resolved, so they never reach the pipeline.
_CHANGE_KIND_MAP: dict[Change, Literal["created", "modified"]] = {
    Change.added: "created",
    Change.modified: "modified",
}


def matches_patterns(relative: str, patterns: Iterable[str]) -> bool:
    """Return True if a root-relative posix path matches any glob pattern.

    A leading ``**/`` also matches files directly under the root, so
    ``**/*.js`` selects both ``a.js`` and ``lib/a.js``.

    """
    for pattern in patterns:
        if fnmatch(relative, pattern):
            return True
        if pattern.startswith("**/") and fnmatch(relative, pattern[3:]):
            return True
    return False


def to_events(
    raw_changes: Iterable[tuple[Change, str]],
    root: Path,
    patterns: Iterable[str],
) -> list[ChangeEvent]:
    """Convert a watchfiles batch into ChangeEvents, in a stable order."""
    patterns = tuple(patterns)
    events: list[ChangeEvent] = []
    for change_type, path_str in sorted(raw_changes, key=lambda item: item[1]):
        kind = _CHANGE_KIND_MAP.get(change_type)
        if kind is None:
            continue
        path = Path(path_str)
        try:
            rel = path.relative_to(root).as_posix()
        except ValueError:
            continue
        if matches_patterns(rel, patterns):
            events.append(ChangeEvent(path=path, kind=kind))
    return events


class ChangeWatcher:
    """Watches a directory and yields change events for matching files.

    Runs ``awatch`` on the current event loop.  ``awatch`` is driven with
    ``yield_on_timeout`` so that its first (possibly empty) batch marks the
    moment the OS watch is live; that is when ``on_ready`` fires.

    Args:
        root: Directory to watch (absolute).
        patterns: Root-relative glob patterns selecting files of interest.
        debounce: Milliseconds watchfiles groups events over.
        poll_ms: Idle wake-up interval; bounds how late ``ready`` and
            ``stop()`` are observed.

    """

    def __init__(
        self,
        root: Path,
        patterns: Iterable[str] = DEFAULT_PATTERNS,
        *,
        debounce: int = 300,
        poll_ms: int = 200,
    ) -> None:
        self._root = root
        self._patterns = tuple(patterns)
        self._debounce = debounce
        self._poll_ms = poll_ms
        self._stop_event = asyncio.Event()
        self._running = False

    @property
    def root(self) -> Path:
        return self._root

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    @property
    def is_running(self) -> bool:
        """Whether a ``changes()`` iteration is active."""
        return self._running

    def stop(self) -> None:
        """Signal the watch loop to finish after its current batch."""
        self._stop_event.set()

    async def changes(
        self, on_ready: Callable[[], None] | None = None
    ) -> AsyncIterator[ChangeEvent]:
        """Async iterator yielding ChangeEvents until ``stop()`` is called."""
        ready = False
        self._running = True
        try:
            async for raw_changes in awatch(
                self._root,
                stop_event=self._stop_event,
                debounce=self._debounce,
                rust_timeout=self._poll_ms,
                yield_on_timeout=True,
            ):
                if not ready:
                    ready = True
                    if on_ready is not None:
                        on_ready()
                if self._stop_event.is_set():
                    break
                for event in to_events(raw_changes, self._root, self._patterns):
                    yield event
        finally:
            self._running = False
