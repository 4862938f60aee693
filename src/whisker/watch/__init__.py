"""Watch layer — filesystem change detection for the update pipeline."""

from whisker.watch.watcher import ChangeEvent, ChangeWatcher, matches_patterns

__all__ = [
    "ChangeEvent",
    "ChangeWatcher",
    "matches_patterns",
]
