"""Shared type definitions for whisker."""

from collections.abc import Awaitable, Callable
from typing import Literal

# Low-level states reported by a client session
type SessionStatus = Literal["connecting", "connected", "started", "retry", "error"]

# Statuses the controller reports to the panel
type StatusType = Literal[
    "starting", "disabled", "connecting", "connected", "started", "retry", "error"
]

# Recommended panel action attached to a status
type StatusAction = Literal["retry", "enable"]

# Async callable returning the hostname of the current page
type HostSource = Callable[[], Awaitable[str]]
