"""Startup banner — mode-aware status output on stderr.

Detects ``NO_COLOR`` / ``TERM`` for a plain-text fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisker.config import WhiskerConfig


def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""

_MODE_STYLES: dict[str, tuple[str, str]] = {
    "serve": (_GREEN, "serve"),
    "connect": (_CYAN, "connect"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def print_banner(
    config: WhiskerConfig,
    *,
    url: str | None = None,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the server startup banner to stderr.

    Args:
        config: Resolved WhiskerConfig.
        url: Websocket URL actually bound (defaults to ``config.url``).
        load_ms: Time from launch until the watcher was live.
        warnings: Optional warning messages to display.

    """
    from whisker import __version__

    header = f"  {_BOLD}whisker{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge('serve')}"
    lines: list[str] = ["", header, f"  {_DIM}{'─' * 43}{_RESET}"]

    lines.append(f"  {_DIM}├─{_RESET} root: {_DIM}{config.root}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} files: {', '.join(config.patterns)}")
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET}{timing}")
    lines.append("")
    lines.append(f"  {_BOLD}{_CYAN}{url or config.url}{_RESET}")
    lines.append("")
    lines.append(f"  {_DIM}Watching for changes...{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")
    print("\n".join(lines), file=sys.stderr)


def print_connect_banner(hostname: str, url: str) -> None:
    """Print the one-line banner for ``whisker connect``."""
    print(
        f"  {_BOLD}whisker{_RESET} {_mode_badge('connect')} {hostname} -> {_DIM}{url}{_RESET}",
        file=sys.stderr,
    )
