"""Console logging for whisker components.

Lines go to stderr, prefixed with the component name, and are only printed
in verbose mode.  The client side passes its own sink so log lines can be
forwarded to the panel instead.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

type LogFunc = Callable[..., None]


def _stderr_sink(line: str) -> None:
    print(line, file=sys.stderr)


def make_logger(
    verbose: bool,
    module: str,
    sink: Callable[[str], None] | None = None,
) -> LogFunc:
    """Return a ``log(message, *details)`` function for *module*.

    Args:
        verbose: When False the returned function discards everything.
        module: Component name, rendered as ``[module]``.
        sink: Receives each formatted line.  Defaults to stderr.

    """
    write = sink or _stderr_sink
    prefix = f"[{module}]"

    def log(message: object, *details: object) -> None:
        if not verbose:
            return
        parts = [prefix, str(message), *(str(d) for d in details)]
        write(" ".join(parts))

    return log
