"""Whisker server configuration.

WhiskerConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from whisker._errors import ConfigError

DEFAULT_PATTERNS: tuple[str, ...] = ("**/*.js", "**/*.css")


@dataclass(frozen=True, slots=True)
class WhiskerConfig:
    """Configuration for a whisker update server.

    Attributes:
        root: Directory whose files are watched and resolved.
              Always resolved to an absolute path on construction.
        host: Bind address for the websocket server.
        port: Bind port for the websocket server.
        patterns: Glob patterns, relative to root, selecting watched files.
        verbose: Print pipeline and server activity to stderr.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "localhost"
    port: int = 8888
    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    verbose: bool = False

    def __post_init__(self) -> None:
        # Resolve root to absolute so that watchfiles (which returns
        # absolute paths) can be compared via Path.relative_to().
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if isinstance(self.patterns, str):
            object.__setattr__(self, "patterns", (self.patterns,))
        elif not isinstance(self.patterns, tuple):
            object.__setattr__(self, "patterns", tuple(self.patterns))
        if not isinstance(self.port, int) or isinstance(self.port, bool) or self.port < 0:
            msg = f"port must be a non-negative integer, got {self.port!r}"
            raise ConfigError(msg)
        if not self.patterns:
            msg = "at least one watch pattern is required"
            raise ConfigError(msg)

    @property
    def url(self) -> str:
        """Websocket URL clients connect to."""
        return f"ws://{self.host}:{self.port}/"
