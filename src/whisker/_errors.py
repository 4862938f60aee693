"""Whisker error hierarchy.

All whisker-specific errors inherit from WhiskerError for easy catching.
"""


class WhiskerError(Exception):
    """Base error for all whisker operations."""


class ConfigError(WhiskerError):
    """Invalid or missing server configuration."""


class ResourceError(WhiskerError):
    """A resolver produced a malformed resource record."""


class StatusError(WhiskerError):
    """A session reported a status outside the known vocabulary."""


class TransportError(WhiskerError):
    """The update server could not be started or used."""
