"""Tests for whisker._errors."""

from whisker._errors import (
    ConfigError,
    ResourceError,
    StatusError,
    TransportError,
    WhiskerError,
)


class TestErrorHierarchy:
    """All whisker errors inherit from WhiskerError."""

    def test_whisker_error_is_exception(self) -> None:
        assert issubclass(WhiskerError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, WhiskerError)

    def test_resource_error_inherits(self) -> None:
        assert issubclass(ResourceError, WhiskerError)

    def test_status_error_inherits(self) -> None:
        assert issubclass(StatusError, WhiskerError)

    def test_transport_error_inherits(self) -> None:
        assert issubclass(TransportError, WhiskerError)

    def test_catch_all_whisker_errors(self) -> None:
        """All specific errors are catchable via WhiskerError."""
        for error_cls in (ConfigError, ResourceError, StatusError, TransportError):
            try:
                raise error_cls("test")
            except WhiskerError:
                pass  # Expected — all caught by base class
