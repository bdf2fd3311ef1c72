"""Exceptions raised by progress tracking components."""


class ProgressError(Exception):
    """Base exception for progress tracking operations."""
    pass


class ConfigurationError(ProgressError, ValueError):
    """Raised when a component is constructed with invalid arguments."""
    pass


class StateError(ProgressError, RuntimeError):
    """Raised when a call violates the tracked process protocol."""
    pass
