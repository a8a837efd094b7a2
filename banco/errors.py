"""Exceptions raised by the banco package."""


class InvalidConfigurationError(ValueError):
    """Raised when a component is constructed with an unusable setting."""


class RepositoryError(Exception):
    """Raised when a write to the backing store fails."""
