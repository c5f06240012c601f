"""Custom exceptions for model, repository and configuration layers."""


class ModelError(Exception):
    """Base class for model-related failures."""


class ModelValidationError(ModelError):
    """Raised when model data fails custom business validation."""


class ModelNotFoundError(ModelError):
    """Raised when a requested document does not exist."""


class VersionConflictError(ModelError):
    """Raised when optimistic concurrency version checks fail."""


class ConfigurationError(ModelError):
    """Raised when the active scoring configuration cannot be changed as requested."""


class ProfileNotFoundError(ConfigurationError, ModelNotFoundError):
    """Raised when a scoring profile id is unknown."""


class DefaultProfileError(ConfigurationError):
    """Raised when an operation would remove the designated default profile."""
