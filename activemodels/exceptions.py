"""
Exceptions raised by the activemodels library.
"""


class ModelsError(Exception):
    """Base exception for model errors."""

    pass


class InvalidArgumentError(ModelsError, ValueError):
    """
    Raised for malformed definitions, unknown keys, and values that fail
    type or nullability validation.
    """

    pass


class ReadOnlyPropertyError(ModelsError, AttributeError):
    """Raised when a readonly property is modified after construction."""

    pass


class LockedDefinitionError(ModelsError, RuntimeError):
    """Raised when a locked property or relationship definition is mutated."""

    pass


class MissingCapabilityError(ModelsError, NotImplementedError):
    """Raised when a model or repository lacks an operation it is asked to perform."""

    pass


class ConfigurationError(ModelsError, RuntimeError):
    """Raised for misuse of the process-wide configuration."""

    pass


class RepositoryError(ModelsError):
    """Base exception for repository errors."""

    pass


class NotFoundError(RepositoryError):
    """Record not found in the repository."""

    pass


class DuplicateKeyError(RepositoryError):
    """A record with the same primary key already exists."""

    pass
