"""
Process-wide configuration for activemodels.

Holds the hook prefix used to namespace hook names and the exception classes
raised for invalid arguments and readonly property violations. Everything here
is meant to be set once at application startup.
"""

import logging
import threading
from typing import ClassVar, NoReturn, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from activemodels.exceptions import (
    ConfigurationError,
    InvalidArgumentError,
    ReadOnlyPropertyError,
)

logger = logging.getLogger(__name__)


class HookPrefix(BaseModel):
    """Validated hook prefix setting."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(
        ...,
        min_length=1,
        pattern=r"^[a-z0-9_-]+$",
        description="Prefix applied to every hook name emitted by the library",
    )


class Config:
    """
    Library configuration.

    Example:
        >>> Config.set_hook_prefix("my_plugin")
        >>> Config.hook_name("model_saved")
        'my_plugin/model_saved'
    """

    _hook_prefix: ClassVar[Optional[HookPrefix]] = None
    _invalid_argument_exception: ClassVar[type[InvalidArgumentError]] = InvalidArgumentError
    _readonly_property_exception: ClassVar[type[ReadOnlyPropertyError]] = ReadOnlyPropertyError
    _lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_hook_prefix(cls) -> str:
        """
        Get the hook prefix.

        Raises:
            ConfigurationError: If the hook prefix has not been set
        """
        if cls._hook_prefix is None:
            raise ConfigurationError(
                "You must provide a hook prefix via Config.set_hook_prefix() "
                "before using the activemodels library."
            )
        return cls._hook_prefix.value

    @classmethod
    def set_hook_prefix(cls, prefix: str) -> None:
        """
        Set the hook prefix. May only be called once per process.

        Args:
            prefix: Lowercase letters, numbers, "_" or "-"

        Raises:
            ConfigurationError: If the prefix has already been set
            InvalidArgumentError: If the prefix contains other characters
        """
        with cls._lock:
            if cls._hook_prefix is not None:
                raise ConfigurationError(
                    f"Config.set_hook_prefix() has already been called and set to {cls._hook_prefix.value}."
                )

            try:
                cls._hook_prefix = HookPrefix(value=prefix)
            except ValidationError as e:
                raise InvalidArgumentError(
                    'Hook prefix must only contain lowercase letters, numbers, "_", or "-".'
                ) from e

        logger.debug(f"Hook prefix set to {prefix!r}")

    @classmethod
    def hook_name(cls, name: str) -> str:
        """Namespace a hook name with the configured prefix."""
        return f"{cls.get_hook_prefix()}/{name}"

    @classmethod
    def get_invalid_argument_exception(cls) -> type[InvalidArgumentError]:
        return cls._invalid_argument_exception

    @classmethod
    def set_invalid_argument_exception(cls, exception_class: type) -> None:
        """
        Override the exception class raised for invalid arguments.

        Raises:
            InvalidArgumentError: If the class does not extend InvalidArgumentError
        """
        if not (isinstance(exception_class, type) and issubclass(exception_class, InvalidArgumentError)):
            raise InvalidArgumentError(
                f"The provided exception class must be or must extend {InvalidArgumentError.__name__}."
            )

        with cls._lock:
            cls._invalid_argument_exception = exception_class

        logger.debug(f"Invalid argument exception set to {exception_class.__name__}")

    @classmethod
    def get_readonly_property_exception(cls) -> type[ReadOnlyPropertyError]:
        return cls._readonly_property_exception

    @classmethod
    def set_readonly_property_exception(cls, exception_class: type) -> None:
        """
        Override the exception class raised for readonly property violations.

        Raises:
            InvalidArgumentError: If the class does not extend ReadOnlyPropertyError
        """
        if not (isinstance(exception_class, type) and issubclass(exception_class, ReadOnlyPropertyError)):
            raise InvalidArgumentError(
                f"The provided exception class must be or must extend {ReadOnlyPropertyError.__name__}."
            )

        with cls._lock:
            cls._readonly_property_exception = exception_class

        logger.debug(f"Readonly property exception set to {exception_class.__name__}")

    @classmethod
    def raise_invalid_argument(cls, message: str) -> NoReturn:
        """Raise the configured invalid argument exception."""
        raise cls._invalid_argument_exception(message)

    @classmethod
    def raise_readonly_property(cls, message: str) -> NoReturn:
        """Raise the configured readonly property exception."""
        raise cls._readonly_property_exception(message)

    @classmethod
    def reset(cls) -> None:
        """Restore the default configuration."""
        with cls._lock:
            cls._hook_prefix = None
            cls._invalid_argument_exception = InvalidArgumentError
            cls._readonly_property_exception = ReadOnlyPropertyError
