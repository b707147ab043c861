"""
A relationship slot on a model instance and its loaded value.
"""

import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from activemodels.config import Config
from activemodels.relationships.definition import RelationshipDefinition

logger = logging.getLogger(__name__)

Loader = Callable[[], Any]


@runtime_checkable
class Fetchable(Protocol):
    """
    Anything a relationship loader may return instead of a value.

    Single relationships are resolved with fetch_one(), multiple ones with
    fetch_many().
    """

    def fetch_one(self) -> Optional[Any]:
        ...

    def fetch_many(self) -> Optional[list[Any]]:
        ...


class Relationship:
    """
    Loads, caches and hydrates the value of one relationship.

    The stored (raw) value is what the loader returned: a model, lazy
    references, a list of either, or None. Callers receive the hydrated value,
    where lazy references have been resolved.
    """

    def __init__(self, key: str, definition: RelationshipDefinition):
        self._key = key
        self._definition = definition.lock()
        self._value: Any = None
        self._loaded = False

    def __repr__(self) -> str:
        return f"Relationship(key={self._key!r}, loaded={self._loaded})"

    def get_definition(self) -> RelationshipDefinition:
        return self._definition

    def get_key(self) -> str:
        return self._key

    def is_loaded(self) -> bool:
        return self._loaded

    def get_value(self, loader: Loader) -> Any:
        """
        Get the hydrated value, calling the loader if needed.

        With caching disabled the loader is called on every access and
        nothing is stored.
        """
        if not self._definition.has_caching_enabled():
            value = loader()
            self._validate(value)
            return self._hydrate(value)

        if not self._loaded:
            logger.debug(f"Loading relationship {self._key!r}")
            self.set_value(loader())

        return self._hydrate(self._value)

    def get_raw_value(self, loader: Loader) -> Any:
        """Get the stored value without resolving lazy references."""
        if not self._definition.has_caching_enabled():
            value = loader()
            self._validate(value)
            return value

        if not self._loaded:
            self.set_value(loader())
        return self._value

    def set_value(self, value: Any) -> "Relationship":
        """
        Store a value and mark the relationship as loaded.

        Raises:
            InvalidArgumentError: If the value does not match the relationship's arity
        """
        self._validate(value)

        if value is not None and self._definition.is_multiple():
            value = list(value)

        self._value = value
        self._loaded = True
        return self

    def purge(self) -> None:
        """Forget the loaded value."""
        self._value = None
        self._loaded = False

    def _validate(self, value: Any) -> None:
        if value is None:
            return

        is_valid = self._definition.get_validate_with()

        if self._definition.is_single():
            if not is_valid(value):
                Config.raise_invalid_argument("Single relationship value must be a Model instance or null.")
            return

        if not isinstance(value, (list, tuple)):
            Config.raise_invalid_argument("Multiple relationship value must be an array or null.")

        if not all(is_valid(item) for item in value):
            Config.raise_invalid_argument("Multiple relationship value must be an array of Model instances.")

    def _hydrate(self, value: Any) -> Any:
        if value is None:
            return None

        hydrate = self._definition.get_hydrate_with()

        if self._definition.is_multiple():
            hydrated = (hydrate(item) for item in value)
            return [item for item in hydrated if item is not None]

        return hydrate(value)
