"""
Relationship definitions for activemodels.

A RelationshipDefinition describes a named link from a model to other models:
its kind, whether loaded values are cached, and how raw loaded values are
validated and hydrated. Like property definitions, relationship definitions
are locked before being shared by model instances.
"""

from enum import Enum
from typing import Any, Callable, Optional, Union

from activemodels.config import Config
from activemodels.exceptions import LockedDefinitionError


class RelationshipKind(str, Enum):
    """Supported relationship kinds."""

    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    BELONGS_TO_MANY = "belongs_to_many"
    MANY_TO_MANY = "many_to_many"

    def is_single(self) -> bool:
        return self in (RelationshipKind.HAS_ONE, RelationshipKind.BELONGS_TO)

    def is_multiple(self) -> bool:
        return not self.is_single()


def is_relationship_item(value: Any) -> bool:
    """Default validator: accepts models and lazy model references."""
    from activemodels.models.base import Model
    from activemodels.models.lazy import LazyModel

    return isinstance(value, (Model, LazyModel))


def hydrate_relationship_item(value: Any) -> Any:
    """Default hydrator: resolves lazy model references."""
    from activemodels.models.lazy import LazyModel

    if isinstance(value, LazyModel):
        return value.resolve()
    return value


class RelationshipDefinition:
    """
    Schema for a single model relationship.

    Example:
        >>> definition = RelationshipDefinition("posts").has_many().disable_caching()
        >>> definition.is_multiple()
        True
    """

    def __init__(self, key: str, kind: Optional[Union[RelationshipKind, str]] = None):
        self._key = key
        self._kind = RelationshipKind.HAS_ONE
        self._caching = True
        self._validate_with: Callable[[Any], bool] = is_relationship_item
        self._hydrate_with: Callable[[Any], Any] = hydrate_relationship_item
        self._locked = False

        if kind is not None:
            self._kind = self._parse_kind(kind)

    def __repr__(self) -> str:
        return f"RelationshipDefinition(key={self._key!r}, kind={self._kind.value!r})"

    @staticmethod
    def _parse_kind(kind: Union[RelationshipKind, str]) -> RelationshipKind:
        try:
            return RelationshipKind(kind)
        except ValueError:
            Config.raise_invalid_argument(f"Invalid relationship type: {kind}")

    @classmethod
    def from_shorthand(cls, key: str, kind: Union[RelationshipKind, str]) -> "RelationshipDefinition":
        return cls(key, kind)

    def _check_lock(self) -> None:
        if self._locked:
            raise LockedDefinitionError("Relationship is locked")

    def _set_kind(self, kind: RelationshipKind) -> "RelationshipDefinition":
        self._check_lock()
        self._kind = kind
        return self

    def has_one(self) -> "RelationshipDefinition":
        return self._set_kind(RelationshipKind.HAS_ONE)

    def has_many(self) -> "RelationshipDefinition":
        return self._set_kind(RelationshipKind.HAS_MANY)

    def belongs_to(self) -> "RelationshipDefinition":
        return self._set_kind(RelationshipKind.BELONGS_TO)

    def belongs_to_many(self) -> "RelationshipDefinition":
        return self._set_kind(RelationshipKind.BELONGS_TO_MANY)

    def many_to_many(self) -> "RelationshipDefinition":
        return self._set_kind(RelationshipKind.MANY_TO_MANY)

    def enable_caching(self) -> "RelationshipDefinition":
        self._check_lock()
        self._caching = True
        return self

    def disable_caching(self) -> "RelationshipDefinition":
        """Load the relationship on every access instead of once."""
        self._check_lock()
        self._caching = False
        return self

    def validate_with(self, validator: Callable[[Any], bool]) -> "RelationshipDefinition":
        """Set the predicate used to validate each related item."""
        self._check_lock()
        self._validate_with = validator
        return self

    def hydrate_with(self, hydrator: Callable[[Any], Any]) -> "RelationshipDefinition":
        """Set the function turning each stored item into the value handed to callers."""
        self._check_lock()
        self._hydrate_with = hydrator
        return self

    def lock(self) -> "RelationshipDefinition":
        self._locked = True
        return self

    def get_key(self) -> str:
        return self._key

    def get_kind(self) -> RelationshipKind:
        return self._kind

    def is_single(self) -> bool:
        return self._kind.is_single()

    def is_multiple(self) -> bool:
        return self._kind.is_multiple()

    def has_caching_enabled(self) -> bool:
        return self._caching

    def get_validate_with(self) -> Callable[[Any], bool]:
        return self._validate_with

    def get_hydrate_with(self) -> Callable[[Any], Any]:
        return self._hydrate_with

    def is_locked(self) -> bool:
        return self._locked
