"""
Collection of the relationships belonging to one model instance.
"""

from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from activemodels.config import Config
from activemodels.relationships.definition import RelationshipDefinition
from activemodels.relationships.relationship import Relationship

T = TypeVar("T")


class RelationshipCollection:
    """Mapping of relationship name to Relationship, in declaration order."""

    def __init__(self, relationships: Optional[Mapping[str, Relationship]] = None):
        self._relationships: dict[str, Relationship] = {}

        for key, relationship in (relationships or {}).items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Relationship key must be a string.")
            if not isinstance(relationship, Relationship):
                Config.raise_invalid_argument("Relationship must be an instance of Relationship.")
            self._relationships[key] = relationship

    @classmethod
    def from_relationship_definitions(cls, definitions: Mapping[str, Any]) -> "RelationshipCollection":
        """
        Build a collection from relationship definitions or kind shorthands.

        Raises:
            InvalidArgumentError: For invalid keys or kinds
        """
        relationships: dict[str, Relationship] = {}

        for key, definition in definitions.items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Relationship key must be a string.")

            if not isinstance(definition, RelationshipDefinition):
                definition = RelationshipDefinition.from_shorthand(key, definition)

            relationships[key] = Relationship(key, definition)

        return cls(relationships)

    def __repr__(self) -> str:
        return f"RelationshipCollection({list(self._relationships)})"

    def __len__(self) -> int:
        return len(self._relationships)

    def __iter__(self) -> Iterator[str]:
        return iter(self._relationships)

    def __contains__(self, key: object) -> bool:
        return key in self._relationships

    def count(self) -> int:
        return len(self._relationships)

    def has(self, key: str) -> bool:
        return key in self._relationships

    def get(self, key: str) -> Optional[Relationship]:
        return self._relationships.get(key)

    def get_or_fail(self, key: str) -> Relationship:
        """
        Get a relationship by key.

        Raises:
            InvalidArgumentError: If the relationship does not exist
        """
        relationship = self._relationships.get(key)
        if relationship is None:
            Config.raise_invalid_argument(f"Relationship {key} does not exist.")
        return relationship

    def get_all(self) -> dict[str, Relationship]:
        return dict(self._relationships)

    def is_loaded(self, key: str) -> bool:
        return self.get_or_fail(key).is_loaded()

    def purge(self, key: str) -> None:
        self.get_or_fail(key).purge()

    def purge_all(self) -> None:
        for relationship in self._relationships.values():
            relationship.purge()

    def filter(self, predicate: Callable[[Relationship], bool]) -> "RelationshipCollection":
        return RelationshipCollection(
            {key: rel for key, rel in self._relationships.items() if predicate(rel)}
        )

    def map(self, fn: Callable[[Relationship], T]) -> dict[str, T]:
        return {key: fn(rel) for key, rel in self._relationships.items()}

    def tap(self, fn: Callable[[Relationship], Any]) -> "RelationshipCollection":
        for relationship in self._relationships.values():
            fn(relationship)
        return self
