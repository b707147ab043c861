"""
Ordered collection of the properties belonging to one model instance.

The membership of a collection is fixed once it is created. The values of the
properties inside it change freely, subject to each property's definition.
"""

from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from activemodels.config import Config
from activemodels.models.definition import UNSET, PropertyDefinition
from activemodels.models.property import Property

T = TypeVar("T")


class PropertyCollection:
    """
    Mapping of property name to Property, in declaration order.

    Example:
        >>> collection = PropertyCollection.from_property_definitions(
        ...     {"name": PropertyDefinition(), "age": PropertyDefinition().type("int")},
        ...     {"name": "John", "age": 30},
        ... )
        >>> collection.set_values({"age": 31})
        >>> collection.get_dirty_values()
        {'age': 31}
    """

    def __init__(self, properties: Optional[Mapping[str, Property]] = None):
        """
        Initialize the collection.

        Args:
            properties: Mapping of key to Property

        Raises:
            InvalidArgumentError: If a key is not a non-empty string or a value is not a Property
        """
        self._properties: dict[str, Property] = {}

        for key, prop in (properties or {}).items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Property key must be a string.")
            if not isinstance(prop, Property):
                Config.raise_invalid_argument("Property must be an instance of Property.")
            self._properties[key] = prop

    @classmethod
    def from_property_definitions(
        cls,
        definitions: Mapping[str, Any],
        initial_attributes: Optional[Mapping[str, Any]] = None,
    ) -> "PropertyCollection":
        """
        Build a collection from property definitions and initial values.

        Args:
            definitions: Mapping of key to PropertyDefinition or shorthand
            initial_attributes: Initial values; properties not named here use
                their default or stay unset

        Raises:
            InvalidArgumentError: For invalid keys or definitions, unknown
                attributes, missing required attributes, or invalid values
        """
        initial_attributes = dict(initial_attributes or {})

        unknown = [key for key in initial_attributes if key not in definitions]
        if unknown:
            Config.raise_invalid_argument(f"Property {unknown[0]} does not exist.")

        properties: dict[str, Property] = {}
        for key, definition in definitions.items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Property key must be a string.")

            if not isinstance(definition, PropertyDefinition):
                definition = PropertyDefinition.from_shorthand(definition)

            if definition.is_required() and key not in initial_attributes:
                Config.raise_invalid_argument(f"Required property {key} is missing.")

            properties[key] = Property(key, definition, initial_attributes.get(key, UNSET))

        return cls(properties)

    def __repr__(self) -> str:
        return f"PropertyCollection({list(self._properties)})"

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def items(self):
        return self._properties.items()

    def count(self) -> int:
        return len(self._properties)

    def is_empty(self) -> bool:
        return not self._properties

    def has(self, key: str) -> bool:
        return key in self._properties

    def get(self, key: str) -> Optional[Property]:
        return self._properties.get(key)

    def get_or_fail(self, key: str) -> Property:
        """
        Get a property by key.

        Raises:
            InvalidArgumentError: If the property does not exist
        """
        prop = self._properties.get(key)
        if prop is None:
            Config.raise_invalid_argument(f"Property {key} does not exist.")
        return prop

    def is_set(self, key: str) -> bool:
        return self.get_or_fail(key).is_set()

    def set_values(self, values: Mapping[str, Any]) -> None:
        """
        Set several property values at once.

        All-or-nothing: if any key is unknown or any value is rejected, the
        values assigned earlier in the same call are restored.
        """
        targets = [(self.get_or_fail(key), value) for key, value in values.items()]
        snapshot = [(prop, prop.snapshot()) for prop, _ in targets]

        try:
            for prop, value in targets:
                prop.set_value(value)
        except Exception:
            for prop, previous in reversed(snapshot):
                prop.restore(previous)
            raise

    def get_values(self) -> dict[str, Any]:
        """Current values of every set property."""
        return {key: prop.get_value() for key, prop in self._properties.items() if prop.is_set()}

    def get_original_values(self) -> dict[str, Any]:
        """Original values of every property that has one."""
        return {
            key: prop.get_original_value()
            for key, prop in self._properties.items()
            if prop.has_original_value()
        }

    def get_dirty_properties(self) -> "PropertyCollection":
        return self.filter(lambda prop: prop.is_dirty())

    def get_dirty_values(self) -> dict[str, Any]:
        return {key: prop.get_value() for key, prop in self._properties.items() if prop.is_dirty()}

    def is_dirty(self) -> bool:
        return any(prop.is_dirty() for prop in self._properties.values())

    def commit_changed_properties(self) -> None:
        for prop in self._properties.values():
            prop.commit_changes()

    def revert_changed_properties(self) -> None:
        for prop in self._properties.values():
            prop.revert_changes()

    def revert_property(self, key: str) -> None:
        self.get_or_fail(key).revert_changes()

    def unset_property(self, key: str) -> None:
        self.get_or_fail(key).unset()

    def get_required_properties(self) -> "PropertyCollection":
        return self.filter(lambda prop: prop.get_definition().is_required())

    def get_required_on_save_properties(self) -> "PropertyCollection":
        return self.filter(lambda prop: prop.get_definition().is_required_on_save())

    # === Traversal ===

    def filter(self, predicate: Callable[[Property], bool]) -> "PropertyCollection":
        """Get a new collection of the properties matching the predicate."""
        return PropertyCollection(
            {key: prop for key, prop in self._properties.items() if predicate(prop)}
        )

    def map(self, fn: Callable[[Property], T]) -> dict[str, T]:
        return {key: fn(prop) for key, prop in self._properties.items()}

    def reduce(self, fn: Callable[[Any, Property], Any], initial: Any = None) -> Any:
        carry = initial
        for prop in self._properties.values():
            carry = fn(carry, prop)
        return carry

    def tap(self, fn: Callable[[Property], Any]) -> "PropertyCollection":
        """Call fn for each property and return the collection."""
        for prop in self._properties.values():
            fn(prop)
        return self
