"""
Base model class for activemodels.

Provides an active-record style interface over a PropertyCollection: typed
attributes with change tracking, construction from query data, and lazily
loaded relationships.
"""

import logging
import math
import threading
import weakref
from collections.abc import Mapping
from enum import IntFlag
from typing import Any, Callable, ClassVar, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from activemodels.config import Config
from activemodels.exceptions import MissingCapabilityError
from activemodels.models.collection import PropertyCollection
from activemodels.models.definition import PropertyDefinition, PropertyType
from activemodels.relationships import (
    Fetchable,
    RelationshipCollection,
    RelationshipDefinition,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Model")


class BuildMode(IntFlag):
    """
    Strictness of from_data() about keys in the data.

    The flags combine: ``IGNORE_MISSING | IGNORE_EXTRA`` tolerates both.
    """

    STRICT = 0
    IGNORE_MISSING = 1
    IGNORE_EXTRA = 2


# Definitions are built once per model class and shared by all its instances
_registry_lock = threading.Lock()
_property_registry: "weakref.WeakKeyDictionary[type, Mapping[str, PropertyDefinition]]" = weakref.WeakKeyDictionary()
_relationship_registry: "weakref.WeakKeyDictionary[type, Mapping[str, RelationshipDefinition]]" = weakref.WeakKeyDictionary()

_FALSY_STRINGS = frozenset({"", "0", "false", "off", "no", "n", "f"})

_int_adapter = TypeAdapter(int)
_float_adapter = TypeAdapter(float)
_str_adapter = TypeAdapter(str, config=ConfigDict(coerce_numbers_to_str=True))
_bool_adapter = TypeAdapter(bool)


def _cast_int(value: Any) -> int:
    # Fractional numbers truncate toward zero
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    try:
        return _int_adapter.validate_python(value)
    except ValidationError:
        if isinstance(value, str):
            number = _float_adapter.validate_python(value)
            if math.isfinite(number):
                return int(number)
        raise


def _cast_str(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else ""
    return _str_adapter.validate_python(value)


def _cast_bool(value: Any) -> bool:
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        if value.strip().lower() in _FALSY_STRINGS:
            return False
        # Unrecognized strings are false
        try:
            return _bool_adapter.validate_python(value.strip())
        except ValidationError:
            return False
    return _bool_adapter.validate_python(value)


def _cast_array(value: Any) -> Any:
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    return [value]


_SCALAR_CASTS: dict[PropertyType, Callable[[Any], Any]] = {
    PropertyType.INT: _cast_int,
    PropertyType.FLOAT: _float_adapter.validate_python,
    PropertyType.STRING: _cast_str,
    PropertyType.BOOL: _cast_bool,
    PropertyType.ARRAY: _cast_array,
}


def _memoize(registry: "weakref.WeakKeyDictionary", model_class: type, build: Callable[[], Mapping]) -> Mapping:
    """Read-through cache: the first successful build for a class wins."""
    cached = registry.get(model_class)
    if cached is not None:
        return cached

    built = build()
    with _registry_lock:
        cached = registry.setdefault(model_class, built)

    if cached is built:
        logger.debug(f"Built {len(built)} definitions for {model_class.__name__}")
    return cached


def _declared(model_class: type, attribute: str) -> dict[str, Any]:
    """Merge a declarative class attribute across the MRO, subclasses winning."""
    merged: dict[str, Any] = {}
    for base in reversed(model_class.__mro__):
        merged.update(vars(base).get(attribute) or {})
    return merged


class Model:
    """
    Base model class for activemodels.

    Subclasses declare their properties with shorthands in ``properties``
    and/or full definitions returned from ``define_properties()``. The
    programmatic definitions win when a key is declared in both.

    Example:
        >>> class Product(Model):
        ...     properties = {
        ...         "id": "int",
        ...         "name": ("string", "Untitled"),
        ...     }
        ...
        ...     @classmethod
        ...     def define_properties(cls):
        ...         return {"price": PropertyDefinition().type("float").required()}
        ...
        >>> product = Product(name="Lamp", price=5.99)
        >>> product.price = 7.99
        >>> product.get_dirty()
        {'price': 7.99}
    """

    # Shorthand property definitions: name -> type, or name -> (type, default)
    properties: ClassVar[dict[str, Any]] = {}

    # Relationship definitions: name -> kind, or name -> RelationshipDefinition
    relationships: ClassVar[dict[str, Any]] = {}

    # Property holding the identity of a stored record
    primary_key: ClassVar[str] = "id"

    # Hook lists (populated by __init_subclass__)
    _before_save_hooks: ClassVar[list[Callable[["Model"], None]]] = []
    _after_save_hooks: ClassVar[list[Callable[["Model"], None]]] = []
    _after_load_hooks: ClassVar[list[Callable[["Model"], None]]] = []
    _relationship_loaders: ClassVar[dict[str, Callable[["Model"], Any]]] = {}

    def __init_subclass__(cls, **kwargs: Any):
        """Collect hook-decorated methods from the class and its mixins."""
        super().__init_subclass__(**kwargs)

        cls._before_save_hooks = []
        cls._after_save_hooks = []
        cls._after_load_hooks = []
        cls._relationship_loaders = {}

        # Walk bases first so hooks run in declaration order, resolving each
        # name on cls so that overrides replace inherited hooks
        seen: set[str] = set()
        for base in reversed(cls.__mro__):
            for attr_name in vars(base):
                if attr_name.startswith('__') or attr_name in seen:
                    continue
                seen.add(attr_name)

                attr = getattr(cls, attr_name, None)
                if not callable(attr):
                    continue

                if getattr(attr, '_is_before_save_hook', False):
                    cls._before_save_hooks.append(attr)
                elif getattr(attr, '_is_after_save_hook', False):
                    cls._after_save_hooks.append(attr)
                elif getattr(attr, '_is_after_load_hook', False):
                    cls._after_load_hooks.append(attr)

                loader_for = getattr(attr, '_relationship_loader_for', None)
                if loader_for is not None:
                    cls._relationship_loaders[loader_for] = attr

    def __init__(self, attributes: Optional[Mapping[str, Any]] = None, /, **kwargs: Any):
        """
        Initialize the model.

        Args:
            attributes: Initial attribute values
            **kwargs: More initial attribute values, merged over ``attributes``

        Raises:
            InvalidArgumentError: For unknown attributes, missing required
                attributes or invalid values
        """
        initial = {**(attributes or {}), **kwargs}

        object.__setattr__(self, '_persisted', False)
        object.__setattr__(
            self,
            '_properties',
            PropertyCollection.from_property_definitions(self.get_property_definitions(), initial),
        )
        object.__setattr__(
            self,
            '_relationships',
            RelationshipCollection.from_relationship_definitions(self.get_relationship_definitions()),
        )

        self.after_construct()

    def after_construct(self) -> None:
        """Override to normalize or validate the model once it is constructed."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"

    # === Definitions ===

    @classmethod
    def define_properties(cls) -> dict[str, Any]:
        """Override to declare property definitions programmatically."""
        return {}

    @classmethod
    def define_relationships(cls) -> dict[str, Any]:
        """Override to declare relationship definitions programmatically."""
        return {}

    @classmethod
    def _build_property_definitions(cls) -> Mapping[str, PropertyDefinition]:
        merged = {**_declared(cls, 'properties'), **cls.define_properties()}
        definitions: dict[str, PropertyDefinition] = {}

        for key, definition in merged.items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Property key must be a string.")

            if not isinstance(definition, PropertyDefinition):
                definition = PropertyDefinition.from_shorthand(definition)

            definitions[key] = definition.lock()

        return definitions

    @classmethod
    def _build_relationship_definitions(cls) -> Mapping[str, RelationshipDefinition]:
        merged = {**_declared(cls, 'relationships'), **cls.define_relationships()}
        definitions: dict[str, RelationshipDefinition] = {}

        for key, definition in merged.items():
            if not isinstance(key, str) or not key:
                Config.raise_invalid_argument("Relationship key must be a string.")

            if not isinstance(definition, RelationshipDefinition):
                definition = RelationshipDefinition.from_shorthand(key, definition)

            definitions[key] = definition.lock()

        return definitions

    @classmethod
    def get_property_definitions(cls) -> Mapping[str, PropertyDefinition]:
        """Get the merged, locked property definitions of this model class."""
        return _memoize(_property_registry, cls, cls._build_property_definitions)

    @classmethod
    def get_relationship_definitions(cls) -> Mapping[str, RelationshipDefinition]:
        """Get the merged, locked relationship definitions of this model class."""
        return _memoize(_relationship_registry, cls, cls._build_relationship_definitions)

    @classmethod
    def get_property_definition(cls, key: str) -> PropertyDefinition:
        """
        Get the definition of one property.

        Raises:
            InvalidArgumentError: If the property does not exist
        """
        definition = cls.get_property_definitions().get(key)
        if definition is None:
            Config.raise_invalid_argument(f"Property {key} does not exist.")
        return definition

    @classmethod
    def property_keys(cls) -> list[str]:
        return list(cls.get_property_definitions())

    @classmethod
    def has_property(cls, key: str) -> bool:
        return key in cls.get_property_definitions()

    @classmethod
    def has_relationship(cls, key: str) -> bool:
        return key in cls.get_relationship_definitions()

    @classmethod
    def is_property_type_valid(cls, key: str, value: Any) -> bool:
        """Check a value against a property's definition without assigning it."""
        return cls.get_property_definition(key).is_valid_value(value)

    # === Attributes ===

    def fill(self: M, attributes: Mapping[str, Any]) -> M:
        """
        Set several attributes at once.

        Nothing is changed if any key is unknown or any value is rejected.
        """
        self._properties.set_values(attributes)
        return self

    def get_attribute(self, key: str, default: Any = None) -> Any:
        """
        Get an attribute value, or ``default`` if it is not set.

        Raises:
            InvalidArgumentError: If the property does not exist
        """
        prop = self._properties.get_or_fail(key)
        return prop.get_value() if prop.is_set() else default

    def set_attribute(self: M, key: str, value: Any) -> M:
        """
        Set an attribute value.

        Raises:
            InvalidArgumentError: If the property does not exist or the value is invalid
            ReadOnlyPropertyError: If the property is readonly
        """
        self._properties.get_or_fail(key).set_value(value)
        return self

    def set_attributes(self: M, attributes: Mapping[str, Any]) -> M:
        return self.fill(attributes)

    def unset_attribute(self, key: str) -> None:
        self._properties.unset_property(key)

    def is_set(self, key: str) -> bool:
        """Whether an attribute holds a value. None counts as a value."""
        return self._properties.is_set(key)

    def get_dirty(self) -> dict[str, Any]:
        """Get the attributes changed since the last commit."""
        return self._properties.get_dirty_values()

    def get_original(self, key: Optional[str] = None) -> Any:
        """Get the original value of one attribute, or of all of them."""
        if key is None:
            return self._properties.get_original_values()
        return self._properties.get_or_fail(key).get_original_value()

    def is_dirty(self, key: Optional[str] = None) -> bool:
        if key is None:
            return self._properties.is_dirty()
        return self._properties.get_or_fail(key).is_dirty()

    def is_clean(self, key: Optional[str] = None) -> bool:
        return not self.is_dirty(key)

    def commit_changes(self) -> None:
        """Make the current values the new original values."""
        self._properties.commit_changed_properties()

    def sync_original(self: M) -> M:
        """Alias of commit_changes() returning the model."""
        self.commit_changes()
        return self

    def revert_changes(self) -> None:
        """Discard every change since the last commit."""
        self._properties.revert_changed_properties()

    def revert_change(self, key: str) -> None:
        self._properties.revert_property(key)

    def to_dict(self) -> dict[str, Any]:
        """Get the values of every set attribute."""
        return self._properties.get_values()

    def get_primary_value(self) -> Any:
        """Get the value of the primary key property, or None."""
        if not self.has_property(self.primary_key):
            return None
        return self.get_attribute(self.primary_key)

    def is_persisted(self) -> bool:
        """Whether the model was loaded from or saved to storage."""
        return self._persisted

    # === Construction from data ===

    @classmethod
    def _data_to_dict(cls, data: Any) -> dict[str, Any]:
        if isinstance(data, Mapping):
            return dict(data)
        if isinstance(data, Model):
            return data.to_dict()
        if isinstance(data, BaseModel):
            return data.model_dump()
        if isinstance(data, tuple) and hasattr(data, '_asdict'):
            return dict(data._asdict())
        if hasattr(data, '__dict__') and not isinstance(data, type):
            return {key: value for key, value in vars(data).items() if not key.startswith('_')}

        Config.raise_invalid_argument("Query data must be an object or mapping")

    @classmethod
    def cast_value_for_property(cls, definition: PropertyDefinition, value: Any, key: str) -> Any:
        """
        Cast a raw query value for a property.

        Valid values and None pass through. Otherwise the definition's cast
        method is used, then the built-in scalar casts. Override to support
        more types.

        Raises:
            InvalidArgumentError: If the value cannot be cast
        """
        if value is None or definition.is_valid_value(value):
            return value

        if definition.can_cast():
            return definition.cast(value)

        types = definition.get_type()
        if len(types) != 1:
            names = ", ".join(getattr(t, 'value', getattr(t, '__name__', str(t))) for t in types)
            Config.raise_invalid_argument(
                f"Property '{key}' has multiple types: {names}. To support additional types, "
                "override cast_value_for_property() or use cast_with()."
            )

        cast = _SCALAR_CASTS.get(types[0]) if isinstance(types[0], PropertyType) else None
        if cast is None:
            name = getattr(types[0], 'value', getattr(types[0], '__name__', types[0]))
            Config.raise_invalid_argument(
                f"Unexpected type: '{name}'. To support additional types, "
                "override cast_value_for_property() or use cast_with()."
            )

        try:
            return cast(value)
        except ValidationError as e:
            raise Config.get_invalid_argument_exception()(
                f"Property '{key}' value {value!r} cannot be cast to {types[0].value}."
            ) from e

    @classmethod
    def from_data(cls: type[M], data: Any, mode: int = BuildMode.IGNORE_EXTRA) -> M:
        """
        Build a model from query data.

        Args:
            data: Mapping, pydantic model, named tuple or plain object
            mode: BuildMode flags; by default extra keys are ignored and
                missing keys without a default are an error

        Returns:
            Model instance, committed and marked persisted when its primary
            key is set

        Raises:
            InvalidArgumentError: For extra or missing keys (per mode) or
                values that cannot be cast

        Example:
            >>> row = {"id": "1", "name": "Lamp", "price": "5.99"}
            >>> product = Product.from_data(row)
            >>> product.id, product.price, product.is_dirty()
            (1, 5.99, False)
        """
        values = cls._data_to_dict(data)
        definitions = cls.get_property_definitions()
        mode = BuildMode(mode)

        if not mode & BuildMode.IGNORE_EXTRA:
            extra = [key for key in values if key not in definitions]
            if extra:
                Config.raise_invalid_argument(f"Query data contains extra keys: {', '.join(map(str, extra))}")

        if not mode & BuildMode.IGNORE_MISSING:
            missing = [
                key for key, definition in definitions.items()
                if key not in values and not definition.has_default()
            ]
            if missing:
                Config.raise_invalid_argument(f"Query data is missing keys: {', '.join(missing)}")

        attributes = {
            key: cls.cast_value_for_property(definition, values[key], key)
            for key, definition in definitions.items()
            if key in values
        }

        instance = cls(attributes)

        if instance.get_primary_value() is not None:
            instance.commit_changes()
            object.__setattr__(instance, '_persisted', True)

        for hook in cls._after_load_hooks:
            hook(instance)

        return instance

    # === Relationships ===

    def fetch_relationship(self, key: str) -> Any:
        """
        Load a relationship with its registered loader.

        A loader returning a Fetchable is resolved with fetch_one() or
        fetch_many() depending on the relationship kind.

        Raises:
            MissingCapabilityError: If no loader is registered for the relationship
        """
        loader = self._relationship_loaders.get(key)
        if loader is None:
            raise MissingCapabilityError(
                f"No loader registered for relationship {key!r} on {self.__class__.__name__}. "
                f"Decorate a method with @relationship_loader({key!r})."
            )

        result = loader(self)
        if isinstance(result, Fetchable):
            definition = self._relationships.get_or_fail(key).get_definition()
            return result.fetch_one() if definition.is_single() else result.fetch_many()
        return result

    def get_relationship(self, key: str) -> Any:
        """
        Get a relationship value, loading it on first access.

        Raises:
            InvalidArgumentError: If the relationship does not exist
            MissingCapabilityError: If it has to be loaded and no loader is registered
        """
        relationship = self._relationships.get_or_fail(key)
        return relationship.get_value(lambda: self.fetch_relationship(key))

    def set_cached_relationship(self, key: str, value: Any) -> None:
        """
        Store a relationship value without calling its loader.

        Raises:
            InvalidArgumentError: If the relationship does not exist or the
                value does not match its kind
        """
        self._relationships.get_or_fail(key).set_value(value)

    def has_cached_relationship(self, key: str) -> bool:
        return self._relationships.is_loaded(key)

    def purge_relationship(self, key: str) -> None:
        self._relationships.purge(key)

    def purge_relationship_cache(self) -> None:
        self._relationships.purge_all()

    # === Attribute sugar ===

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        if name.startswith('_'):
            raise AttributeError(name)

        cls = type(self)
        if name in cls.get_relationship_definitions():
            return self.get_relationship(name)
        if name in cls.get_property_definitions():
            return self.get_attribute(name)

        raise AttributeError(f"{cls.__name__!r} object has no property or relationship {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        cls = type(self)
        if name.startswith('_'):
            object.__setattr__(self, name, value)
        elif name in cls.get_property_definitions():
            self.set_attribute(name, value)
        elif name in cls.get_relationship_definitions():
            self.set_cached_relationship(name, value)
        elif hasattr(cls, name):
            object.__setattr__(self, name, value)
        else:
            Config.raise_invalid_argument(f"Property {name} does not exist.")

    def __delattr__(self, name: str) -> None:
        cls = type(self)
        if name in cls.get_property_definitions():
            self.unset_attribute(name)
        elif name in cls.get_relationship_definitions():
            self.purge_relationship(name)
        else:
            object.__delattr__(self, name)
