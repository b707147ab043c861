"""
Property definitions for activemodels.

A PropertyDefinition is the schema of a single model attribute: the types it
accepts, whether it is nullable, its default, and the required/readonly flags.
Definitions are built once per model class, locked, and then shared by every
instance of that class.
"""

import re
from enum import Enum
from typing import Any, Callable, Optional, Union

from activemodels.config import Config
from activemodels.exceptions import LockedDefinitionError


class _Unset:
    """Marker for "no value", distinct from None."""

    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class PropertyType(str, Enum):
    """Primitive kinds a property may accept."""

    INT = "int"
    STRING = "string"
    BOOL = "bool"
    ARRAY = "array"
    FLOAT = "float"
    OBJECT = "object"


# Named types are either a class or a class name
TypeTag = Union[PropertyType, type, str]

_BUILTIN_KINDS: dict[type, PropertyType] = {
    int: PropertyType.INT,
    str: PropertyType.STRING,
    bool: PropertyType.BOOL,
    float: PropertyType.FLOAT,
    list: PropertyType.ARRAY,
    dict: PropertyType.ARRAY,
    object: PropertyType.OBJECT,
}

_CLASS_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


def kind_of(value: Any) -> PropertyType:
    """
    Get the primitive kind of a value.

    bool is checked before int since bool subclasses int.
    """
    if isinstance(value, bool):
        return PropertyType.BOOL
    if isinstance(value, int):
        return PropertyType.INT
    if isinstance(value, float):
        return PropertyType.FLOAT
    if isinstance(value, str):
        return PropertyType.STRING
    if isinstance(value, (list, dict)):
        return PropertyType.ARRAY
    return PropertyType.OBJECT


def normalize_type(tag: Any) -> TypeTag:
    """
    Normalize a type tag to a PropertyType, a class, or a class name.

    Raises:
        InvalidArgumentError: If the tag cannot name a type
    """
    if isinstance(tag, PropertyType):
        return tag
    if isinstance(tag, type):
        return _BUILTIN_KINDS.get(tag, tag)
    if isinstance(tag, str):
        try:
            return PropertyType(tag)
        except ValueError:
            pass
        if _CLASS_NAME.match(tag):
            return tag
    Config.raise_invalid_argument(f"Invalid property type: {tag!r}")


def _matches_named(value: Any, tag: Union[type, str]) -> bool:
    """Check a value against a class or a class name."""
    if isinstance(tag, type):
        return isinstance(value, tag)

    for cls in type(value).__mro__:
        if tag in (cls.__name__, cls.__qualname__, f"{cls.__module__}.{cls.__qualname__}"):
            return True
    return False


class PropertyDefinition:
    """
    Schema for a single model property.

    Example:
        >>> definition = PropertyDefinition().type("int", "string").nullable()
        >>> definition.is_valid_value(42)
        True
        >>> definition.is_valid_value(3.14)
        False
    """

    def __init__(self) -> None:
        self._types: list[TypeTag] = [PropertyType.STRING]
        self._default: Any = UNSET
        self._cast_method: Optional[Callable[[Any, "PropertyDefinition"], Any]] = None
        self._nullable = False
        self._required = False
        self._required_on_save = False
        self._readonly = False
        self._locked = False

    def __repr__(self) -> str:
        types = ", ".join(t.value if isinstance(t, PropertyType) else getattr(t, "__name__", str(t)) for t in self._types)
        return f"PropertyDefinition(type=[{types}], nullable={self._nullable}, locked={self._locked})"

    def _check_lock(self) -> None:
        if self._locked:
            raise LockedDefinitionError("Property is locked")

    @classmethod
    def from_shorthand(cls, shorthand: Any) -> "PropertyDefinition":
        """
        Create a definition from a type name or a (type, default) pair.

        Shorthand definitions are always nullable.

        Example:
            >>> PropertyDefinition.from_shorthand("int")
            >>> PropertyDefinition.from_shorthand(("string", "Michael"))
        """
        definition = cls()

        if isinstance(shorthand, (str, type)):
            definition.type(shorthand)
        elif isinstance(shorthand, (tuple, list)) and len(shorthand) == 2:
            definition.type(shorthand[0])
            definition.default(shorthand[1])
        else:
            Config.raise_invalid_argument("Invalid shorthand property definition")

        return definition.nullable()

    # === Builder ===

    def type(self, *types: Any) -> "PropertyDefinition":
        """Set the accepted types. Multiple types form a union."""
        self._check_lock()
        if not types:
            Config.raise_invalid_argument("At least one property type is required")

        self._types = [normalize_type(t) for t in types]
        return self

    def default(self, default: Any) -> "PropertyDefinition":
        """
        Set the default value.

        A callable default is called every time the default is needed. A
        class default such as ``list`` is called the same way, unless the
        class itself is a valid value for the property.
        """
        self._check_lock()
        self._default = default
        return self

    def nullable(self) -> "PropertyDefinition":
        self._check_lock()
        self._nullable = True
        return self

    def required(self) -> "PropertyDefinition":
        """Make the property required when constructing a model."""
        self._check_lock()
        self._required = True
        return self

    def required_on_save(self) -> "PropertyDefinition":
        """Make the property required before the model is persisted."""
        self._check_lock()
        self._required_on_save = True
        return self

    def readonly(self) -> "PropertyDefinition":
        """Make the property settable only when the model is constructed."""
        self._check_lock()
        self._readonly = True
        return self

    def cast_with(self, cast_method: Callable[[Any, "PropertyDefinition"], Any]) -> "PropertyDefinition":
        """Provide a function ``(value, definition) -> value`` used to cast invalid values."""
        self._check_lock()
        if not callable(cast_method):
            Config.raise_invalid_argument("Cast method must be callable")

        self._cast_method = cast_method
        return self

    def lock(self) -> "PropertyDefinition":
        """Lock the definition. Once locked it cannot be unlocked."""
        self._locked = True
        return self

    # === Readers ===

    def get_type(self) -> list[TypeTag]:
        return list(self._types)

    def supports_type(self, tag: Any) -> bool:
        return normalize_type(tag) in self._types

    def has_default(self) -> bool:
        return self._default is not UNSET

    def get_default(self) -> Any:
        default = self._default
        if isinstance(default, type):
            # Factory classes such as list are called unless the class is itself a valid value
            return default if self.is_valid_value(default) else default()
        if callable(default):
            return default()
        return default

    def is_locked(self) -> bool:
        return self._locked

    def is_nullable(self) -> bool:
        return self._nullable

    def is_required(self) -> bool:
        return self._required

    def is_required_on_save(self) -> bool:
        return self._required_on_save

    def is_readonly(self) -> bool:
        return self._readonly

    def can_cast(self) -> bool:
        return self._cast_method is not None

    def cast(self, value: Any) -> Any:
        """
        Cast a value with the definition's cast method.

        Raises:
            InvalidArgumentError: If no cast method is set
        """
        if self._cast_method is None:
            Config.raise_invalid_argument("No cast method set")
        return self._cast_method(value, self)

    def is_valid_value(self, value: Any) -> bool:
        """Check a value against the nullability and accepted types."""
        if value is None:
            return self._nullable

        if kind_of(value) in self._types:
            return True

        return any(
            _matches_named(value, tag)
            for tag in self._types
            if not isinstance(tag, PropertyType)
        )
