"""
A single live property on a model instance.
"""

from copy import deepcopy
from typing import Any

from activemodels.config import Config
from activemodels.models.definition import UNSET, PropertyDefinition


def _detached(value: Any) -> Any:
    # The original value never shares mutable state with the current value
    return value if value is UNSET else deepcopy(value)


class Property:
    """
    Holds the current and original value of one model attribute.

    The current value may be unset, which is distinct from None. The property
    is dirty whenever the current value differs from the original value that
    was captured at construction or at the last commit/revert.

    Example:
        >>> prop = Property("name", PropertyDefinition(), "John")
        >>> prop.set_value("Jane").is_dirty()
        True
        >>> prop.revert_changes()
        >>> prop.get_value()
        'John'
    """

    def __init__(self, key: str, definition: PropertyDefinition, value: Any = UNSET):
        """
        Initialize the property.

        Args:
            key: Property name
            definition: Definition, locked on construction
            value: Initial value; the definition's default is used when omitted

        Raises:
            InvalidArgumentError: If the initial value is not valid
        """
        self._key = key
        self._definition = definition.lock()
        self._value: Any = UNSET
        self._original_value: Any = UNSET

        if value is UNSET and self._definition.has_default():
            value = self._definition.get_default()

        if value is not UNSET:
            value = self._coerce(value, f'Initial value is not valid for property "{key}".')
            self._value = value
            self._original_value = _detached(value)

    def __repr__(self) -> str:
        return f"Property(key={self._key!r}, value={self._value!r}, dirty={self.is_dirty()})"

    def _coerce(self, value: Any, message: str) -> Any:
        """Validate a value, giving the definition's cast method a chance to fix it."""
        if self._definition.is_valid_value(value):
            return value

        if self._definition.can_cast():
            value = self._definition.cast(value)
            if self._definition.is_valid_value(value):
                return value

        Config.raise_invalid_argument(message)

    def get_definition(self) -> PropertyDefinition:
        return self._definition

    def get_key(self) -> str:
        return self._key

    def get_value(self) -> Any:
        """Get the current value, or None if unset."""
        return None if self._value is UNSET else self._value

    def get_original_value(self) -> Any:
        """Get the original value, or None if there is none."""
        return None if self._original_value is UNSET else self._original_value

    def has_original_value(self) -> bool:
        return self._original_value is not UNSET

    def is_set(self) -> bool:
        """
        Whether the property holds a value.

        A property explicitly set to None is set.
        """
        return self._value is not UNSET

    def is_dirty(self) -> bool:
        current, original = self._value, self._original_value
        if current is UNSET or original is UNSET:
            return current is not original
        if type(current) is not type(original):
            return True
        return bool(current != original)

    def is_clean(self) -> bool:
        return not self.is_dirty()

    def set_value(self, value: Any) -> "Property":
        """
        Set the current value.

        Raises:
            ReadOnlyPropertyError: If the property is readonly
            InvalidArgumentError: If the value is not valid and cannot be cast
        """
        if self._definition.is_readonly():
            Config.raise_readonly_property(f'Cannot modify readonly property "{self._key}".')

        self._value = self._coerce(value, f'Value is not valid for property "{self._key}".')
        return self

    def commit_changes(self) -> None:
        """Make the current value the new original value."""
        self._original_value = _detached(self._value)

    def revert_changes(self) -> None:
        """Restore the original value, unsetting the property if there is none."""
        self._value = _detached(self._original_value)

    def unset(self) -> None:
        """
        Clear the current value.

        Raises:
            ReadOnlyPropertyError: If the property is readonly
        """
        if self._definition.is_readonly():
            Config.raise_readonly_property(f'Cannot unset readonly property "{self._key}".')

        self._value = UNSET

    def snapshot(self) -> Any:
        """Capture the current value, unset included, for a later restore()."""
        return self._value

    def restore(self, snapshot: Any) -> None:
        """Put back a value captured with snapshot(), without validation."""
        self._value = snapshot
