"""
Lazy references to stored models.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Optional

from activemodels.exceptions import MissingCapabilityError

if TYPE_CHECKING:
    from activemodels.models.persistable import PersistableModel


class LazyModel:
    """
    A model identifier that is resolved to the model on demand.

    Relationship loaders may return lazy references instead of models; the
    relationship layer resolves them when the relationship is read.

    Example:
        >>> class LazyUser(LazyModel, model_class=User):
        ...     pass
        ...
        >>> LazyUser(1).resolve()
        User({'id': 1, 'name': 'Alice'})
    """

    model_class: ClassVar[Optional[type["PersistableModel"]]] = None

    def __init_subclass__(cls, model_class: Optional[type["PersistableModel"]] = None, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if model_class is not None:
            cls.model_class = model_class

    def __init__(self, id: Any):
        self._id = id

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._id!r})"

    def __str__(self) -> str:
        return str(self._id)

    def get_id(self) -> Any:
        return self._id

    @classmethod
    def get_model_class(cls) -> type["PersistableModel"]:
        """
        Get the model class references resolve to.

        Raises:
            MissingCapabilityError: If no model class is declared
        """
        if cls.model_class is None:
            raise MissingCapabilityError(
                f"{cls.__name__} must declare the model class it resolves to."
            )
        return cls.model_class

    def resolve(self) -> Optional["PersistableModel"]:
        """Find the referenced model, or None when it no longer exists."""
        return self.get_model_class().find(self._id)
