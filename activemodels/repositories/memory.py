"""
In-memory repository for activemodels.

Simple dict-based storage for testing and examples without requiring
external services.
"""

import logging
from copy import deepcopy
from typing import Any, Optional

from activemodels.exceptions import DuplicateKeyError, NotFoundError
from activemodels.models.base import BuildMode, Model
from activemodels.query.base import ModelQueryBuilder
from activemodels.query.lookups import matches
from activemodels.repositories.base import Deletable, Insertable, Repository, Updatable

logger = logging.getLogger(__name__)


class InMemoryRepository(Repository, Insertable, Updatable, Deletable):
    """
    In-memory repository storing the attributes of one model class.

    Integer primary keys are generated when a model is inserted without one.
    Data is lost when the process ends.

    Example:
        >>> class User(PersistableModel, repository=InMemoryRepository()):
        ...     properties = {"id": "int", "name": "string"}
        ...
        >>> user = User.create(name="Alice")
        >>> user.id
        1
    """

    def __init__(self, model_class: Optional[type[Model]] = None):
        """
        Initialize the repository.

        Args:
            model_class: Model class stored here; PersistableModel binds it
                automatically when the repository is declared on the class
        """
        self.model_class = model_class
        # Storage: {primary_value: attributes}
        self._storage: dict[Any, dict[str, Any]] = {}
        self._next_id = 1

    def __repr__(self) -> str:
        name = self.model_class.__name__ if self.model_class else None
        return f"InMemoryRepository({name}, records={len(self._storage)})"

    def _get_model_class(self) -> type[Model]:
        if self.model_class is None:
            raise RuntimeError("InMemoryRepository is not bound to a model class.")
        return self.model_class

    def prepare_query(self) -> ModelQueryBuilder:
        # Records hold only the values that were set
        return ModelQueryBuilder(self._get_model_class(), InMemoryQuery(self), BuildMode.IGNORE_MISSING)

    def insert(self, model: Model) -> Model:
        """Store a new model, assigning the next integer id when it has none."""
        key = model.primary_key
        value = model.get_primary_value()

        if value is None:
            value = self._next_id
            model.set_attribute(key, value)
        elif value in self._storage:
            raise DuplicateKeyError(f"Record with key {value} already exists")

        if isinstance(value, int) and not isinstance(value, bool):
            self._next_id = max(self._next_id, value + 1)

        self._storage[value] = deepcopy(model.to_dict())
        logger.debug(f"Inserted {type(model).__name__} {key}={value!r}")
        return model

    def update(self, model: Model) -> Model:
        value = model.get_primary_value()
        if value not in self._storage:
            raise NotFoundError(f"Record not found with key: {value}")

        self._storage[value] = deepcopy(model.to_dict())
        logger.debug(f"Updated {type(model).__name__} {model.primary_key}={value!r}")
        return model

    def delete(self, model: Model) -> bool:
        value = model.get_primary_value()
        if value in self._storage:
            del self._storage[value]
            logger.debug(f"Deleted {type(model).__name__} {model.primary_key}={value!r}")
            return True
        return False

    def records(self) -> list[dict[str, Any]]:
        """Copies of every stored record, in insertion order."""
        return [deepcopy(record) for record in self._storage.values()]

    def clear(self) -> None:
        self._storage.clear()
        self._next_id = 1


class InMemoryQuery:
    """
    Query collaborator over an InMemoryRepository.

    Performs filtering, sorting, and pagination in Python and returns rows
    as dicts. Wrap it in a ModelQueryBuilder to get models back.
    """

    def __init__(self, repository: InMemoryRepository):
        self.repository = repository
        self._filters: list[dict[str, Any]] = []
        self._order_by: list[str] = []
        self._limit: Optional[int] = None
        self._offset: Optional[int] = None

    def where(self, **lookups: Any) -> "InMemoryQuery":
        """
        Add conditions, ANDed with the existing ones.

        Example:
            >>> query.where(age__gte=18, name__startswith="A")
        """
        if lookups:
            self._filters.append(lookups)
        return self

    def order_by(self, *fields: str) -> "InMemoryQuery":
        """Sort by fields; prefix a field with "-" for descending order."""
        self._order_by.extend(fields)
        return self

    def limit(self, limit: int) -> "InMemoryQuery":
        self._limit = limit
        return self

    def offset(self, offset: int) -> "InMemoryQuery":
        self._offset = offset
        return self

    def _matching(self) -> list[dict[str, Any]]:
        results = [
            record for record in self.repository.records()
            if all(matches(record, lookups) for lookups in self._filters)
        ]

        # Stable sorts applied last field first; None sorts last
        for order_field in reversed(self._order_by):
            reverse = order_field.startswith("-")
            field = order_field[1:] if reverse else order_field
            present = [r for r in results if r.get(field) is not None]
            absent = [r for r in results if r.get(field) is None]
            present.sort(key=lambda r: r[field], reverse=reverse)
            results = present + absent

        return results

    def get_all(self) -> list[dict[str, Any]]:
        results = self._matching()

        offset = self._offset or 0
        if offset:
            results = results[offset:]
        if self._limit is not None:
            results = results[:self._limit]

        return results

    def get(self) -> Optional[dict[str, Any]]:
        results = self.get_all()
        return results[0] if results else None

    def count(self) -> int:
        """Count matching rows, ignoring limit and offset."""
        return len(self._matching())
