"""
Repository contracts for persistable models.

A repository owns the storage of one model class. Every repository can
prepare queries; the write operations are separate contracts so read-only
repositories need not implement them.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from activemodels.models.base import Model
    from activemodels.query.base import ModelQueryBuilder


class Repository(ABC):
    """Abstract base class for repositories."""

    @abstractmethod
    def prepare_query(self) -> "ModelQueryBuilder":
        """Get a query builder producing models of the repository's class."""
        pass


class Insertable(ABC):
    """Repository that can store new models."""

    @abstractmethod
    def insert(self, model: "Model") -> "Model":
        """
        Store a new model.

        Implementations set the primary key on the model when storage
        generates it.
        """
        pass


class Updatable(ABC):
    """Repository that can update stored models."""

    @abstractmethod
    def update(self, model: "Model") -> "Model":
        pass


class Deletable(ABC):
    """Repository that can delete stored models."""

    @abstractmethod
    def delete(self, model: "Model") -> bool:
        """Delete a model, returning whether a record was removed."""
        pass
