"""
Models stored through a repository.
"""

import logging
from typing import TYPE_CHECKING, Any, ClassVar, Optional, TypeVar

from activemodels.config import Config
from activemodels.exceptions import MissingCapabilityError
from activemodels.models.base import Model
from activemodels.repositories.base import Deletable, Insertable, Repository, Updatable

if TYPE_CHECKING:
    from activemodels.query.base import ModelQueryBuilder

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="PersistableModel")


class PersistableModel(Model):
    """
    Model with find/create/save/delete delegated to a repository.

    Example:
        >>> class User(PersistableModel):
        ...     repository: ClassVar[Repository] = InMemoryRepository()
        ...     properties = {"id": "int", "email": "string"}
        ...
        >>> user = User.create(email="alice@example.com")
        >>> User.find(user.id).email
        'alice@example.com'

        Alternative syntax using class parameter:
        >>> class User(PersistableModel, repository=InMemoryRepository()):
        ...     properties = {"id": "int", "email": "string"}
    """

    repository: ClassVar[Optional[Repository]] = None

    def __init_subclass__(cls, repository: Optional[Repository] = None, **kwargs: Any):
        """
        Bind the repository declared for this model.

        Args:
            repository: Optional repository for this model (alternative to ClassVar)
            **kwargs: Additional arguments passed to parent
        """
        super().__init_subclass__(**kwargs)

        if repository is not None:
            cls.repository = repository

        # Repositories created without a model class serve the class declaring them
        declared = vars(cls).get('repository')
        if declared is not None and getattr(declared, 'model_class', False) is None:
            declared.model_class = cls

    @classmethod
    def _get_repository(cls) -> Repository:
        """
        Get the repository for this model.

        Raises:
            RuntimeError: If no repository is configured
        """
        if cls.repository is not None:
            return cls.repository

        raise RuntimeError(
            f"No repository configured for {cls.__name__}. "
            f"Set {cls.__name__}.repository = YourRepository() or pass repository=YourRepository() to class definition."
        )

    @classmethod
    def query(cls) -> "ModelQueryBuilder":
        """Start a query producing models of this class."""
        return cls._get_repository().prepare_query()

    @classmethod
    def find(cls: type[P], id: Any) -> Optional[P]:
        """
        Find a model by primary key.

        Returns:
            Model instance, or None if not found
        """
        return cls.query().where(**{cls.primary_key: id}).get()

    @classmethod
    def create(cls: type[P], **attributes: Any) -> P:
        """
        Create and save a new model in one operation.

        Example:
            >>> user = User.create(email="alice@example.com")
        """
        instance = cls(attributes)
        instance.save()
        return instance

    def save(self: P) -> P:
        """
        Insert or update this model.

        Callbacks:
            - Calls all @before_save methods before persisting
            - Calls all @after_save methods after persisting

        Raises:
            InvalidArgumentError: If a required_on_save property is not set
            MissingCapabilityError: If the repository cannot insert or update
        """
        for hook in self._before_save_hooks:
            hook(self)

        missing = [key for key in self._properties.get_required_on_save_properties() if not self.is_set(key)]
        if missing:
            Config.raise_invalid_argument(f"Properties required on save are missing: {', '.join(missing)}")

        repository = self._get_repository()
        logger.debug(f"Saving {type(self).__name__} (persisted={self.is_persisted()})")

        if not self.is_persisted():
            if not isinstance(repository, Insertable):
                raise MissingCapabilityError(f"{type(repository).__name__} cannot insert models")
            repository.insert(self)
            self._persisted = True
        else:
            if not isinstance(repository, Updatable):
                raise MissingCapabilityError(f"{type(repository).__name__} cannot update models")
            repository.update(self)

        self.commit_changes()

        for hook in self._after_save_hooks:
            hook(self)

        return self

    def delete(self) -> bool:
        """
        Delete this model from its repository.

        Returns:
            True if a record was deleted
        """
        repository = self._get_repository()
        if not isinstance(repository, Deletable):
            raise MissingCapabilityError(f"{type(repository).__name__} cannot delete models")

        deleted = repository.delete(self)
        if deleted:
            self._persisted = False
        return deleted
