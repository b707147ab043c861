"""
Hook decorators for model lifecycle and relationship loading.

Provides a declarative way to extend models via methods and mixins. Marked
methods are collected when the model class is defined.
"""

from typing import Any, Callable, TypeVar

F = TypeVar('F', bound=Callable[..., Any])


def before_save(func: F) -> F:
    """
    Decorator to mark a method as a before_save hook.

    Called before the model is handed to its repository.

    Example:
        >>> class TimestampMixin:
        ...     @before_save
        ...     def set_timestamps(self):
        ...         self.updated_at = datetime.now()
    """
    setattr(func, '_is_before_save_hook', True)  # type: ignore[attr-defined]
    return func


def after_save(func: F) -> F:
    """
    Decorator to mark a method as an after_save hook.

    Called after the repository has stored the model and changes are committed.
    """
    setattr(func, '_is_after_save_hook', True)  # type: ignore[attr-defined]
    return func


def after_load(func: F) -> F:
    """
    Decorator to mark a method as an after_load hook.

    Called after a model has been built from query data with from_data().

    Example:
        >>> class Event(Model):
        ...     @after_load
        ...     def localize(self):
        ...         self.starts_at = self.starts_at.astimezone()
    """
    setattr(func, '_is_after_load_hook', True)  # type: ignore[attr-defined]
    return func


def relationship_loader(name: str) -> Callable[[F], F]:
    """
    Decorator to register a method as the loader of a relationship.

    The method is called with no arguments besides self and may return a
    query builder (anything with fetch_one()/fetch_many()), a model, a list
    of models, lazy references, or None.

    Args:
        name: Relationship name as declared on the model

    Example:
        >>> class Post(Model):
        ...     relationships = {"author": "belongs_to"}
        ...
        ...     @relationship_loader("author")
        ...     def load_author(self):
        ...         return User.query().where(id=self.author_id)
    """
    def decorator(func: F) -> F:
        setattr(func, '_relationship_loader_for', name)  # type: ignore[attr-defined]
        return func
    return decorator
