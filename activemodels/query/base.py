"""
Query builder wrapper that turns query rows into models.
"""

from typing import Any, Generic, Optional, TypeVar

from activemodels.config import Config
from activemodels.exceptions import MissingCapabilityError
from activemodels.models.base import BuildMode, Model

M = TypeVar("M", bound=Model)


class ModelQueryBuilder(Generic[M]):
    """
    Wraps a query collaborator and builds models from the rows it returns.

    The collaborator must provide get() returning one row or None and
    get_all() returning a list of rows. Any other method (where, order_by,
    limit, ...) is forwarded to it, and calls returning the collaborator
    itself return this builder so chains keep producing models.

    Example:
        >>> builder = ModelQueryBuilder(Product, query)
        >>> builder.where(price__gte=5).order_by("-price").get_all()
        [Product({'id': 2, ...}), Product({'id': 1, ...})]
    """

    def __init__(self, model_class: type[M], query: Any, mode: int = BuildMode.IGNORE_EXTRA):
        """
        Initialize the builder.

        Args:
            model_class: Model class to build from rows
            query: Query collaborator
            mode: BuildMode used for from_data()

        Raises:
            InvalidArgumentError: If model_class is not a Model subclass
        """
        if not (isinstance(model_class, type) and issubclass(model_class, Model)):
            Config.raise_invalid_argument(f"{model_class!r} must be a subclass of {Model.__name__}")

        self._model_class = model_class
        self._query = query
        self._mode = BuildMode(mode)

    def __repr__(self) -> str:
        return f"ModelQueryBuilder({self._model_class.__name__}, {self._query!r})"

    def get_model_class(self) -> type[M]:
        return self._model_class

    def get_query(self) -> Any:
        return self._query

    def get(self) -> Optional[M]:
        """Get the first matching model, or None."""
        row = self._query.get()
        if not row:
            return None
        return self._model_class.from_data(row, self._mode)

    def get_all(self) -> Optional[list[M]]:
        """Get every matching model, or None when nothing matches."""
        rows = self._query.get_all()
        if not rows:
            return None
        return [self._model_class.from_data(row, self._mode) for row in rows]

    def fetch_one(self) -> Optional[M]:
        return self.get()

    def fetch_many(self) -> Optional[list[M]]:
        return self.get_all()

    def count(self) -> int:
        """
        Count matching rows.

        Raises:
            MissingCapabilityError: If the collaborator cannot count
        """
        counter = getattr(self._query, "count", None)
        if not callable(counter):
            raise MissingCapabilityError(f"{type(self._query).__name__} does not support count()")
        return int(counter())

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        attr = getattr(self._query, name)
        if not callable(attr):
            return attr

        def forward(*args: Any, **kwargs: Any) -> Any:
            result = attr(*args, **kwargs)
            return self if result is self._query else result

        return forward
