"""
activemodels - active-record style data models for Python.

Typed model properties with defaults, nullability, casting and change
tracking, construction from query data, lazily loaded relationships and
thin repository glue for persistence.
"""

from activemodels.config import Config
from activemodels.exceptions import (
    ConfigurationError,
    DuplicateKeyError,
    InvalidArgumentError,
    LockedDefinitionError,
    MissingCapabilityError,
    ModelsError,
    NotFoundError,
    ReadOnlyPropertyError,
    RepositoryError,
)
from activemodels.models import (
    BuildMode,
    LazyModel,
    Model,
    PersistableModel,
    Property,
    PropertyCollection,
    PropertyDefinition,
    PropertyType,
    after_load,
    after_save,
    before_save,
    relationship_loader,
)
from activemodels.query import ModelQueryBuilder
from activemodels.relationships import RelationshipDefinition, RelationshipKind
from activemodels.repositories import InMemoryRepository, Repository

__version__ = "0.1.0"

__all__ = [
    "Config",
    "Model",
    "PersistableModel",
    "LazyModel",
    "BuildMode",
    "Property",
    "PropertyCollection",
    "PropertyDefinition",
    "PropertyType",
    "RelationshipDefinition",
    "RelationshipKind",
    "ModelQueryBuilder",
    "Repository",
    "InMemoryRepository",
    "before_save",
    "after_save",
    "after_load",
    "relationship_loader",
    "ModelsError",
    "InvalidArgumentError",
    "ReadOnlyPropertyError",
    "LockedDefinitionError",
    "MissingCapabilityError",
    "ConfigurationError",
    "RepositoryError",
    "NotFoundError",
    "DuplicateKeyError",
]
