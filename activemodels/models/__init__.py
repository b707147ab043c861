"""Model classes and property definitions."""

from activemodels.models.base import BuildMode, Model
from activemodels.models.collection import PropertyCollection
from activemodels.models.definition import UNSET, PropertyDefinition, PropertyType
from activemodels.models.hooks import after_load, after_save, before_save, relationship_loader
from activemodels.models.lazy import LazyModel
from activemodels.models.persistable import PersistableModel
from activemodels.models.property import Property

__all__ = [
    "BuildMode",
    "LazyModel",
    "Model",
    "PersistableModel",
    "Property",
    "PropertyCollection",
    "PropertyDefinition",
    "PropertyType",
    "UNSET",
    "after_load",
    "after_save",
    "before_save",
    "relationship_loader",
]
