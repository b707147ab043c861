"""Relationship layer: named, lazily loaded links between models."""

from activemodels.relationships.collection import RelationshipCollection
from activemodels.relationships.definition import RelationshipDefinition, RelationshipKind
from activemodels.relationships.relationship import Fetchable, Relationship

__all__ = [
    "Fetchable",
    "Relationship",
    "RelationshipCollection",
    "RelationshipDefinition",
    "RelationshipKind",
]
