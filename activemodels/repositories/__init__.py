"""Repositories storing persistable models."""

from activemodels.repositories.base import Deletable, Insertable, Repository, Updatable
from activemodels.repositories.memory import InMemoryQuery, InMemoryRepository

__all__ = [
    "Deletable",
    "InMemoryQuery",
    "InMemoryRepository",
    "Insertable",
    "Repository",
    "Updatable",
]
