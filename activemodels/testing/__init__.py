"""Test helpers for applications built on activemodels."""

from activemodels.testing.factory import ModelFactory

__all__ = ["ModelFactory"]
