"""Query helpers for activemodels."""

from activemodels.query.base import ModelQueryBuilder
from activemodels.query.lookups import OPERATORS, parse_field_lookup

__all__ = ["ModelQueryBuilder", "OPERATORS", "parse_field_lookup"]
