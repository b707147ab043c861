"""
Field lookups for query filters.

A lookup is a keyword such as ``age__gte`` naming a field and an operator.
"""

import operator
from typing import Any, Callable


def parse_field_lookup(field_lookup: str) -> tuple[str, str]:
    """
    Parse a field lookup string into field name and operator.

    Example:
        >>> parse_field_lookup("age__gte")
        ('age', 'gte')
        >>> parse_field_lookup("name")
        ('name', 'eq')
    """
    if "__" in field_lookup:
        field, op = field_lookup.rsplit("__", 1)
        if op in OPERATORS:
            return field, op
    return field_lookup, "eq"


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    # None never compares as greater or smaller than anything
    return lambda left, right: left is not None and compare(left, right)


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": _ordered(operator.gt),
    "gte": _ordered(operator.ge),
    "lt": _ordered(operator.lt),
    "lte": _ordered(operator.le),
    "in": lambda left, right: left in right,
    "contains": lambda left, right: bool(left) and right in left,
    "startswith": lambda left, right: bool(left) and str(left).startswith(str(right)),
    "endswith": lambda left, right: bool(left) and str(left).endswith(str(right)),
}


def matches(record: dict[str, Any], lookups: dict[str, Any]) -> bool:
    """Check whether a record satisfies every lookup."""
    for field_lookup, value in lookups.items():
        field, op = parse_field_lookup(field_lookup)
        if not OPERATORS[op](record.get(field), value):
            return False
    return True
