"""Typed scan/condition predicates for the document store.

A filter is a small tagged union evaluated either in memory (``matches``)
or compiled to SQL by the Postgres backend. Only the operators the ledgers
need are supported: equality, attribute absence and boolean combinators.

    Or(Missing("isCorrect"), Equals("isCorrect", None))

matches documents that never had ``isCorrect`` written as well as ones that
store an explicit null.
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Equals:
    """Attribute present and equal to ``value`` (``None`` = stored null)."""

    field: str
    value: Any


@dataclass(frozen=True)
class Missing:
    """Attribute not present in the document."""

    field: str


@dataclass(frozen=True, init=False)
class Or:
    clauses: tuple["Filter", ...]

    def __init__(self, *clauses: "Filter") -> None:
        if not clauses:
            raise ValueError("Or() needs at least one clause")
        object.__setattr__(self, "clauses", tuple(clauses))


@dataclass(frozen=True, init=False)
class And:
    clauses: tuple["Filter", ...]

    def __init__(self, *clauses: "Filter") -> None:
        if not clauses:
            raise ValueError("And() needs at least one clause")
        object.__setattr__(self, "clauses", tuple(clauses))


Filter = Union[Equals, Missing, Or, And]


def matches(flt: Filter | None, item: dict[str, Any]) -> bool:
    """Evaluate ``flt`` against a document; ``None`` matches everything."""
    if flt is None:
        return True
    if isinstance(flt, Equals):
        if flt.field not in item:
            return False
        stored = item[flt.field]
        if flt.value is None or stored is None:
            return flt.value is None and stored is None
        # bool is an int subclass: True must not equal 1 here
        if isinstance(stored, bool) != isinstance(flt.value, bool):
            return False
        return bool(stored == flt.value)
    if isinstance(flt, Missing):
        return flt.field not in item
    if isinstance(flt, Or):
        return any(matches(clause, item) for clause in flt.clauses)
    if isinstance(flt, And):
        return all(matches(clause, item) for clause in flt.clauses)
    raise TypeError(f"Unsupported filter: {flt!r}")
