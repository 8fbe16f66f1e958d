"""Clause primitives and boolean composition helpers.

Every helper returns an ``opensearch_dsl`` query object. A boost of 1 means
no boost, so boosts are only emitted when strictly greater than 1.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from opensearch_dsl.query import (
    Bool,
    Exists,
    GeoShape,
    MatchAll,
    MatchNone,
    MatchPhrase,
    Query,
    Range,
    Term,
    Terms,
    Wildcard,
)

MINIMUM_SHOULD_MATCH = "1"

# Range bound keys per comparison operator name
RANGE_BOUNDS: dict[str, str] = {
    "GREATER": "gt",
    "GREATER_OR_EQUAL": "gte",
    "LESS": "lt",
    "LESS_OR_EQUAL": "lte",
}


def _with_boost(body: dict[str, Any], boost: float) -> dict[str, Any]:
    if boost > 1:
        body["boost"] = float(boost)
    return body


def match_all() -> Query:
    return MatchAll()


def match_none() -> Query:
    return MatchNone()


def match_phrase(field: str, value: str, boost: float = 1) -> Query:
    """Phrase match of ``value`` on ``field``."""
    return MatchPhrase(**{field: _with_boost({"query": value}, boost)})


def wildcard(field: str, pattern: str, boost: float = 1) -> Query:
    return Wildcard(**{field: _with_boost({"value": pattern}, boost)})


def range_(field: str, bound: str, value: Any) -> Query:
    """Open or closed range on one side; ``bound`` is one of gt/gte/lt/lte."""
    return Range(**{field: {bound: value}})


def exists(field: str) -> Query:
    return Exists(field=field)


def not_exists(field: str) -> Query:
    return negate(exists(field))


def term(field: str, value: str) -> Query:
    return Term(**{field: value})


def terms(field: str, values: Iterable[str]) -> Query:
    return Terms(**{field: list(values)})


def geo_shape(field: str, shape: dict[str, Any], relation: str) -> Query:
    return GeoShape(**{field: {"shape": shape, "relation": relation}})


def negate(query: Query) -> Query:
    return Bool(must_not=[query])


# ---------------------------------------------------------------------------
# Boolean composition
# ---------------------------------------------------------------------------


def must(*queries: Query) -> Query:
    return Bool(must=list(queries))


def must_not(*queries: Query) -> Query:
    return Bool(must_not=list(queries))


def filter_(*queries: Query) -> Query:
    return Bool(filter=list(queries))


def should(*queries: Query, minimum_should_match: bool = False) -> Query:
    """Disjunction of ``queries``.

    Without ``minimum_should_match`` the clauses only contribute to scoring
    and never exclude a document.
    """
    if minimum_should_match:
        return Bool(should=list(queries), minimum_should_match=MINIMUM_SHOULD_MATCH)
    return Bool(should=list(queries))


def filtered_any(filters: Sequence[Query], alternatives: Sequence[Query]) -> Query:
    """Conjunction of ``filters`` with at least one of ``alternatives``."""
    return Bool(
        filter=list(filters),
        should=list(alternatives),
        minimum_should_match=MINIMUM_SHOULD_MATCH,
    )
