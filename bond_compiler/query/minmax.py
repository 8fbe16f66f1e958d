"""Pin a field to its extremum, as computed by the search engine."""

from __future__ import annotations

import logging
from typing import Protocol

from opensearch_dsl.query import Query

from bond_compiler.bonds.ast_nodes import BondOperator, ResourceProperty
from bond_compiler.exceptions import MinMaxDiscoveryError, UnsupportedOperatorError
from bond_compiler.query import clauses

logger = logging.getLogger(__name__)


class ExtremumFinder(Protocol):
    """Executes an aggregation against the engine on the compiler's behalf."""

    def find_min_max_value(self, query: Query, field: str, is_max: bool) -> float:
        """Return the min (or max) of ``field`` over documents matching ``query``."""
        ...


def extremum_text(value: float, is_date: bool) -> str:
    """Textual form of an extremum; dates are stored as integral timestamps."""
    if is_date:
        return str(int(value))
    return repr(float(value))


def build_min_max_value_query(
    finder: ExtremumFinder,
    field: str,
    is_max: bool,
    is_date: bool,
    scope: Query | None = None,
) -> Query:
    """Build a query matching the documents that hold the extremum of ``field``.

    Args:
        finder: Delegate computing the extremum; called exactly once.
        field: Field to pin.
        is_max: Pin the maximum instead of the minimum.
        is_date: Truncate the extremum to an integer timestamp.
        scope: Optional query restricting both the lookup and the result.

    Returns:
        ``must(scope, field == extremum)``, or the pinned clause alone when
        no scope is given.

    Raises:
        MinMaxDiscoveryError: If the delegate fails. The call is not retried.
    """
    lookup_scope = scope if scope is not None else clauses.match_all()

    try:
        value = finder.find_min_max_value(lookup_scope, field, is_max)
    except Exception as e:
        raise MinMaxDiscoveryError(field, str(e)) from e

    text = extremum_text(value, is_date)
    logger.debug("%s of %s is %s", "Max" if is_max else "Min", field, text)

    pinned = clauses.match_phrase(field, text)
    if scope is None:
        return pinned
    return clauses.must(scope, pinned)


def build_min_max_resource_time_stamp_value(
    finder: ExtremumFinder,
    source_id: str | None,
    operator: BondOperator,
) -> Query:
    """Pin the earliest or latest resource timestamp, optionally per source.

    Raises:
        UnsupportedOperatorError: If ``operator`` is neither MIN nor MAX.
    """
    if operator not in (BondOperator.MIN, BondOperator.MAX):
        raise UnsupportedOperatorError(operator, ResourceProperty.RESOURCE_TIME_STAMP.name)

    scope = clauses.match_all()
    if source_id is not None:
        scope = clauses.match_phrase(ResourceProperty.SOURCE_ID.name, source_id)

    return build_min_max_value_query(
        finder,
        ResourceProperty.RESOURCE_TIME_STAMP.name,
        is_max=operator is BondOperator.MAX,
        is_date=True,
        scope=scope,
    )
