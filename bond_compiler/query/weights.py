"""Ranking simulation and the baseline quality filter.

The engine only expresses relevance through per-clause boosts, so each
quality dimension is approximated by one boosted phrase clause per discrete
level, combined as a score-only disjunction.
"""

from __future__ import annotations

import logging

from opensearch_dsl.query import Query

from bond_compiler.bonds.ast_nodes import ResourceProperty
from bond_compiler.query import clauses
from bond_compiler.ranking import MAX_VARIABLE_VALUE, RankingStrategy

logger = logging.getLogger(__name__)

QUALITY_DIMENSIONS: tuple[str, ...] = (
    ResourceProperty.METADATA_QUALITY.name,
    ResourceProperty.ESSENTIAL_VARS_QUALITY.name,
    ResourceProperty.ACCESS_QUALITY.name,
)


def build_weight_query(field: str, ranking: RankingStrategy) -> Query:
    """One boosted clause per level ``1..MAX_VARIABLE_VALUE`` of ``field``.

    No ``minimum_should_match``: a document matching no level scores zero
    on this dimension but is never excluded.
    """
    levels = [
        clauses.match_phrase(field, str(level), ranking.range_weight(field, level))
        for level in range(1, MAX_VARIABLE_VALUE + 1)
    ]
    return clauses.should(*levels)


def build_data_core_weight_query(ranking: RankingStrategy) -> Query:
    """Boost data-core records while still counting every flagged record."""
    field = ResourceProperty.IS_GEOSS_DATA_CORE.name
    return clauses.should(
        clauses.match_phrase(field, "false"),
        clauses.match_phrase(
            field, "true", ranking.property_weight(ResourceProperty.IS_GEOSS_DATA_CORE)
        ),
        minimum_should_match=True,
    )


def build_deleted_excluded_query() -> Query:
    """Visible iff the delete marker is absent or equals ``"false"``."""
    field = ResourceProperty.IS_DELETED.name
    return clauses.should(
        clauses.not_exists(field),
        clauses.match_phrase(field, "false"),
        minimum_should_match=True,
    )


def build_basic_query(
    count: bool,
    ranking: RankingStrategy,
    deleted_included: bool,
    *,
    count_honors_deleted_flag: bool = False,
) -> Query:
    """Build the always-applied scoring and visibility backbone.

    Args:
        count: Count mode omits every weight clause, since boosted
            disjunctions are meaningless for a cardinality count.
        ranking: Source of the dimension weights.
        deleted_included: Whether soft-deleted records stay visible.
        count_honors_deleted_flag: In count mode the visibility clause is
            applied regardless of ``deleted_included`` unless this is set.

    Returns:
        The baseline clause to conjoin with the caller's query.
    """
    if count:
        if deleted_included and count_honors_deleted_flag:
            return clauses.match_all()
        if deleted_included:
            logger.warning("Count mode applies the deleted-record filter despite deleted_included")
        return build_deleted_excluded_query()

    # match_all keeps the disjunction satisfiable when no weight clause matches
    alternatives = [
        clauses.match_all(),
        build_data_core_weight_query(ranking),
        *(build_weight_query(field, ranking) for field in QUALITY_DIMENSIONS),
    ]

    if not deleted_included:
        alternatives.append(build_deleted_excluded_query())

    return clauses.should(*alternatives, minimum_should_match=True)
