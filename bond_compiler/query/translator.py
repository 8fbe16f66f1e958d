"""Lower bonds and spatial bonds to clause primitives."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from opensearch_dsl.query import Query

from bond_compiler.bonds.ast_nodes import (
    Bond,
    BondOperator,
    ContentType,
    MetadataElement,
    Queryable,
    SpatialBond,
    SpatialExtent,
)
from bond_compiler.exceptions import (
    BondValueError,
    UnsupportedOperatorError,
    UnsupportedSpatialRelationError,
)
from bond_compiler.query import clauses
from bond_compiler.ranking import DEFAULT_RANKING, RankingStrategy

logger = logging.getLogger(__name__)

# Shape relation per spatial operator. CONTAINED means the record lies inside
# the extent, i.e. the extent contains the record; CONTAINS is the reverse.
_SHAPE_RELATIONS: dict[BondOperator, str] = {
    BondOperator.BBOX: "intersects",
    BondOperator.INTERSECTS: "intersects",
    BondOperator.CONTAINED: "contains",
    BondOperator.CONTAINS: "within",
    BondOperator.DISJOINT: "disjoint",
}


def _epoch_millis(value: str) -> int:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)


def parse_range_value(prop: Queryable, value: str) -> Any:
    """Convert a bond value to the representation stored for ``prop``.

    Numbers become ``int``/``float``, dates become integer epoch
    milliseconds, everything else stays a raw string.

    Raises:
        BondValueError: If ``value`` does not fit the declared type.
    """
    content_type = prop.content_type
    try:
        if content_type in (ContentType.INTEGER, ContentType.LONG):
            return int(value)
        if content_type is ContentType.DOUBLE:
            return float(value)
        if content_type.is_date:
            stripped = value.strip()
            if stripped.lstrip("-").isdigit():
                return int(stripped)
            return _epoch_millis(stripped)
    except ValueError as e:
        raise BondValueError(prop.name, value, str(e)) from e
    return value


def translate(
    prop: Queryable,
    operator: BondOperator,
    value: str = "",
    ranking: RankingStrategy = DEFAULT_RANKING,
) -> Query:
    """Translate ``prop <operator> value`` into a clause.

    Args:
        prop: Property the bond constrains.
        operator: Non-spatial bond operator.
        value: Raw bond value; ignored for EXISTS/NOT_EXISTS.
        ranking: Supplies the property boost for EQUAL, NOT_EQUAL and LIKE.

    Returns:
        Existence, phrase, range, wildcard or negation clause.

    Raises:
        UnsupportedOperatorError: For spatial, MIN/MAX or unknown operators.
        BondValueError: If a range value does not fit the property type.
    """
    field = prop.name
    logger.debug("Translating %s %s %r", field, operator, value)

    if operator is BondOperator.EXISTS:
        return clauses.exists(field)

    if operator is BondOperator.NOT_EXISTS:
        return clauses.not_exists(field)

    if operator in (BondOperator.EQUAL, BondOperator.NOT_EQUAL):
        phrase = clauses.match_phrase(field, value, ranking.property_weight(prop))
        if operator is BondOperator.NOT_EQUAL:
            return clauses.negate(phrase)
        return phrase

    if operator.name in clauses.RANGE_BOUNDS:
        # Range clauses are filters and carry no ranking boost
        bound = clauses.RANGE_BOUNDS[operator.name]
        return clauses.range_(field, bound, parse_range_value(prop, value))

    if operator is BondOperator.LIKE:
        return clauses.wildcard(field, value, ranking.property_weight(prop))

    raise UnsupportedOperatorError(operator, field)


def translate_bond(bond: Bond, ranking: RankingStrategy = DEFAULT_RANKING) -> Query:
    return translate(bond.property, bond.operator, bond.value, ranking)


def build_envelope(extent: SpatialExtent) -> dict[str, Any]:
    """Envelope shape from the north-west and south-east corners."""
    return {
        "type": "envelope",
        "coordinates": [
            [extent.west, extent.north],
            [extent.east, extent.south],
        ],
    }


def build_geo_shape_query(bond: SpatialBond) -> Query:
    """Translate a spatial bond into a geo-shape clause on the bounding box.

    Raises:
        UnsupportedSpatialRelationError: For operators without a relation,
            including INTERSECTS_ANY_POINT_NOT_CONTAINS.
    """
    relation = _SHAPE_RELATIONS.get(bond.operator)
    if relation is None:
        raise UnsupportedSpatialRelationError(bond.operator)

    return clauses.geo_shape(
        bond.property.name,
        build_envelope(bond.extent),
        relation,
    )


def build_subject_query(
    value: str,
    operator: BondOperator,
    ranking: RankingStrategy = DEFAULT_RANKING,
) -> Query:
    """Match ``value`` against either keywords or topic categories."""
    return clauses.should(
        translate(MetadataElement.KEYWORD, operator, value, ranking),
        translate(MetadataElement.TOPIC_CATEGORY, operator, value, ranking),
        minimum_should_match=True,
    )
