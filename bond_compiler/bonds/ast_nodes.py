"""Data classes for bond expressions.

A bond is a typed predicate over a named property. Bonds compose into a
recursive expression tree: leaf ``Bond`` and ``SpatialBond`` nodes joined by
``LogicalBond`` nodes carrying AND, OR or NOT.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class BondOperator(Enum):
    """Predicate operators understood by the translators."""

    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    GREATER = "GREATER"
    GREATER_OR_EQUAL = "GREATER_OR_EQUAL"
    LESS = "LESS"
    LESS_OR_EQUAL = "LESS_OR_EQUAL"
    LIKE = "LIKE"
    EXISTS = "EXISTS"
    NOT_EXISTS = "NOT_EXISTS"
    BBOX = "BBOX"
    INTERSECTS = "INTERSECTS"
    CONTAINED = "CONTAINED"
    CONTAINS = "CONTAINS"
    DISJOINT = "DISJOINT"
    INTERSECTS_ANY_POINT_NOT_CONTAINS = "INTERSECTS_ANY_POINT_NOT_CONTAINS"
    # Extremum selectors for min/max discovery only
    MIN = "MIN"
    MAX = "MAX"

    def __str__(self) -> str:
        return self.value


class LogicalOperator(Enum):
    """Connectives joining bond expressions."""

    AND = "AND"
    OR = "OR"
    NOT = "NOT"


class ContentType(Enum):
    """Declared value type of a queryable property."""

    TEXT = "text"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    ISO8601_DATE = "iso8601_date"
    ISO8601_DATE_TIME = "iso8601_date_time"

    @property
    def is_date(self) -> bool:
        return self in (ContentType.ISO8601_DATE, ContentType.ISO8601_DATE_TIME)


@dataclass(frozen=True)
class Queryable:
    """A named, typed property that bonds can constrain."""

    name: str
    content_type: ContentType = ContentType.TEXT

    def __str__(self) -> str:
        return self.name


class ResourceProperty:
    """Resource-level properties maintained by the indexer."""

    SOURCE_ID = Queryable("sourceId")
    RESOURCE_TIME_STAMP = Queryable("resourceTimeStamp", ContentType.ISO8601_DATE_TIME)
    IS_DELETED = Queryable("isDeleted", ContentType.BOOLEAN)
    IS_GEOSS_DATA_CORE = Queryable("isGDC", ContentType.BOOLEAN)
    METADATA_QUALITY = Queryable("metadataQuality", ContentType.INTEGER)
    ESSENTIAL_VARS_QUALITY = Queryable("essentialVarsQuality", ContentType.INTEGER)
    ACCESS_QUALITY = Queryable("accessQuality", ContentType.INTEGER)


class MetadataElement:
    """Metadata elements extracted from harvested records."""

    TITLE = Queryable("title")
    ABSTRACT = Queryable("abstract")
    KEYWORD = Queryable("keyword")
    TOPIC_CATEGORY = Queryable("topicCategory")
    SUBJECT = Queryable("subject")
    IDENTIFIER = Queryable("identifier")
    PARENT_IDENTIFIER = Queryable("parentIdentifier")
    ORGANISATION_NAME = Queryable("orgName")
    TEMP_EXTENT_BEGIN = Queryable("tmpExtentBegin", ContentType.ISO8601_DATE_TIME)
    TEMP_EXTENT_END = Queryable("tmpExtentEnd", ContentType.ISO8601_DATE_TIME)
    CREATION_DATE = Queryable("creationDate", ContentType.ISO8601_DATE)
    CLOUD_COVER_PERCENTAGE = Queryable("cloudCoverPercentage", ContentType.DOUBLE)
    BOUNDING_BOX = Queryable("bbox")


def _collect_known() -> dict[str, Queryable]:
    known: dict[str, Queryable] = {}
    for namespace in (ResourceProperty, MetadataElement):
        for value in vars(namespace).values():
            if isinstance(value, Queryable):
                known[value.name] = value
    return known


KNOWN_QUERYABLES: dict[str, Queryable] = _collect_known()


def resolve_queryable(name: str) -> Queryable:
    """Look up a well-known queryable by name, defaulting to a text property."""
    return KNOWN_QUERYABLES.get(name, Queryable(name))


class ViewVisibility(Enum):
    """Visibility of a stored view."""

    PRIVATE = "PRIVATE"
    SHARED = "SHARED"
    PUBLIC = "PUBLIC"


@dataclass(frozen=True)
class SpatialExtent:
    """A rectangular envelope in degrees."""

    west: float
    east: float
    north: float
    south: float


@dataclass(frozen=True)
class Bond:
    """A predicate ``property <operator> value`` over a non-spatial property."""

    property: Queryable
    operator: BondOperator
    value: str = ""


@dataclass(frozen=True)
class SpatialBond:
    """A spatial relation between the bounding box property and an extent."""

    operator: BondOperator
    extent: SpatialExtent
    property: Queryable = MetadataElement.BOUNDING_BOX


@dataclass(frozen=True)
class LogicalBond:
    """AND/OR/NOT combination of child expressions.

    NOT takes exactly one child.
    """

    operator: LogicalOperator
    bonds: tuple[BondExpression, ...]

    def __post_init__(self) -> None:
        if self.operator is LogicalOperator.NOT and len(self.bonds) != 1:
            raise ValueError("NOT bond takes exactly one operand")
        if not self.bonds:
            raise ValueError(f"{self.operator.value} bond needs at least one operand")

    @classmethod
    def and_(cls, *bonds: BondExpression) -> LogicalBond:
        return cls(LogicalOperator.AND, tuple(bonds))

    @classmethod
    def or_(cls, *bonds: BondExpression) -> LogicalBond:
        return cls(LogicalOperator.OR, tuple(bonds))

    @classmethod
    def not_(cls, bond: BondExpression) -> LogicalBond:
        return cls(LogicalOperator.NOT, (bond,))


BondExpression = Bond | SpatialBond | LogicalBond
