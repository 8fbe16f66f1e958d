"""Bond expression model and textual bond syntax."""

from bond_compiler.bonds.ast_nodes import (
    Bond,
    BondExpression,
    BondOperator,
    ContentType,
    LogicalBond,
    LogicalOperator,
    MetadataElement,
    Queryable,
    ResourceProperty,
    SpatialBond,
    SpatialExtent,
    ViewVisibility,
    resolve_queryable,
)
from bond_compiler.bonds.parser import parse_bonds

__all__ = [
    "Bond",
    "BondExpression",
    "BondOperator",
    "ContentType",
    "LogicalBond",
    "LogicalOperator",
    "MetadataElement",
    "Queryable",
    "ResourceProperty",
    "SpatialBond",
    "SpatialExtent",
    "ViewVisibility",
    "parse_bonds",
    "resolve_queryable",
]
