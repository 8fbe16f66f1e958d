"""Parse textual bond expressions into bond AST nodes."""

from __future__ import annotations

import logging
from importlib import resources
from typing import Any

from lark import Lark, Token, Transformer, UnexpectedInput

from bond_compiler.bonds.ast_nodes import (
    Bond,
    BondExpression,
    BondOperator,
    LogicalBond,
    SpatialBond,
    SpatialExtent,
    resolve_queryable,
)
from bond_compiler.exceptions import BondParseError

logger = logging.getLogger(__name__)

_COMPARISON_OPERATORS: dict[str, BondOperator] = {
    "=": BondOperator.EQUAL,
    "!=": BondOperator.NOT_EQUAL,
    ">": BondOperator.GREATER,
    ">=": BondOperator.GREATER_OR_EQUAL,
    "<": BondOperator.LESS,
    "<=": BondOperator.LESS_OR_EQUAL,
    "~": BondOperator.LIKE,
}

_EXISTENCE_OPERATORS: dict[str, BondOperator] = {
    "EXISTS": BondOperator.EXISTS,
    "MISSING": BondOperator.NOT_EXISTS,
}


def _load_grammar() -> str:
    """Load the Lark grammar from the package resources."""
    return resources.files("bond_compiler.bonds").joinpath("grammar.lark").read_text()


_parser = Lark(_load_grammar(), parser="lalr")


class _BondTransformer(Transformer):
    """Transform Lark parse tree into bond AST nodes."""

    def or_expr(self, items: list[Any]) -> LogicalBond:
        return LogicalBond.or_(*items)

    def and_expr(self, items: list[Any]) -> LogicalBond:
        return LogicalBond.and_(*items)

    def negation(self, items: list[Any]) -> LogicalBond:
        return LogicalBond.not_(items[0])

    def comparison(self, items: list[Any]) -> Bond:
        field, op, value = items
        return Bond(resolve_queryable(str(field)), _COMPARISON_OPERATORS[str(op)], value)

    def existence(self, items: list[Any]) -> Bond:
        field, op = items
        return Bond(resolve_queryable(str(field)), _EXISTENCE_OPERATORS[str(op)])

    def spatial(self, items: list[Any]) -> SpatialBond:
        op, west, south, east, north = items
        extent = SpatialExtent(
            west=float(west),
            east=float(east),
            north=float(north),
            south=float(south),
        )
        return SpatialBond(BondOperator(str(op)), extent)

    def quoted_value(self, items: list[Any]) -> str:
        raw = str(items[0])[1:-1]
        return raw.replace('\\"', '"').replace("\\\\", "\\")

    def bare_value(self, items: list[Token]) -> str:
        return str(items[0])


_transformer = _BondTransformer()


def parse_bonds(text: str) -> BondExpression:
    """Parse a textual bond expression.

    Args:
        text: Expression such as ``title = "Ocean" AND BBOX(-10, 30, 20, 50)``.

    Returns:
        The bond expression tree.

    Raises:
        BondParseError: If the text is empty or not a valid expression.
    """
    text = text.strip()
    if not text:
        raise BondParseError(text, "empty expression")

    try:
        tree = _parser.parse(text)
    except UnexpectedInput as e:
        raise BondParseError(text, str(e)) from e

    expression = _transformer.transform(tree)
    logger.debug("Parsed %r into %r", text, expression)
    return expression
