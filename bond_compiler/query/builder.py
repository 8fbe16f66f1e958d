"""Assemble ad hoc boolean queries and merge them with the baseline filter.

``QueryBuilder`` keeps the open/append/close protocol callers are used to,
but holds the groups as an in-memory tree instead of text, so protocol
violations surface as ``AssemblyError`` rather than as unparseable output.
A builder is single-use and not thread-safe.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from opensearch_dsl.query import Bool, Query

from bond_compiler.bonds.ast_nodes import (
    Bond,
    BondExpression,
    BondOperator,
    LogicalBond,
    LogicalOperator,
    MetadataElement,
    ResourceProperty,
    SpatialBond,
)
from bond_compiler.exceptions import AssemblyError, MinMaxDiscoveryError
from bond_compiler.query import clauses, minmax, templates, translator, weights
from bond_compiler.query.mappings import DEFAULT_LAYOUT, IndexLayout
from bond_compiler.ranking import RankingStrategy

logger = logging.getLogger(__name__)

_MUST = "must"
_SHOULD = "should"
_MUST_NOT = "must_not"


@dataclass(frozen=True)
class CompiledQuery:
    """The finalized query handed to the search engine."""

    query: Query
    count: bool = False

    def to_dict(self) -> dict[str, Any]:
        return self.query.to_dict()


def finalize(search_query: Query, basic_query: Query, count: bool = False) -> CompiledQuery:
    """Conjoin the caller's query with the baseline filter."""
    return CompiledQuery(clauses.must(search_query, basic_query), count)


@dataclass
class _OpenGroup:
    kind: str
    children: list[Query] = field(default_factory=list)
    separated: bool = False

    def close(self, minimum_should_match: bool) -> Query:
        params: dict[str, Any] = {self.kind: self.children}
        if minimum_should_match:
            params["minimum_should_match"] = clauses.MINIMUM_SHOULD_MATCH
        return Bool(**params)


class QueryBuilder:
    """Single-use assembler for one logical query.

    Args:
        ranking: Boost policy for translated bonds and the baseline filter.
        data_folder_map: Source id to local data folder; sources missing
            from it are distributed.
        deleted_included: Whether soft-deleted records stay visible.
        finder: Delegate computing extrema for min/max discovery.
        layout: Index names used by scoped lookups.
        data_core_sources: Selected data-core source ids.
        count_honors_deleted_flag: Let ``deleted_included`` drop the
            visibility clause in count mode too.
    """

    def __init__(
        self,
        ranking: RankingStrategy,
        data_folder_map: Mapping[str, str] | None = None,
        deleted_included: bool = False,
        *,
        finder: minmax.ExtremumFinder | None = None,
        layout: IndexLayout = DEFAULT_LAYOUT,
        data_core_sources: Sequence[str] = (),
        count_honors_deleted_flag: bool = False,
    ) -> None:
        self.ranking = ranking
        self.data_folder_map = dict(data_folder_map or {})
        self.deleted_included = deleted_included
        self.finder = finder
        self.layout = layout
        self.data_core_sources = tuple(data_core_sources)
        self.count_honors_deleted_flag = count_honors_deleted_flag

        self._stack: list[_OpenGroup] = []
        self._roots: list[Query] = []
        self._built = False

    # ------------------------------------------------------------------
    # Append protocol
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._built:
            raise AssemblyError("builder already finalized")

    def _open(self, kind: str) -> None:
        self._check_open()
        self._stack.append(_OpenGroup(kind))

    def append_bool_must_open_tag(self) -> None:
        self._open(_MUST)

    def append_bool_should_open_tag(self) -> None:
        self._open(_SHOULD)

    def append_bool_must_not_open_tag(self) -> None:
        self._open(_MUST_NOT)

    def _add(self, query: Query) -> None:
        if not self._stack:
            self._roots.append(query)
            return
        group = self._stack[-1]
        if group.children and not group.separated:
            raise AssemblyError("sibling clauses must be delimited by a separator")
        group.children.append(query)
        group.separated = False

    def append(self, query: Query) -> None:
        """Add ``query`` to the innermost open group (or as the top-level query)."""
        self._check_open()
        self._add(query)

    def append_separator(self) -> None:
        self._check_open()
        if not self._stack:
            raise AssemblyError("separator outside of a group")
        group = self._stack[-1]
        if not group.children or group.separated:
            raise AssemblyError("separator must follow a clause")
        group.separated = True

    def append_closing_tag(self, minimum_should_match: bool = False) -> None:
        """Close the most recently opened group."""
        self._check_open()
        if not self._stack:
            raise AssemblyError("closing tag without an open group")
        group = self._stack.pop()
        if group.separated:
            raise AssemblyError("trailing separator before closing tag")
        self._add(group.close(minimum_should_match))

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def build_basic_query(self, count: bool) -> Query:
        return weights.build_basic_query(
            count,
            self.ranking,
            self.deleted_included,
            count_honors_deleted_flag=self.count_honors_deleted_flag,
        )

    def build(self, count: bool = False) -> CompiledQuery:
        """Merge the assembled query with the baseline filter.

        Raises:
            AssemblyError: If groups are left open, more than one top-level
                query was assembled, or the builder was already finalized.
        """
        self._check_open()
        if self._stack:
            raise AssemblyError(f"{len(self._stack)} group(s) left open")
        if len(self._roots) > 1:
            raise AssemblyError(f"{len(self._roots)} top-level queries, expected one")

        self._built = True
        search_query = self._roots[0] if self._roots else clauses.match_all()
        compiled = finalize(search_query, self.build_basic_query(count), count)
        logger.debug("Built %s query", "count" if count else "search")
        return compiled

    # ------------------------------------------------------------------
    # Bond lowering
    # ------------------------------------------------------------------

    def build_source_id_query(self, bond: Bond) -> Query:
        return templates.build_source_id_query(bond.value, self.data_folder_map)

    def build_metadata_element_query(self, bond: Bond) -> Query:
        return translator.translate_bond(bond, self.ranking)

    def build_subject_query(self, value: str, operator: BondOperator) -> Query:
        return translator.build_subject_query(value, operator, self.ranking)

    def build_is_data_core_query(self, value: str) -> Query:
        return templates.build_is_data_core_query(value, self.data_core_sources)

    def build_min_max_query(self, source_id: str) -> Query:
        return templates.build_min_max_query(source_id, self.layout)

    def build_bond_query(self, expression: BondExpression) -> Query:
        """Lower a whole bond expression to a query clause."""
        if isinstance(expression, LogicalBond):
            children = [self.build_bond_query(child) for child in expression.bonds]
            if expression.operator is LogicalOperator.AND:
                return clauses.must(*children)
            if expression.operator is LogicalOperator.OR:
                return clauses.should(*children, minimum_should_match=True)
            return clauses.must_not(*children)

        if isinstance(expression, SpatialBond):
            return translator.build_geo_shape_query(expression)

        prop = expression.property
        if prop == ResourceProperty.SOURCE_ID and expression.operator is BondOperator.EQUAL:
            return self.build_source_id_query(expression)
        if prop == MetadataElement.SUBJECT:
            return self.build_subject_query(expression.value, expression.operator)
        if (
            prop == ResourceProperty.IS_GEOSS_DATA_CORE
            and expression.operator is BondOperator.EQUAL
        ):
            return self.build_is_data_core_query(expression.value)
        return self.build_metadata_element_query(expression)

    # ------------------------------------------------------------------
    # Min/max discovery
    # ------------------------------------------------------------------

    def _require_finder(self, field: str) -> minmax.ExtremumFinder:
        if self.finder is None:
            raise MinMaxDiscoveryError(field, "no extremum finder configured")
        return self.finder

    def build_min_max_value_query(
        self,
        field: str,
        is_max: bool,
        is_date: bool,
        scope: Query | None = None,
    ) -> Query:
        return minmax.build_min_max_value_query(
            self._require_finder(field), field, is_max, is_date, scope
        )

    def build_min_max_resource_time_stamp_value(
        self, source_id: str | None, operator: BondOperator
    ) -> Query:
        finder = self._require_finder(ResourceProperty.RESOURCE_TIME_STAMP.name)
        return minmax.build_min_max_resource_time_stamp_value(finder, source_id, operator)
