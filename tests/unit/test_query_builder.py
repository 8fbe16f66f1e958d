"""Unit tests for QueryBuilder assembly and bond lowering."""

from __future__ import annotations

from typing import Any

import pytest
from opensearch_dsl.query import Bool, MatchAll

from bond_compiler.bonds import parse_bonds
from bond_compiler.bonds.ast_nodes import (
    Bond,
    BondOperator,
    LogicalBond,
    MetadataElement,
    ResourceProperty,
    SpatialBond,
    SpatialExtent,
)
from bond_compiler.exceptions import (
    AssemblyError,
    BondCompilerError,
    MinMaxDiscoveryError,
    UnsupportedOperatorError,
)
from bond_compiler.query import clauses
from bond_compiler.query.builder import CompiledQuery, QueryBuilder, finalize
from bond_compiler.query.translator import build_geo_shape_query, build_subject_query, translate
from bond_compiler.query.weights import build_basic_query, build_deleted_excluded_query
from bond_compiler.ranking import WeightedRankingStrategy

A = clauses.match_phrase("title", "a")
B = clauses.match_phrase("title", "b")
C = clauses.match_phrase("keyword", "c")


@pytest.fixture
def builder(ranking: WeightedRankingStrategy) -> QueryBuilder:
    return QueryBuilder(ranking, {"src1": "data-A"}, data_core_sources=["src1", "src2"])


# ---------------------------------------------------------------------------
# Finalization
# ---------------------------------------------------------------------------


class TestFinalize:
    def test_conjoins_search_and_basic(self) -> None:
        compiled = finalize(A, B)
        assert isinstance(compiled, CompiledQuery)
        assert compiled.to_dict() == {"bool": {"must": [A.to_dict(), B.to_dict()]}}

    def test_count_flag_is_kept(self) -> None:
        assert finalize(A, B, count=True).count is True

    def test_build_merges_with_basic_query(
        self, builder: QueryBuilder, ranking: WeightedRankingStrategy
    ) -> None:
        builder.append(A)
        compiled = builder.build()
        assert compiled.query == clauses.must(A, build_basic_query(False, ranking, False))

    def test_count_build(self, builder: QueryBuilder) -> None:
        builder.append(A)
        compiled = builder.build(count=True)
        assert compiled.count is True
        assert compiled.query == clauses.must(A, build_deleted_excluded_query())

    def test_empty_builder_matches_everything(self, builder: QueryBuilder) -> None:
        compiled = builder.build(count=True)
        assert compiled.query == clauses.must(MatchAll(), build_deleted_excluded_query())

    def test_count_honors_flag(self, ranking: WeightedRankingStrategy) -> None:
        b = QueryBuilder(ranking, deleted_included=True, count_honors_deleted_flag=True)
        b.append(A)
        assert b.build(count=True).query == clauses.must(A, MatchAll())

    def test_single_use(self, builder: QueryBuilder) -> None:
        builder.build()
        with pytest.raises(AssemblyError):
            builder.build()
        with pytest.raises(AssemblyError):
            builder.append(A)


# ---------------------------------------------------------------------------
# Append protocol
# ---------------------------------------------------------------------------


class TestAppendProtocol:
    def test_should_group(self, builder: QueryBuilder) -> None:
        builder.append_bool_should_open_tag()
        builder.append(A)
        builder.append_separator()
        builder.append(B)
        builder.append_closing_tag(minimum_should_match=True)

        compiled = builder.build()
        assert compiled.query.must[0] == Bool(should=[A, B], minimum_should_match="1")

    def test_nested_groups(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        builder.append(A)
        builder.append_separator()
        builder.append_bool_must_not_open_tag()
        builder.append(C)
        builder.append_closing_tag()
        builder.append_closing_tag()

        compiled = builder.build()
        assert compiled.query.must[0] == Bool(must=[A, Bool(must_not=[C])])

    def test_group_without_msm(self, builder: QueryBuilder) -> None:
        builder.append_bool_should_open_tag()
        builder.append(A)
        builder.append_closing_tag()
        assert builder.build().query.must[0].to_dict() == {"bool": {"should": [A.to_dict()]}}

    def test_missing_separator(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        builder.append(A)
        with pytest.raises(AssemblyError):
            builder.append(B)

    def test_leading_separator(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        with pytest.raises(AssemblyError):
            builder.append_separator()

    def test_double_separator(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        builder.append(A)
        builder.append_separator()
        with pytest.raises(AssemblyError):
            builder.append_separator()

    def test_trailing_separator(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        builder.append(A)
        builder.append_separator()
        with pytest.raises(AssemblyError):
            builder.append_closing_tag()

    def test_separator_outside_group(self, builder: QueryBuilder) -> None:
        builder.append(A)
        with pytest.raises(AssemblyError):
            builder.append_separator()

    def test_unbalanced_close(self, builder: QueryBuilder) -> None:
        with pytest.raises(AssemblyError):
            builder.append_closing_tag()

    def test_open_group_at_build(self, builder: QueryBuilder) -> None:
        builder.append_bool_must_open_tag()
        builder.append(A)
        with pytest.raises(AssemblyError) as exc_info:
            builder.build()
        assert "left open" in str(exc_info.value)

    def test_multiple_roots(self, builder: QueryBuilder) -> None:
        builder.append(A)
        builder.append(B)
        with pytest.raises(AssemblyError):
            builder.build()


# ---------------------------------------------------------------------------
# Bond lowering
# ---------------------------------------------------------------------------


class TestBondLowering:
    def test_metadata_element(
        self, builder: QueryBuilder, ranking: WeightedRankingStrategy
    ) -> None:
        bond = Bond(MetadataElement.TITLE, BondOperator.EQUAL, "Ocean")
        assert builder.build_bond_query(bond) == translate(
            MetadataElement.TITLE, BondOperator.EQUAL, "Ocean", ranking
        )

    def test_local_source_id(self, builder: QueryBuilder) -> None:
        bond = Bond(ResourceProperty.SOURCE_ID, BondOperator.EQUAL, "src1")
        assert builder.build_bond_query(bond) == clauses.filter_(
            clauses.match_phrase("sourceId", "src1"),
            clauses.match_phrase("dataFolder", "data-A"),
        )

    def test_distributed_source_id(self, builder: QueryBuilder) -> None:
        bond = Bond(ResourceProperty.SOURCE_ID, BondOperator.EQUAL, "remote")
        assert builder.build_bond_query(bond) == clauses.match_phrase("sourceId", "remote")

    def test_source_id_other_operator_translates(self, builder: QueryBuilder) -> None:
        bond = Bond(ResourceProperty.SOURCE_ID, BondOperator.EXISTS)
        assert builder.build_bond_query(bond) == clauses.exists("sourceId")

    def test_subject(self, builder: QueryBuilder, ranking: WeightedRankingStrategy) -> None:
        bond = Bond(MetadataElement.SUBJECT, BondOperator.EQUAL, "ocean")
        assert builder.build_bond_query(bond) == build_subject_query(
            "ocean", BondOperator.EQUAL, ranking
        )

    def test_data_core_membership(self, builder: QueryBuilder) -> None:
        bond = Bond(ResourceProperty.IS_GEOSS_DATA_CORE, BondOperator.EQUAL, "true")
        d = builder.build_bond_query(bond).to_dict()
        assert d["bool"]["filter"][1] == {"match_phrase": {"isGDC": {"query": "true"}}}
        assert len(d["bool"]["filter"][0]["bool"]["should"]) == 2

    def test_spatial(self, builder: QueryBuilder) -> None:
        bond = SpatialBond(BondOperator.CONTAINS, SpatialExtent(0, 1, 1, 0))
        assert builder.build_bond_query(bond) == build_geo_shape_query(bond)

    def test_logical(self, builder: QueryBuilder) -> None:
        expr = parse_bonds("(title = a OR title = b) AND NOT keyword = c")
        q = builder.build_bond_query(expr)
        title_a = builder.build_bond_query(Bond(MetadataElement.TITLE, BondOperator.EQUAL, "a"))
        title_b = builder.build_bond_query(Bond(MetadataElement.TITLE, BondOperator.EQUAL, "b"))
        keyword_c = builder.build_bond_query(
            Bond(MetadataElement.KEYWORD, BondOperator.EQUAL, "c")
        )
        assert q == clauses.must(
            clauses.should(title_a, title_b, minimum_should_match=True),
            clauses.must_not(keyword_c),
        )

    def test_unsupported_operator_propagates(self, builder: QueryBuilder) -> None:
        expr = LogicalBond.and_(Bond(MetadataElement.TITLE, BondOperator.MAX))
        with pytest.raises(UnsupportedOperatorError):
            builder.build_bond_query(expr)

    def test_min_max_scope(self, builder: QueryBuilder) -> None:
        assert builder.build_min_max_query("src1") == clauses.filter_(
            clauses.match_phrase("sourceId", "src1"),
            clauses.match_phrase("_index", "data-folder-index"),
        )


# ---------------------------------------------------------------------------
# Min/max discovery through the builder
# ---------------------------------------------------------------------------


class TestMinMaxDiscovery:
    def test_requires_finder(self, builder: QueryBuilder) -> None:
        with pytest.raises(MinMaxDiscoveryError) as exc_info:
            builder.build_min_max_value_query("title", True, False)
        assert exc_info.value.field == "title"

    def test_time_stamp_requires_finder(self, builder: QueryBuilder) -> None:
        with pytest.raises(BondCompilerError):
            builder.build_min_max_resource_time_stamp_value("src1", BondOperator.MIN)

    def test_delegates_to_finder(self, ranking: WeightedRankingStrategy, finder: Any) -> None:
        b = QueryBuilder(ranking, finder=finder)
        scope = b.build_min_max_query("src1")
        q = b.build_min_max_resource_time_stamp_value("src1", BondOperator.MAX)

        assert q == clauses.must(
            clauses.match_phrase("sourceId", "src1"),
            clauses.match_phrase("resourceTimeStamp", "1700000000123"),
        )
        assert finder.calls[0][1] == "resourceTimeStamp"

        pinned = b.build_min_max_value_query("resourceTimeStamp", False, True, scope)
        assert pinned.must[0] == scope
