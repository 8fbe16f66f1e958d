"""Compile bonds into OpenSearch boolean queries."""

from bond_compiler.query.batch import ProbeRequest, build_distinct_values_items, to_msearch_body
from bond_compiler.query.builder import CompiledQuery, QueryBuilder, finalize
from bond_compiler.query.mappings import DEFAULT_LAYOUT, IndexLayout
from bond_compiler.query.minmax import (
    ExtremumFinder,
    build_min_max_resource_time_stamp_value,
    build_min_max_value_query,
)
from bond_compiler.query.templates import (
    build_data_folder_query,
    build_is_data_core_query,
    build_min_max_query,
    build_search_entries_query,
    build_search_query,
    build_search_registry_query,
    build_search_views_query,
    build_source_id_query,
)
from bond_compiler.query.translator import (
    build_geo_shape_query,
    build_subject_query,
    translate,
    translate_bond,
)
from bond_compiler.query.weights import build_basic_query, build_weight_query

__all__ = [
    "DEFAULT_LAYOUT",
    "CompiledQuery",
    "ExtremumFinder",
    "IndexLayout",
    "ProbeRequest",
    "QueryBuilder",
    "build_basic_query",
    "build_data_folder_query",
    "build_distinct_values_items",
    "build_geo_shape_query",
    "build_is_data_core_query",
    "build_min_max_query",
    "build_min_max_resource_time_stamp_value",
    "build_min_max_value_query",
    "build_search_entries_query",
    "build_search_query",
    "build_search_registry_query",
    "build_search_views_query",
    "build_source_id_query",
    "build_subject_query",
    "build_weight_query",
    "finalize",
    "to_msearch_body",
    "translate",
    "translate_bond",
]
