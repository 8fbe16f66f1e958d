"""Canned filter-only queries for folder, registry, view and source lookups."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from opensearch_dsl.query import Query

from bond_compiler.bonds.ast_nodes import ResourceProperty, ViewVisibility
from bond_compiler.query import clauses
from bond_compiler.query.mappings import (
    DATA_FOLDER,
    DATABASE_ID,
    DEFAULT_LAYOUT,
    FOLDER_NAME,
    INDEX_FIELD,
    SOURCE_ID,
    VIEW_CREATOR,
    VIEW_OWNER,
    VIEW_VISIBILITY,
    IndexLayout,
)

logger = logging.getLogger(__name__)


def _database_id_query(database_id: str) -> Query:
    return clauses.match_phrase(DATABASE_ID, database_id)


def _index_query(index: str) -> Query:
    return clauses.match_phrase(INDEX_FIELD, index)


def _source_id_query(source_id: str) -> Query:
    return clauses.match_phrase(SOURCE_ID, source_id)


def _indexes_query_list(layout: IndexLayout) -> list[Query]:
    return [_index_query(index) for index in layout.known]


def build_search_entries_query(
    database_id: str,
    folder_name: str,
    layout: IndexLayout = DEFAULT_LAYOUT,
) -> Query:
    """All entries of folder ``folder_name`` in database ``database_id``."""
    return clauses.filtered_any(
        [_database_id_query(database_id), clauses.match_phrase(FOLDER_NAME, folder_name)],
        _indexes_query_list(layout),
    )


def build_search_registry_query(
    database_id: str,
    layout: IndexLayout = DEFAULT_LAYOUT,
) -> Query:
    """All folder registry entries of database ``database_id``."""
    return clauses.filter_(
        _database_id_query(database_id),
        _index_query(layout.folder_registry),
    )


def build_search_views_query(
    database_id: str,
    creator: str | None = None,
    owner: str | None = None,
    visibility: ViewVisibility | str | None = None,
    layout: IndexLayout = DEFAULT_LAYOUT,
) -> Query:
    """Views of ``database_id``, optionally narrowed by creator, owner and visibility."""
    filters = [_database_id_query(database_id)]

    if creator is not None:
        filters.append(clauses.match_phrase(VIEW_CREATOR, creator))

    if owner is not None:
        filters.append(clauses.match_phrase(VIEW_OWNER, owner))

    if visibility is not None:
        name = visibility.value if isinstance(visibility, ViewVisibility) else visibility
        filters.append(clauses.match_phrase(VIEW_VISIBILITY, name))

    return clauses.filtered_any(filters, _indexes_query_list(layout))


def build_source_id_query(source_id: str, data_folder_map: Mapping[str, str]) -> Query:
    """Records of ``source_id``, restricted to its data folder when held locally.

    A source missing from ``data_folder_map`` is distributed: its records
    are resolved from a peer, so only the source id is matched.
    """
    data_folder = data_folder_map.get(source_id)

    if data_folder is None:
        logger.debug("Source %s has no local data folder", source_id)
        return _source_id_query(source_id)

    return clauses.filter_(
        _source_id_query(source_id),
        clauses.match_phrase(DATA_FOLDER, data_folder),
    )


def build_search_query(
    database_id: str,
    index: str | None = None,
    field: str | None = None,
    values: Sequence[str] | str | None = None,
) -> Query:
    """Entries of ``database_id``, optionally in ``index`` with ``field`` among ``values``.

    Args:
        database_id: Database identifier every entry must carry.
        index: Optional index restriction.
        field: Field to match ``values`` against; requires ``values``.
        values: One value or a list; at least one must match.

    Returns:
        ``filter(databaseId[, _index])`` plus, when a field is given, a
        ``should`` over the values with ``minimum_should_match="1"``.
    """
    filters = [_database_id_query(database_id)]
    if index is not None:
        filters.append(_index_query(index))

    if field is None:
        return clauses.filter_(*filters)

    if values is None:
        raise ValueError("values are required when field is given")
    if isinstance(values, str):
        values = [values]

    return clauses.filtered_any(
        filters,
        [clauses.match_phrase(field, value) for value in values],
    )


def build_data_folder_query(
    database_id: str,
    source_ids: Sequence[str],
    layout: IndexLayout = DEFAULT_LAYOUT,
) -> Query:
    """Meta-folder entries holding a data folder for any of ``source_ids``."""
    any_source = clauses.should(
        *(_source_id_query(source_id) for source_id in source_ids),
        minimum_should_match=True,
    )
    return clauses.filter_(
        _database_id_query(database_id),
        clauses.exists(DATA_FOLDER),
        _index_query(layout.meta_folder),
        any_source,
    )


def build_min_max_query(source_id: str, layout: IndexLayout = DEFAULT_LAYOUT) -> Query:
    """Scope for extremum lookups over the records of ``source_id``."""
    return clauses.filter_(
        clauses.match_phrase(ResourceProperty.SOURCE_ID.name, source_id),
        _index_query(layout.data_folder),
    )


def build_is_data_core_query(value: str, source_ids: Sequence[str] = ()) -> Query:
    """Records whose data-core flag equals ``value``.

    When data-core sources are selected, the record must also come from one
    of them.
    """
    flag = clauses.match_phrase(ResourceProperty.IS_GEOSS_DATA_CORE.name, value)
    if not source_ids:
        return clauses.filter_(flag)

    any_source = clauses.should(
        *(clauses.match_phrase(ResourceProperty.SOURCE_ID.name, sid) for sid in source_ids),
        minimum_should_match=True,
    )
    return clauses.filter_(any_source, flag)
