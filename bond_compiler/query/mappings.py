"""Index-level field names and the index layout queries are scoped to."""

from __future__ import annotations

from dataclasses import dataclass

# Fields shared by every index
INDEX_FIELD = "_index"
DATABASE_ID = "databaseId"
FOLDER_NAME = "folderName"

# Meta-folder index
DATA_FOLDER = "dataFolder"
SOURCE_ID = "sourceId"

# Views index
VIEW_CREATOR = "creator"
VIEW_OWNER = "owner"
VIEW_VISIBILITY = "visibility"

# Keyword sub-field used for aggregations and exact probes
AGG_FIELD_SUFFIX = "_agg"


def to_agg_field(name: str) -> str:
    """Return the aggregation field backing property ``name``."""
    return f"{name}{AGG_FIELD_SUFFIX}"


@dataclass(frozen=True)
class IndexLayout:
    """Names of the indexes the scoped templates refer to.

    Attributes:
        data_folder: Index holding harvested records.
        meta_folder: Index holding per-source folder metadata.
        folder_registry: Index holding the folder registry.
        views: Index holding stored views.
        known: Every index a folder may span; folder and view lookups
            union over these.
    """

    data_folder: str = "data-folder-index"
    meta_folder: str = "meta-folder-index"
    folder_registry: str = "folder-registry-index"
    views: str = "views-index"
    known: tuple[str, ...] = (
        "data-folder-index",
        "meta-folder-index",
        "folder-registry-index",
        "views-index",
        "users-index",
        "augmenters-index",
        "cache-index",
        "configuration-index",
    )


DEFAULT_LAYOUT = IndexLayout()
