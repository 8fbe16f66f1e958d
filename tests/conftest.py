"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from bond_compiler.ranking import WeightedRankingStrategy

if TYPE_CHECKING:
    from collections.abc import Generator

    from opensearch_dsl.query import Query


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[indexes]
data_folder = "records"
meta_folder = "meta"
folder_registry = "registry"
views = "views"
known = ["records", "meta", "registry", "views"]

[ranking]
weights = { title = 3, isGDC = 4, metadataQuality = 2 }

[data_core]
source_ids = ["src1", "src2"]

[data_folders]
src1 = "data-A"

[query]
include_deleted = true
""")
    return config_path


@pytest.fixture
def ranking() -> WeightedRankingStrategy:
    """Ranking strategy with a few boosted properties."""
    return WeightedRankingStrategy(
        {
            "title": 3,
            "keyword": 2,
            "isGDC": 4,
            "metadataQuality": 2,
        }
    )


class FakeFinder:
    """Extremum finder returning a canned value and recording its calls."""

    def __init__(self, value: float = 0.0, exc: Exception | None = None) -> None:
        self.value = value
        self.exc = exc
        self.calls: list[tuple[Query, str, bool]] = []

    def find_min_max_value(self, query: Query, field: str, is_max: bool) -> float:
        self.calls.append((query, field, is_max))
        if self.exc is not None:
            raise self.exc
        return self.value


@pytest.fixture
def finder() -> FakeFinder:
    return FakeFinder(1700000000123.9)


@pytest.fixture
def make_finder() -> type[FakeFinder]:
    """Factory for finders with a custom value or failure."""
    return FakeFinder
