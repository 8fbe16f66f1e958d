"""Configuration management for bond-compiler."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from bond_compiler.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from bond_compiler.query.mappings import DEFAULT_LAYOUT, IndexLayout
from bond_compiler.ranking import WeightedRankingStrategy


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "bond-compiler" / "config.toml"


@dataclass
class Config:
    """Compiler configuration.

    Attributes:
        layout: Index names the scoped templates refer to.
        ranking_weights: Property name to boost weight (>= 1).
        data_core_sources: Source ids selected for the data core.
        data_folders: Source id to local data folder. Sources not listed
            are treated as distributed.
        include_deleted: Keep soft-deleted records visible.
        count_honors_deleted_flag: Let include_deleted apply to count
            queries as well.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    layout: IndexLayout = DEFAULT_LAYOUT
    ranking_weights: dict[str, float] = field(default_factory=dict)
    data_core_sources: list[str] = field(default_factory=list)
    data_folders: dict[str, str] = field(default_factory=dict)
    include_deleted: bool = False
    count_honors_deleted_flag: bool = False
    colored_output: bool = True
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        for name, weight in self.ranking_weights.items():
            if weight < 1:
                raise ConfigValidationError(f"ranking.weights.{name}", weight, "must be >= 1")

        for index in (
            self.layout.data_folder,
            self.layout.meta_folder,
            self.layout.folder_registry,
            self.layout.views,
        ):
            if index not in self.layout.known:
                warnings.append(f"Index '{index}' is not listed in indexes.known")

        unmapped = [sid for sid in self.data_core_sources if sid not in self.data_folders]
        if unmapped and self.data_folders:
            warnings.append(
                f"Data-core sources without a local data folder: {', '.join(unmapped)}"
            )

        return warnings

    def ranking(self) -> WeightedRankingStrategy:
        """Build the ranking strategy described by this config."""
        return WeightedRankingStrategy(self.ranking_weights)


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: bond-compiler init-config"
        )
        return config, warnings + config.validate()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _require_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigValidationError(key, value, "must be a string")
    return value


def _require_str_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigValidationError(key, value, "must be a list of strings")
    return list(value)


def _require_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigValidationError(key, value, "must be a boolean")
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigValidationError(name, section, "must be a table")
    return section


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [indexes] section
    indexes = _section(data, "indexes")
    layout_kwargs: dict[str, Any] = {}
    for key in ("data_folder", "meta_folder", "folder_registry", "views"):
        if key in indexes:
            layout_kwargs[key] = _require_str(f"indexes.{key}", indexes[key])
    if "known" in indexes:
        layout_kwargs["known"] = tuple(_require_str_list("indexes.known", indexes["known"]))
    if layout_kwargs:
        config.layout = IndexLayout(**layout_kwargs)

    # Parse [ranking] section
    ranking = _section(data, "ranking")
    if "weights" in ranking:
        value = ranking["weights"]
        if not isinstance(value, dict):
            raise ConfigValidationError("ranking.weights", value, "must be a table")
        for name, weight in value.items():
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ConfigValidationError(f"ranking.weights.{name}", weight, "must be a number")
        config.ranking_weights = dict(value)

    # Parse [data_core] section
    data_core = _section(data, "data_core")
    if "source_ids" in data_core:
        config.data_core_sources = _require_str_list(
            "data_core.source_ids", data_core["source_ids"]
        )

    # Parse [data_folders] section
    data_folders = _section(data, "data_folders")
    for source_id, folder in data_folders.items():
        config.data_folders[source_id] = _require_str(f"data_folders.{source_id}", folder)

    # Parse [query] section
    query = _section(data, "query")
    if "include_deleted" in query:
        config.include_deleted = _require_bool("query.include_deleted", query["include_deleted"])
    if "count_honors_deleted_flag" in query:
        config.count_honors_deleted_flag = _require_bool(
            "query.count_honors_deleted_flag", query["count_honors_deleted_flag"]
        )

    # Parse [display] section
    display = _section(data, "display")
    if "colored_output" in display:
        config.colored_output = _require_bool("display.colored_output", display["colored_output"])

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "indexes": {
            "data_folder": config.layout.data_folder,
            "meta_folder": config.layout.meta_folder,
            "folder_registry": config.layout.folder_registry,
            "views": config.layout.views,
            "known": list(config.layout.known),
        },
        "query": {
            "include_deleted": config.include_deleted,
            "count_honors_deleted_flag": config.count_honors_deleted_flag,
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    if config.ranking_weights:
        data["ranking"] = {"weights": dict(config.ranking_weights)}

    if config.data_core_sources:
        data["data_core"] = {"source_ids": list(config.data_core_sources)}

    if config.data_folders:
        data["data_folders"] = dict(config.data_folders)

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
