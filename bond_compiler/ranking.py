"""Ranking policy: boost weights for properties and quality buckets."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Protocol

from bond_compiler.bonds.ast_nodes import Queryable

# Quality dimensions are stored as discrete levels 1..MAX_VARIABLE_VALUE
MAX_VARIABLE_VALUE = 5


class RankingStrategy(Protocol):
    """Pure mapping from properties and bucket levels to boost weights."""

    def property_weight(self, prop: Queryable | str) -> float:
        """Boost for clauses over ``prop``; 1 means no boost."""
        ...

    def range_weight(self, field: str, level: int) -> float:
        """Boost for documents at quality ``level`` of dimension ``field``."""
        ...


@dataclass(frozen=True)
class WeightedRankingStrategy:
    """Ranking strategy driven by a table of per-property weights.

    Properties missing from the table weigh 1. A quality level is boosted
    proportionally to its dimension weight, so level ``i`` of a dimension
    with weight ``w`` weighs ``w * i``.
    """

    weights: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name, weight in self.weights.items():
            if weight < 1:
                raise ValueError(f"Weight for {name} must be >= 1, got {weight}")
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    def property_weight(self, prop: Queryable | str) -> float:
        name = prop.name if isinstance(prop, Queryable) else prop
        return self.weights.get(name, 1)

    def range_weight(self, field: str, level: int) -> float:
        if not 1 <= level <= MAX_VARIABLE_VALUE:
            raise ValueError(f"Level {level} outside 1..{MAX_VARIABLE_VALUE}")
        return self.property_weight(field) * level


DEFAULT_RANKING = WeightedRankingStrategy()
