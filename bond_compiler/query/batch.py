"""Per-value probe requests for batched distinct-value checks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from opensearch_dsl import Search

from bond_compiler.bonds.ast_nodes import Queryable
from bond_compiler.query import clauses
from bond_compiler.query.mappings import DEFAULT_LAYOUT, IndexLayout, to_agg_field


@dataclass(frozen=True)
class ProbeRequest:
    """One multi-search item: does any document in ``index`` hold ``value``?"""

    index: str
    value: str
    search: Search

    def header(self) -> dict[str, Any]:
        return {"index": self.index}

    def body(self) -> dict[str, Any]:
        return self.search.to_dict()


def build_distinct_values_items(
    values: Iterable[str],
    target: Queryable | str,
    layout: IndexLayout = DEFAULT_LAYOUT,
) -> list[ProbeRequest]:
    """Build one size-1 probe per candidate value of ``target``.

    Each probe phrase-matches the value on the target's aggregation field in
    the data-folder index; probes are independent and meant for a single
    multi-search round trip.
    """
    name = target.name if isinstance(target, Queryable) else target
    agg_field = to_agg_field(name)

    return [
        ProbeRequest(
            index=layout.data_folder,
            value=value,
            search=Search(index=layout.data_folder)
            .query(clauses.match_phrase(agg_field, value))
            .extra(size=1),
        )
        for value in values
    ]


def to_msearch_body(requests: Iterable[ProbeRequest]) -> list[dict[str, Any]]:
    """Flatten probes into the alternating header/body list of a multi-search."""
    body: list[dict[str, Any]] = []
    for request in requests:
        body.append(request.header())
        body.append(request.body())
    return body
