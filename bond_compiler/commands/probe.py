"""Print multi-search probes checking which values of a property occur."""

from __future__ import annotations

import click

from bond_compiler.cli import Context, pass_context
from bond_compiler.config import Config
from bond_compiler.query.batch import build_distinct_values_items, to_msearch_body
from bond_compiler.utils.output import console, create_table, print_json


@click.command("probe")
@click.argument("field")
@click.argument("values", nargs=-1, required=True)
@click.option(
    "--table",
    "as_table",
    is_flag=True,
    default=False,
    help="Summarize probes as a table instead of printing the msearch body",
)
@click.option(
    "--compact",
    is_flag=True,
    default=False,
    help="Print single-line JSON without highlighting",
)
@pass_context
def cli(
    ctx: Context,
    field: str,
    values: tuple[str, ...],
    as_table: bool,
    compact: bool,
) -> None:
    """Build one size-1 probe per VALUE of FIELD.

    The output is the alternating header/body list of a multi-search request.
    """
    config = ctx.config or Config()
    requests = build_distinct_values_items(values, field, config.layout)

    if as_table:
        table = create_table(title=f"Probes for {field}")
        table.add_column("Index", style="probe.index")
        table.add_column("Value", style="probe.value")
        for request in requests:
            table.add_row(request.index, request.value)
        console.print(table)
        return

    print_json(to_msearch_body(requests), compact=compact)
