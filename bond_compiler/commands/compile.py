"""Compile a textual bond expression into an OpenSearch query."""

from __future__ import annotations

import click

from bond_compiler.bonds.parser import parse_bonds
from bond_compiler.cli import Context, pass_context
from bond_compiler.config import Config
from bond_compiler.exceptions import BondParseError, TranslationError
from bond_compiler.query.builder import QueryBuilder
from bond_compiler.utils.output import error, print_json, verbose

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1
EXIT_TRANSLATION_ERROR = 2


def builder_from_config(config: Config, include_deleted: bool | None = None) -> QueryBuilder:
    """Create a fresh single-use builder configured from ``config``."""
    return QueryBuilder(
        config.ranking(),
        config.data_folders,
        config.include_deleted if include_deleted is None else include_deleted,
        layout=config.layout,
        data_core_sources=config.data_core_sources,
        count_honors_deleted_flag=config.count_honors_deleted_flag,
    )


@click.command("compile")
@click.argument("expression", nargs=-1, required=True)
@click.option(
    "--count",
    is_flag=True,
    default=False,
    help="Build a count query (no ranking clauses)",
)
@click.option(
    "--include-deleted/--exclude-deleted",
    default=None,
    help="Override query.include_deleted from the config",
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
    expression: tuple[str, ...],
    count: bool,
    include_deleted: bool | None,
    compact: bool,
) -> None:
    """Compile EXPRESSION into the query body sent to the search engine.

    Multiple arguments are joined with spaces.

    Examples:

    \b
      bond-compiler compile 'title = "Ocean"'
      bond-compiler compile 'keyword ~ sea* AND NOT isDeleted EXISTS' --count
      bond-compiler compile 'CONTAINS(-10, 30, 20, 50) OR sourceId = src1'
    """
    config = ctx.config or Config()
    text = " ".join(expression)
    verbose(f"Compiling: {text}")

    try:
        bonds = parse_bonds(text)
    except BondParseError as e:
        error(str(e))
        raise SystemExit(EXIT_PARSE_ERROR)

    builder = builder_from_config(config, include_deleted)
    try:
        builder.append(builder.build_bond_query(bonds))
    except TranslationError as e:
        error(str(e))
        raise SystemExit(EXIT_TRANSLATION_ERROR)

    compiled = builder.build(count=count)
    print_json({"query": compiled.to_dict()}, compact=compact)
