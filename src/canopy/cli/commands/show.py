from __future__ import annotations

from pathlib import Path

import click

from canopy.cli.commands._common import (
    load_tree_or_exit,
    resolve_options,
    tree_log_context,
)
from canopy.cli.console import console
from canopy.cli.output import OutputFormat, format_json, visible_rows_payload
from canopy.logging import get_logger
from canopy.outline import outline
from canopy.tree.engine import TreeViewEngine


@click.command()
@click.argument("tree_file", type=click.Path(path_type=Path))
@click.option("-s", "--query", default="", help="Filter nodes by title.")
@click.option(
    "-e",
    "--expand",
    "expand_keys",
    multiple=True,
    help="Key of a node to expand (repeatable).",
)
@click.option(
    "--checked",
    "checked_keys",
    multiple=True,
    help="Key of a node to check, with its descendants (repeatable).",
)
@click.option(
    "--expand-all",
    is_flag=True,
    default=False,
    help="Expand every node that has children.",
)
@click.option(
    "--checkable/--no-checkable",
    default=None,
    help="Show check boxes (overrides configuration).",
)
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format.",
)
@click.pass_context
def show(
    ctx: click.Context,
    tree_file: Path,
    query: str,
    expand_keys: tuple[str, ...],
    checked_keys: tuple[str, ...],
    expand_all: bool,
    checkable: bool | None,
    fmt: str,
) -> None:
    """Print the visible outline of a tree document.

    Examples:
        canopy show tree.yaml --expand 1
        canopy show tree.yaml --query "child 1" --format json
    """
    logger = get_logger(__name__)
    options = resolve_options(
        ctx, default_expand_all=expand_all or None, checkable=checkable
    )
    with tree_log_context(tree_file):
        roots = load_tree_or_exit(tree_file)
        engine = TreeViewEngine(roots, options, expanded_keys=expand_keys)
        for key in checked_keys:
            if not engine.check(key, True):
                logger.warning("check_skipped", key=key)
        if query:
            engine.search(query)

    if fmt == OutputFormat.JSON.value:
        click.echo(format_json(visible_rows_payload(engine)))
        return

    lines = outline(engine)
    if not lines:
        message = "No matching nodes found" if query else "No data available"
        console.print(f"[dim]{message}[/dim]")
        return
    for line in lines:
        console.print(line, highlight=False)
