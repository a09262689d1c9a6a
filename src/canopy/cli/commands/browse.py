from __future__ import annotations

from pathlib import Path

import click

from canopy.cli.commands._common import (
    load_tree_or_exit,
    resolve_options,
    tree_log_context,
)


@click.command()
@click.argument("tree_file", type=click.Path(path_type=Path))
@click.option(
    "--multiple/--single",
    default=None,
    help="Allow selecting several nodes.",
)
@click.option(
    "--search/--no-search",
    "searchable",
    default=None,
    help="Show the search box.",
)
@click.pass_context
def browse(
    ctx: click.Context,
    tree_file: Path,
    multiple: bool | None,
    searchable: bool | None,
) -> None:
    """Explore a tree document interactively.

    Arrow keys move, Left/Right collapse and expand, Enter selects,
    Space checks, / jumps to the search box, q quits.
    """
    from canopy.tui.app import CanopyApp

    options = resolve_options(ctx, multiple=multiple, searchable=searchable)
    with tree_log_context(tree_file):
        roots = load_tree_or_exit(tree_file)
        CanopyApp(roots, options, title=tree_file.name).run()
