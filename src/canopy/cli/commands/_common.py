"""Helpers shared by subcommands."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from canopy.cli.context import CLIContext, ExitCode
from canopy.cli.output import format_error
from canopy.config import TreeOptions
from canopy.exceptions import TreeDataError
from canopy.logging import bind_context, clear_context
from canopy.tree.loader import load_tree
from canopy.tree.model import TreeNode


def get_cli_context(ctx: click.Context) -> CLIContext:
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]
    return cli_ctx


def resolve_options(ctx: click.Context, **overrides: Any) -> TreeOptions:
    """Configured tree options with explicit CLI flags layered on top."""
    options = get_cli_context(ctx).config.tree
    update = {name: value for name, value in overrides.items() if value is not None}
    return options.model_copy(update=update)


def load_tree_or_exit(path: Path) -> tuple[TreeNode, ...]:
    try:
        return load_tree(path)
    except TreeDataError as e:
        details = [f"Location: {e.location}"] if e.location else None
        click.echo(format_error(e.message, details=details), err=True)
        raise SystemExit(ExitCode.FAILURE) from e


@contextmanager
def tree_log_context(path: Path) -> Iterator[None]:
    """Tag every log event emitted inside the block with the tree file."""
    bind_context(tree_file=str(path))
    try:
        yield
    finally:
        clear_context()
