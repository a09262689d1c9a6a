"""Shared Rich console for CLI output (styled on a TTY, plain when piped)."""

from __future__ import annotations

from rich.console import Console

__all__ = ["console"]

console = Console()
