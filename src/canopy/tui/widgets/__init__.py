"""Textual widgets for Canopy."""

from __future__ import annotations

from canopy.tui.widgets.tree_view import TreeView

__all__ = ["TreeView"]
