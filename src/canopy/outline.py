"""Text rendering of visible rows, shared by the CLI and the TUI."""

from __future__ import annotations

from rich.markup import escape

from canopy.tree.engine import TreeViewEngine
from canopy.tree.visibility import VisibleNodeRef

EXPANDED_ICON = "\u25bc"  # ▼
COLLAPSED_ICON = "\u25b6"  # ▶
INDENT = "  "

_CHECK_BOXES: dict[bool | str, str] = {
    True: "[x]",
    "mixed": "[-]",
    False: "[ ]",
}


def row_text(engine: TreeViewEngine, ref: VisibleNodeRef) -> str:
    """Plain one-line representation of a visible row."""
    attrs = engine.item_attributes(ref)
    parts = [INDENT * (attrs.level - 1)]
    if attrs.expanded is None:
        parts.append("  ")
    else:
        parts.append(f"{EXPANDED_ICON if attrs.expanded else COLLAPSED_ICON} ")
    if engine.options.checkable:
        parts.append(f"{_CHECK_BOXES[attrs.checked]} ")
    if ref.node.icon:
        parts.append(f"{ref.node.icon} ")
    parts.append(ref.node.title)
    return "".join(parts)


def row_markup(
    engine: TreeViewEngine,
    ref: VisibleNodeRef,
    *,
    show_focus: bool = True,
) -> str:
    """Rich markup for a row: focus reversed, selection bold, disabled dim."""
    attrs = engine.item_attributes(ref)
    markup = escape(row_text(engine, ref))
    styles: list[str] = []
    if attrs.disabled:
        styles.append("dim")
    if attrs.selected:
        styles.append("bold")
    if ref.key in engine.search_result.matched_keys:
        styles.append("underline")
    if show_focus and attrs.tabindex == 0:
        styles.append("reverse")
    if styles:
        style = " ".join(styles)
        markup = f"[{style}]{markup}[/]"
    return markup


def outline(engine: TreeViewEngine, *, show_focus: bool = False) -> list[str]:
    """Markup lines for every visible row, in order."""
    return [row_markup(engine, ref, show_focus=show_focus) for ref in engine.visible]
