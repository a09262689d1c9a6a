"""TreeView widget: a Textual front end for TreeViewEngine.

The widget owns one engine for its lifetime, maps key bindings onto the
engine's key handling, and re-renders the visible rows after each commit.
Engine callbacks are turned into Textual messages.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from textual.app import ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.geometry import Region
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Static

from canopy.config import TreeOptions
from canopy.outline import row_markup
from canopy.tree.engine import CheckInfo, TreeViewCallbacks, TreeViewEngine
from canopy.tree.model import TreeNode
from canopy.tree.visibility import index_of


class TreeView(Widget):
    """Focusable tree with roving focus, expansion, checking and selection.

    The widget itself is the tree's single tab stop; the focused row inside
    it moves only through the arrow/Home/End bindings.
    """

    can_focus = True

    BINDINGS = [
        Binding("up", "tree_key('up')", "Previous", show=False),
        Binding("down", "tree_key('down')", "Next", show=False),
        Binding("left", "tree_key('left')", "Collapse / parent", show=False),
        Binding("right", "tree_key('right')", "Expand / child", show=False),
        Binding("home", "tree_key('home')", "First", show=False),
        Binding("end", "tree_key('end')", "Last", show=False),
        Binding("enter", "tree_key('enter')", "Select / toggle", show=False),
        Binding("space", "tree_key('space')", "Check", show=False),
    ]

    DEFAULT_CSS = """
    TreeView {
        height: auto;
        width: 100%;
    }
    """

    class NodeExpanded(Message):
        """Posted when the expanded key set changes."""

        def __init__(self, expanded_keys: list[str]) -> None:
            self.expanded_keys = expanded_keys
            super().__init__()

    class NodeChecked(Message):
        """Posted after a check or uncheck."""

        def __init__(self, checked_keys: list[str], checked: bool, key: str) -> None:
            self.checked_keys = checked_keys
            self.checked = checked
            self.key = key
            super().__init__()

    class NodeSelected(Message):
        """Posted when the selected key set changes."""

        def __init__(self, selected_keys: list[str]) -> None:
            self.selected_keys = selected_keys
            super().__init__()

    class SearchChanged(Message):
        """Posted when the search query changes."""

        def __init__(self, query: str) -> None:
            self.query = query
            super().__init__()

    def __init__(
        self,
        nodes: Sequence[TreeNode] = (),
        options: TreeOptions | None = None,
        *,
        expanded_keys: Iterable[str] = (),
        checked_keys: Iterable[str] = (),
        selected_keys: Iterable[str] = (),
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self._engine = TreeViewEngine(
            nodes,
            options,
            expanded_keys=expanded_keys,
            checked_keys=checked_keys,
            selected_keys=selected_keys,
            callbacks=TreeViewCallbacks(
                on_expand=self._on_engine_expand,
                on_check=self._on_engine_check,
                on_select=self._on_engine_select,
                on_search=self._on_engine_search,
            ),
        )

    @property
    def engine(self) -> TreeViewEngine:
        return self._engine

    def compose(self) -> ComposeResult:
        yield Static(self._render_rows(), id="tree-rows")

    def row_lines(self) -> list[str]:
        """Rendered markup of every visible row, focus included."""
        return [row_markup(self._engine, ref) for ref in self._engine.visible]

    def set_query(self, query: str) -> None:
        self._engine.search(query)
        self.refresh_tree()

    def set_nodes(self, nodes: Sequence[TreeNode]) -> None:
        """Swap in new tree data; stale keys are pruned and focus repaired."""
        self._engine.set_model(nodes)
        self.refresh_tree()

    def action_tree_key(self, key: str) -> None:
        self._engine.handle_key(key)
        self.refresh_tree()

    def refresh_tree(self) -> None:
        """Re-render rows from the engine's current snapshot."""
        if not self.is_mounted:
            return
        try:
            rows = self.query_one("#tree-rows", Static)
        except NoMatches:
            return
        rows.update(self._render_rows())
        # Row heights settle on the next refresh; scroll once they have.
        self.call_after_refresh(self.scroll_to_focused)

    def scroll_to_focused(self) -> None:
        """Scroll the enclosing container so the focused row is on screen."""
        container = self.parent
        if not isinstance(container, Widget) or not container.is_scrollable:
            return
        index = index_of(self._engine.visible, self._engine.focused_key)
        if index < 0:
            return
        row = Region(0, self.virtual_region.y + index, max(self.size.width, 1), 1)
        container.scroll_to_region(row, animate=False)

    def _render_rows(self) -> str:
        lines = self.row_lines()
        if lines:
            return "\n".join(lines)
        if self._engine.state.query.strip():
            return "[dim]No matching nodes found[/dim]"
        return "[dim]No data available[/dim]"

    def _on_engine_expand(self, expanded_keys: list[str]) -> None:
        self.post_message(self.NodeExpanded(expanded_keys))

    def _on_engine_check(self, checked_keys: list[str], info: CheckInfo) -> None:
        self.post_message(self.NodeChecked(checked_keys, info.checked, info.node.key))

    def _on_engine_select(self, selected_keys: list[str]) -> None:
        self.post_message(self.NodeSelected(selected_keys))

    def _on_engine_search(self, query: str) -> None:
        self.post_message(self.SearchChanged(query))
