"""Canopy TUI application.

``CanopyApp`` hosts one ``TreeView`` and, when the tree is searchable, an
input whose value drives the tree's search filter.
"""

from __future__ import annotations

from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Input

from canopy.config import TreeOptions
from canopy.logging import get_logger
from canopy.tree.model import TreeNode
from canopy.tui.widgets.tree_view import TreeView

logger = get_logger(__name__)


class CanopyApp(App[None]):
    """Browse a tree interactively."""

    TITLE = "Canopy"

    CSS = """
    #tree-search {
        dock: top;
    }

    #tree-scroll {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("slash", "focus_search", "Search", show=True),
        Binding("escape", "focus_tree", "Tree", show=False),
    ]

    def __init__(
        self,
        nodes: Sequence[TreeNode],
        options: TreeOptions | None = None,
        *,
        title: str | None = None,
    ) -> None:
        super().__init__()
        self._tree_nodes = tuple(nodes)
        self._tree_options = options or TreeOptions()
        if title:
            self.sub_title = title

    @property
    def tree_nodes(self) -> tuple[TreeNode, ...]:
        return self._tree_nodes

    @property
    def tree_options(self) -> TreeOptions:
        return self._tree_options

    def compose(self) -> ComposeResult:
        yield Header()
        if self._tree_options.searchable:
            yield Input(placeholder="Search...", id="tree-search")
        with VerticalScroll(id="tree-scroll"):
            yield TreeView(self._tree_nodes, self._tree_options, id="tree")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(TreeView).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "tree-search":
            self.query_one(TreeView).set_query(event.value)

    def on_tree_view_node_selected(self, event: TreeView.NodeSelected) -> None:
        logger.info("nodes_selected", keys=event.selected_keys)

    def on_tree_view_node_checked(self, event: TreeView.NodeChecked) -> None:
        logger.info(
            "nodes_checked",
            key=event.key,
            checked=event.checked,
            total=len(event.checked_keys),
        )

    def action_focus_search(self) -> None:
        if self._tree_options.searchable:
            self.query_one("#tree-search", Input).focus()

    def action_focus_tree(self) -> None:
        self.query_one(TreeView).focus()
