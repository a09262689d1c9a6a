"""Tests for CanopyApp: layout, focus handling and search wiring."""

from __future__ import annotations

import pytest
from textual.containers import VerticalScroll
from textual.widgets import Input

from canopy.config import TreeOptions
from canopy.tree.model import TreeNode, build_nodes
from canopy.tui.app import CanopyApp
from canopy.tui.widgets.tree_view import TreeView


class TestCanopyAppInitialization:
    """Test CanopyApp construction."""

    def test_app_title(self, scenario_tree: tuple[TreeNode, ...]) -> None:
        """Test that the app has the correct title."""
        app = CanopyApp(scenario_tree)
        assert app.TITLE == "Canopy"

    def test_default_options(self, scenario_tree: tuple[TreeNode, ...]) -> None:
        """Test that options default to TreeOptions()."""
        app = CanopyApp(scenario_tree)
        assert app.tree_options == TreeOptions()
        assert app.tree_nodes == scenario_tree

    def test_sub_title_from_title(self, scenario_tree: tuple[TreeNode, ...]) -> None:
        """Test that the document name is shown as sub title."""
        app = CanopyApp(scenario_tree, title="tree.yaml")
        assert app.sub_title == "tree.yaml"

    def test_bindings_configured(self) -> None:
        """Test that key bindings are configured."""
        binding_keys = [binding.key for binding in CanopyApp.BINDINGS]
        assert "q" in binding_keys
        assert "slash" in binding_keys
        assert "escape" in binding_keys


@pytest.mark.asyncio
async def test_tree_focused_on_mount(scenario_tree: tuple[TreeNode, ...]) -> None:
    """The tree receives focus as soon as the app mounts."""
    app = CanopyApp(scenario_tree)
    async with app.run_test() as pilot:
        tree = pilot.app.query_one(TreeView)

        assert pilot.app.focused is tree
        assert len(pilot.app.query("#tree-search")) == 0

        await pilot.press("down")
        assert tree.engine.focused_key == "2"


@pytest.mark.asyncio
async def test_search_input_filters_tree(scenario_tree: tuple[TreeNode, ...]) -> None:
    """Typing in the search box drives the tree filter."""
    app = CanopyApp(scenario_tree, TreeOptions(searchable=True))
    async with app.run_test() as pilot:
        tree = pilot.app.query_one(TreeView)

        await pilot.press("slash")
        search = pilot.app.query_one("#tree-search", Input)
        assert pilot.app.focused is search

        await pilot.press(*"child 1")
        await pilot.pause()

        assert tree.engine.state.query == "child 1"
        assert [ref.key for ref in tree.engine.visible] == ["1", "1-1"]

        await pilot.app.run_action("focus_tree")
        assert pilot.app.focused is tree


@pytest.mark.asyncio
async def test_slash_ignored_without_search(
    scenario_tree: tuple[TreeNode, ...],
) -> None:
    """Without a search box the slash binding leaves focus on the tree."""
    app = CanopyApp(scenario_tree)
    async with app.run_test() as pilot:
        await pilot.press("slash")

        assert pilot.app.focused is pilot.app.query_one(TreeView)


@pytest.mark.asyncio
async def test_focused_row_scrolled_into_view() -> None:
    """Keyboard focus moving past the viewport scrolls the tree with it."""
    roots = build_nodes([{"key": str(i), "title": f"Node {i}"} for i in range(60)])
    app = CanopyApp(roots, TreeOptions(checkable=False))
    async with app.run_test(size=(60, 12)) as pilot:
        scroll = pilot.app.query_one("#tree-scroll", VerticalScroll)
        tree = pilot.app.query_one(TreeView)

        await pilot.press("end")
        await pilot.pause(0.05)

        assert tree.engine.focused_key == "59"
        assert scroll.scroll_y > 0
        viewport = scroll.scrollable_content_region.height
        assert scroll.scroll_y <= 59 < scroll.scroll_y + viewport

        await pilot.press("home")
        await pilot.pause(0.05)

        assert scroll.scroll_y == 0
