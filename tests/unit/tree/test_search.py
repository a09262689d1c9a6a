"""Tests for search filtering."""

from __future__ import annotations

from canopy.tree.model import TreeModel, TreeNode, build_nodes
from canopy.tree.search import filter_tree, prune, title_contains


def _keys(nodes: tuple[TreeNode, ...]) -> list[str]:
    return [node.key for node in TreeModel(nodes)]


class TestFilterTree:
    """Tests for filter_tree."""

    def test_blank_query_returns_original_forest(
        self, scenario_tree: tuple[TreeNode, ...]
    ) -> None:
        for query in ("", "   "):
            result = filter_tree(scenario_tree, query)

            assert result.roots == scenario_tree
            assert result.roots[0] is scenario_tree[0]
            assert result.ancestor_keys == frozenset()
            assert result.is_filtered is False

    def test_matching_parents_keep_everything(
        self, scenario_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(scenario_tree, "Parent")

        assert _keys(result.roots) == ["1", "1-1", "1-2", "2"]
        # Nothing below either parent matched, so the original nodes survive.
        assert result.roots[0] is scenario_tree[0]
        assert result.matched_keys == {"1", "2"}
        assert result.ancestor_keys == frozenset()

    def test_child_match_keeps_ancestor_and_drops_siblings(
        self, scenario_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(scenario_tree, "Child 1")

        assert _keys(result.roots) == ["1", "1-1"]
        assert result.matched_keys == {"1-1"}
        assert result.ancestor_keys == {"1"}

    def test_match_is_case_insensitive(
        self, scenario_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(scenario_tree, "cHiLd 2")

        assert _keys(result.roots) == ["1", "1-2"]

    def test_no_match_gives_empty_forest(
        self, scenario_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(scenario_tree, "zzz")

        assert result.roots == ()
        assert result.is_filtered is True

    def test_deep_match_preserves_every_ancestor(
        self, deep_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(deep_tree, "two x")

        assert _keys(result.roots) == ["a", "a2", "a2x"]
        assert result.ancestor_keys == {"a", "a2"}

    def test_all_children_surviving_keeps_original_children(self) -> None:
        roots = build_nodes(
            [
                {
                    "key": "p",
                    "title": "Folder",
                    "children": [
                        {"key": "p1", "title": "match one"},
                        {"key": "p2", "title": "match two"},
                    ],
                }
            ]
        )

        result = filter_tree(roots, "match")

        assert result.roots[0] is roots[0]
        assert result.roots[0].children is roots[0].children

    def test_pruned_grandchild_rewrites_same_sized_parent(self) -> None:
        roots = build_nodes(
            [
                {
                    "key": "p",
                    "title": "Top",
                    "children": [
                        {
                            "key": "q",
                            "title": "Middle",
                            "children": [
                                {"key": "q1", "title": "needle"},
                                {"key": "q2", "title": "hay"},
                            ],
                        }
                    ],
                }
            ]
        )

        result = filter_tree(roots, "needle")
        middle = result.roots[0].children[0]

        assert result.roots[0] is not roots[0]
        assert [child.key for child in middle.children] == ["q1"]
        assert result.ancestor_keys == {"p", "q"}

    def test_matched_node_with_unmatched_children_keeps_them(
        self, deep_tree: tuple[TreeNode, ...]
    ) -> None:
        result = filter_tree(deep_tree, "charlie")

        charlie = result.roots[0]
        assert charlie.key == "c"
        assert [child.key for child in charlie.children] == ["c1"]
        assert result.matched_keys == {"c", "c1"}
        assert result.ancestor_keys == {"c"}


class TestPrune:
    def test_custom_predicate(self, deep_tree: tuple[TreeNode, ...]) -> None:
        pruned, ancestors = prune(deep_tree, lambda node: node.disabled)

        assert _keys(pruned) == ["a", "a1", "a2", "a2y", "b"]
        assert ancestors == {"a", "a2"}

    def test_title_contains(self, scenario_tree: tuple[TreeNode, ...]) -> None:
        predicate = title_contains("PARENT")

        assert predicate(scenario_tree[1]) is True
        assert predicate(scenario_tree[0].children[0]) is False
