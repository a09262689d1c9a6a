"""Search filtering: prune the tree down to matches and their ancestors."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from canopy.tree.model import TreeNode

NodePredicate = Callable[[TreeNode], bool]


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of filtering a tree with a query.

    Attributes:
        roots: The pruned forest (the original forest when not filtering).
        query: The query as given.
        matched_keys: Keys whose own title matched.
        ancestor_keys: Keys of surviving nodes that lead to a match. These
            are unioned into the expanded set so matches show up.
    """

    roots: tuple[TreeNode, ...]
    query: str = ""
    matched_keys: frozenset[str] = field(default_factory=frozenset)
    ancestor_keys: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_filtered(self) -> bool:
        return bool(self.query.strip())


def title_contains(query: str) -> NodePredicate:
    """Case-insensitive substring match on the node title."""
    needle = query.lower()

    def predicate(node: TreeNode) -> bool:
        return needle in node.title.lower()

    return predicate


def prune(
    nodes: Sequence[TreeNode],
    predicate: NodePredicate,
) -> tuple[tuple[TreeNode, ...], set[str]]:
    """Keep nodes that match, or that have a surviving descendant.

    Children are filtered first (bottom-up). A surviving node keeps its
    original ``children`` unless filtering actually removed or rewrote one
    of them; a node that matched on its own while none of its children did
    keeps all of them, so a matched folder still opens onto its contents.

    Returns:
        The pruned nodes and the keys of surviving nodes that have a match
        somewhere below them.
    """
    kept: list[TreeNode] = []
    ancestors: set[str] = set()
    for node in nodes:
        filtered_children: tuple[TreeNode, ...] = ()
        if node.children:
            filtered_children, child_ancestors = prune(node.children, predicate)
            ancestors |= child_ancestors

        if filtered_children:
            ancestors.add(node.key)
            unchanged = len(filtered_children) == len(node.children) and all(
                new is old for new, old in zip(filtered_children, node.children)
            )
            if not unchanged:
                node = replace(node, children=filtered_children)
            kept.append(node)
        elif predicate(node):
            kept.append(node)
    return tuple(kept), ancestors


def _collect_matches(
    nodes: Sequence[TreeNode], predicate: NodePredicate, found: set[str]
) -> None:
    for node in nodes:
        if predicate(node):
            found.add(node.key)
        _collect_matches(node.children, predicate, found)


def filter_tree(roots: Sequence[TreeNode], query: str) -> SearchResult:
    """Filter ``roots`` by a title query.

    A blank query returns the original forest untouched and expands nothing.
    """
    roots = tuple(roots)
    if not query.strip():
        return SearchResult(roots=roots, query=query)

    predicate = title_contains(query)
    pruned, ancestors = prune(roots, predicate)
    matched: set[str] = set()
    _collect_matches(pruned, predicate, matched)
    return SearchResult(
        roots=pruned,
        query=query,
        matched_keys=frozenset(matched),
        ancestor_keys=frozenset(ancestors),
    )
