"""Flattening the tree into the list of currently visible rows.

Every row carries enough position data (depth, parent, sibling count and
position) for a renderer to expose level/setsize/posinset without walking
the tree again.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass

from canopy.tree.model import TreeNode
from canopy.tree.search import NodePredicate, prune


@dataclass(frozen=True, slots=True)
class VisibleNodeRef:
    """A node as it currently appears in the visible list.

    Attributes:
        node: The node itself.
        depth: Nesting level, 1 for roots.
        parent_key: Key of the parent, None for roots.
        sibling_count: Size of the node's own sibling list.
        position: 1-based position within that sibling list.
    """

    node: TreeNode
    depth: int
    parent_key: str | None
    sibling_count: int
    position: int

    @property
    def key(self) -> str:
        return self.node.key

    @property
    def disabled(self) -> bool:
        return self.node.disabled

    @property
    def has_children(self) -> bool:
        return self.node.has_children


@dataclass(frozen=True, slots=True)
class TreeItemAttributes:
    """Accessibility attributes for one visible row.

    ``expanded`` is None for leaves; ``checked`` is ``"mixed"`` for a node
    whose subtree is partly checked. ``tabindex`` is 0 for the single active
    tab stop and -1 for every other row.
    """

    level: int
    setsize: int
    posinset: int
    expanded: bool | None
    selected: bool
    disabled: bool
    checked: bool | str
    tabindex: int


def flatten(
    roots: Sequence[TreeNode],
    expanded_keys: Collection[str],
    predicate: NodePredicate | None = None,
) -> list[VisibleNodeRef]:
    """Return the visible rows in depth-first pre-order.

    A node's children follow it immediately if and only if its key is in
    ``expanded_keys``. Collapsed subtrees are never descended into. Stale
    expanded keys (leaves, unknown keys) are ignored.

    Args:
        roots: Root forest, possibly already filtered.
        expanded_keys: Keys of expanded nodes.
        predicate: Optional match function; when given, ``roots`` is pruned
            first keeping matches and their ancestors.

    Returns:
        Visible rows, each annotated with its position in the hierarchy.
    """
    if predicate is not None:
        roots, _ = prune(roots, predicate)

    rows: list[VisibleNodeRef] = []
    _walk(roots, 1, None, expanded_keys, rows)
    return rows


def _walk(
    nodes: Sequence[TreeNode],
    depth: int,
    parent_key: str | None,
    expanded_keys: Collection[str],
    rows: list[VisibleNodeRef],
) -> None:
    count = len(nodes)
    for index, node in enumerate(nodes):
        rows.append(
            VisibleNodeRef(
                node=node,
                depth=depth,
                parent_key=parent_key,
                sibling_count=count,
                position=index + 1,
            )
        )
        if node.children and node.key in expanded_keys:
            _walk(node.children, depth + 1, node.key, expanded_keys, rows)


def visible_non_disabled_keys(visible: Sequence[VisibleNodeRef]) -> list[str]:
    """Keys that may hold focus, in visible order."""
    return [ref.key for ref in visible if not ref.disabled]


def index_of(visible: Sequence[VisibleNodeRef], key: str | None) -> int:
    """Position of ``key`` in the visible list, -1 when absent."""
    if key is None:
        return -1
    for index, ref in enumerate(visible):
        if ref.key == key:
            return index
    return -1


def item_attributes(
    ref: VisibleNodeRef,
    *,
    expanded_keys: Collection[str],
    selected_keys: Collection[str],
    checked: bool | str = False,
    focused_key: str | None = None,
) -> TreeItemAttributes:
    """Derive the accessibility attributes of ``ref``."""
    return TreeItemAttributes(
        level=ref.depth,
        setsize=ref.sibling_count,
        posinset=ref.position,
        expanded=(ref.key in expanded_keys) if ref.has_children else None,
        selected=ref.key in selected_keys,
        disabled=ref.disabled,
        checked=checked,
        tabindex=0 if ref.key == focused_key else -1,
    )
