"""Tree node hierarchy and its derived key index.

The model is a value: nodes are frozen and the index is built once per
``TreeModel``. Expansion, check, selection and focus state live elsewhere,
keyed by node key, so several controllers can work on one model without
touching it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class TreeNode:
    """A single node in the tree.

    Attributes:
        key: Identifier, unique across the whole tree (not enforced).
        title: Display label; also what search matches against.
        children: Ordered child nodes. Empty means leaf.
        disabled: Excluded from focus, selection and checking, still rendered.
        icon: Optional display glyph.
        data: Extra display-only fields carried through untouched.
    """

    key: str
    title: str
    children: tuple[TreeNode, ...] = ()
    disabled: bool = False
    icon: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> TreeNode:
        """Build a node (and its subtree) from a plain mapping.

        ``children: None`` and ``children: []`` both produce a leaf. Keys
        other than the known fields end up in ``data``.
        """
        known = {"key", "title", "children", "disabled", "icon"}
        children = raw.get("children") or ()
        return cls(
            key=str(raw["key"]),
            title=str(raw.get("title", "")),
            children=tuple(cls.from_mapping(child) for child in children),
            disabled=bool(raw.get("disabled", False)),
            icon=raw.get("icon"),
            data={k: v for k, v in raw.items() if k not in known},
        )


def build_nodes(raw_nodes: Iterable[Mapping[str, Any]]) -> tuple[TreeNode, ...]:
    """Convert a list of mappings into a root forest."""
    return tuple(TreeNode.from_mapping(raw) for raw in raw_nodes)


class TreeModel:
    """Root forest plus a key index over every node.

    Duplicate keys are the caller's problem: the last node with a given key
    wins lookups.
    """

    __slots__ = ("_roots", "_nodes", "_parents", "_order")

    def __init__(self, roots: Sequence[TreeNode] = ()) -> None:
        self._roots: tuple[TreeNode, ...] = tuple(roots)
        self._nodes: dict[str, TreeNode] = {}
        self._parents: dict[str, str | None] = {}
        self._order: list[str] = []
        self._index(self._roots, None)

    def _index(self, nodes: Sequence[TreeNode], parent_key: str | None) -> None:
        for node in nodes:
            self._nodes[node.key] = node
            self._parents[node.key] = parent_key
            self._order.append(node.key)
            if node.children:
                self._index(node.children, node.key)

    @property
    def roots(self) -> tuple[TreeNode, ...]:
        return self._roots

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TreeNode]:
        for key in self._order:
            yield self._nodes[key]

    def get(self, key: str) -> TreeNode | None:
        return self._nodes.get(key)

    def parent_of(self, key: str) -> str | None:
        return self._parents.get(key)

    def ancestor_keys(self, key: str) -> list[str]:
        """Return ancestors of ``key``, nearest first."""
        ancestors: list[str] = []
        parent = self._parents.get(key)
        while parent is not None:
            ancestors.append(parent)
            parent = self._parents.get(parent)
        return ancestors

    def descendant_keys(self, key: str) -> set[str]:
        """Return ``key`` plus every key below it; empty for unknown keys."""
        node = self._nodes.get(key)
        if node is None:
            return set()
        return set(subtree_keys(node))

    def all_keys(self) -> list[str]:
        """Every key in pre-order (duplicates collapsed)."""
        return list(dict.fromkeys(self._order))

    def expandable_keys(self) -> list[str]:
        """Keys of nodes that have children, in pre-order."""
        return [key for key in self.all_keys() if self._nodes[key].has_children]


def subtree_keys(node: TreeNode) -> list[str]:
    """Pre-order keys of ``node`` and all of its descendants."""
    keys = [node.key]
    for child in node.children:
        keys.extend(subtree_keys(child))
    return keys
