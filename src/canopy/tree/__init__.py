"""Tree-view engine: model, visibility, search, selection and focus."""

from __future__ import annotations

from canopy.tree.engine import (
    CheckInfo,
    TreeViewCallbacks,
    TreeViewEngine,
    TreeViewState,
)
from canopy.tree.focus import FocusController, IntentKind, TreeIntent, TreeKey
from canopy.tree.loader import load_tree, parse_tree
from canopy.tree.model import TreeModel, TreeNode, build_nodes
from canopy.tree.search import SearchResult, filter_tree
from canopy.tree.selection import (
    CheckState,
    check_state,
    indeterminate_keys,
    prune_keys,
    select_all_visible,
    toggle_check,
    toggle_select,
)
from canopy.tree.visibility import (
    TreeItemAttributes,
    VisibleNodeRef,
    flatten,
    item_attributes,
    visible_non_disabled_keys,
)

__all__ = [
    "CheckInfo",
    "CheckState",
    "FocusController",
    "IntentKind",
    "SearchResult",
    "TreeIntent",
    "TreeItemAttributes",
    "TreeKey",
    "TreeModel",
    "TreeNode",
    "TreeViewCallbacks",
    "TreeViewEngine",
    "TreeViewState",
    "VisibleNodeRef",
    "build_nodes",
    "check_state",
    "filter_tree",
    "flatten",
    "indeterminate_keys",
    "item_attributes",
    "load_tree",
    "parse_tree",
    "prune_keys",
    "select_all_visible",
    "toggle_check",
    "toggle_select",
    "visible_non_disabled_keys",
]
