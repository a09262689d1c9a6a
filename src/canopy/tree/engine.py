"""Per-widget tree state and the operations that change it.

``TreeViewEngine`` is the explicit state object a tree widget owns: built
on mount, dropped on unmount. Each operation computes one new immutable
``TreeViewState`` snapshot from the last committed one, recomputes the
visible rows, repairs focus, and only then fires callbacks, each with the
complete new key set.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from canopy.config import TreeOptions
from canopy.logging import get_logger
from canopy.tree.focus import FocusController, IntentKind, TreeIntent, TreeKey
from canopy.tree.model import TreeModel, TreeNode
from canopy.tree.search import SearchResult, filter_tree
from canopy.tree.selection import (
    CheckState,
    check_state,
    indeterminate_keys,
    prune_keys,
    toggle_check,
    toggle_select,
)
from canopy.tree.selection import select_all_visible as _select_all_visible
from canopy.tree.visibility import (
    TreeItemAttributes,
    VisibleNodeRef,
    flatten,
    item_attributes,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TreeViewState:
    """One consistent snapshot of the engine-owned state.

    Attributes:
        expanded_keys: Expanded nodes; only nodes with children.
        checked_keys: Checked nodes.
        selected_keys: Selected nodes; at most one in single mode.
        focused_key: The single tab stop, None when nothing can hold focus.
        query: Active search query, empty when not searching.
    """

    expanded_keys: frozenset[str] = field(default_factory=frozenset)
    checked_keys: frozenset[str] = field(default_factory=frozenset)
    selected_keys: frozenset[str] = field(default_factory=frozenset)
    focused_key: str | None = None
    query: str = ""


@dataclass(frozen=True, slots=True)
class CheckInfo:
    """Extra payload of a check callback."""

    checked: bool
    node: TreeNode


@dataclass(slots=True)
class TreeViewCallbacks:
    """Change notifications. Key lists are complete and in tree order."""

    on_expand: Callable[[list[str]], Any] | None = None
    on_check: Callable[[list[str], CheckInfo], Any] | None = None
    on_select: Callable[[list[str]], Any] | None = None
    on_search: Callable[[str], Any] | None = None


class TreeViewEngine:
    """Expansion, check, selection, search and focus state for one tree.

    Example:
        engine = TreeViewEngine(roots, TreeOptions(multiple=True))
        engine.expand("1")
        engine.handle_key(TreeKey.DOWN)
        [ref.key for ref in engine.visible]
    """

    def __init__(
        self,
        roots: Sequence[TreeNode] = (),
        options: TreeOptions | None = None,
        *,
        expanded_keys: Iterable[str] = (),
        checked_keys: Iterable[str] = (),
        selected_keys: Iterable[str] = (),
        callbacks: TreeViewCallbacks | None = None,
    ) -> None:
        self._options = options or TreeOptions()
        self._callbacks = callbacks or TreeViewCallbacks()
        self._model = TreeModel(roots)
        self._focus = FocusController()
        self._search = filter_tree(self._model.roots, "")

        if self._options.default_expand_all:
            expanded = frozenset(self._model.expandable_keys())
        else:
            expanded = prune_keys(self._model, expanded_keys, expandable_only=True)

        self._state = TreeViewState(
            expanded_keys=expanded,
            checked_keys=prune_keys(self._model, checked_keys),
            selected_keys=self._limit_selection(prune_keys(self._model, selected_keys)),
        )
        self._visible: list[VisibleNodeRef] = []
        self._indeterminate: frozenset[str] = frozenset()
        self._recompute()
        logger.debug(
            "tree_mounted",
            node_count=len(self._model),
            visible_count=len(self._visible),
            focused=self._state.focused_key,
        )

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def model(self) -> TreeModel:
        return self._model

    @property
    def options(self) -> TreeOptions:
        return self._options

    @property
    def callbacks(self) -> TreeViewCallbacks:
        return self._callbacks

    @property
    def state(self) -> TreeViewState:
        return self._state

    @property
    def visible(self) -> list[VisibleNodeRef]:
        return list(self._visible)

    @property
    def focused_key(self) -> str | None:
        return self._state.focused_key

    @property
    def search_result(self) -> SearchResult:
        return self._search

    def ordered_keys(self, keys: Collection[str]) -> list[str]:
        """Members of ``keys`` in tree (pre-)order, as the callbacks report them."""
        return [key for key in self._model.all_keys() if key in keys]

    def check_state(self, key: str) -> CheckState:
        return check_state(self._model, self._state.checked_keys, key)

    def item_attributes(self, ref: VisibleNodeRef) -> TreeItemAttributes:
        """Accessibility attributes for a visible row."""
        checked: bool | str
        if ref.key in self._state.checked_keys:
            checked = True
        elif ref.key in self._indeterminate:
            checked = "mixed"
        else:
            checked = False
        return item_attributes(
            ref,
            expanded_keys=self._state.expanded_keys,
            selected_keys=self._state.selected_keys,
            checked=checked,
            focused_key=self._state.focused_key,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def expand(self, key: str, expanded: bool = True) -> bool:
        """Expand or collapse ``key``. Leaves and unknown keys are ignored."""
        node = self._model.get(key)
        if node is None or not node.has_children:
            logger.debug("expand_ignored", key=key)
            return False
        current = self._state.expanded_keys
        new_expanded = current | {key} if expanded else current - {key}
        self._commit(expanded_keys=new_expanded)
        return True

    def toggle_expand(self, key: str) -> bool:
        return self.expand(key, key not in self._state.expanded_keys)

    def select(self, key: str, selected: bool | None = None) -> bool:
        """Toggle selection of ``key`` (or force it with ``selected``).

        Returns:
            False when the gate rejected the request: selection disabled,
            unknown key, or disabled node.
        """
        if self._gate(key, self._options.selectable, "select") is None:
            return False
        self._commit(selected_keys=self._selection_after(key, selected))
        return True

    def check(self, key: str, checked: bool | None = None) -> bool:
        """Check or uncheck ``key`` and its descendants.

        Returns:
            False when checking is off, or the key is unknown or disabled.
        """
        node = self._gate(key, self._options.checkable, "check")
        if node is None:
            return False
        if checked is None:
            checked = key not in self._state.checked_keys
        self._commit(
            checked_keys=self._checks_after(key, checked),
            check_info=CheckInfo(checked=checked, node=node),
        )
        return True

    def select_all_visible(self) -> bool:
        """Select every visible, enabled row (multi-select mode only)."""
        if not (self._options.selectable and self._options.multiple):
            return False
        self._commit(
            selected_keys=_select_all_visible(
                self._state.selected_keys, self._visible, multiple=True
            )
        )
        return True

    def search(self, query: str) -> SearchResult:
        """Apply a search query and expand the paths to its matches."""
        result = filter_tree(self._model.roots, query)
        expanded = self._state.expanded_keys | result.ancestor_keys
        self._commit(query=query, expanded_keys=expanded, search=result)
        logger.debug(
            "search_applied",
            query=query,
            matches=len(result.matched_keys),
            auto_expanded=len(result.ancestor_keys),
        )
        return result

    def focus(self, key: str) -> bool:
        """Pointer focus. Hidden or disabled rows are rejected."""
        if not self._focus.focus(key, self._visible):
            return False
        self._commit()
        return True

    def handle_key(self, key: TreeKey | str) -> list[TreeIntent]:
        """Run one key press through the focus state machine.

        All resulting changes (for Enter, selection and expansion together)
        land in a single snapshot.
        """
        tree_key = key if isinstance(key, TreeKey) else TreeKey.parse(key)
        if tree_key is None:
            return []

        intents = self._focus.handle_key(
            tree_key,
            self._visible,
            self._state.expanded_keys,
            selectable=self._options.selectable,
            checkable=self._options.checkable,
        )

        changes: dict[str, Any] = {}
        expanded = self._state.expanded_keys
        for intent in intents:
            if intent.kind is IntentKind.EXPAND:
                expanded = expanded | {intent.key}
                changes["expanded_keys"] = expanded
            elif intent.kind is IntentKind.COLLAPSE:
                expanded = expanded - {intent.key}
                changes["expanded_keys"] = expanded
            elif intent.kind is IntentKind.TOGGLE_SELECT:
                changes["selected_keys"] = self._selection_after(intent.key, None)
            elif intent.kind is IntentKind.TOGGLE_CHECK:
                node = self._gate(intent.key, True, "check")
                if node is None:
                    continue
                checked = intent.key not in self._state.checked_keys
                changes["checked_keys"] = self._checks_after(intent.key, checked)
                changes["check_info"] = CheckInfo(checked=checked, node=node)
        self._commit(**changes)
        return intents

    def set_model(self, roots: Sequence[TreeNode]) -> None:
        """Replace the tree data, pruning every key set to the new model."""
        self._model = TreeModel(roots)
        state = self._state
        result = filter_tree(self._model.roots, state.query)
        expanded = prune_keys(self._model, state.expanded_keys, expandable_only=True)
        self._commit(
            expanded_keys=expanded | result.ancestor_keys,
            checked_keys=prune_keys(self._model, state.checked_keys),
            selected_keys=self._limit_selection(
                prune_keys(self._model, state.selected_keys)
            ),
            search=result,
        )
        logger.debug("tree_replaced", node_count=len(self._model))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _gate(self, key: str, enabled: bool, action: str) -> TreeNode | None:
        node = self._model.get(key)
        if not enabled or node is None or node.disabled:
            logger.debug(f"{action}_rejected", key=key, mode_enabled=enabled)
            return None
        return node

    def _selection_after(self, key: str, selected: bool | None) -> frozenset[str]:
        return toggle_select(
            self._state.selected_keys,
            key,
            multiple=self._options.multiple,
            selected=selected,
        )

    def _checks_after(self, key: str, checked: bool) -> frozenset[str]:
        return toggle_check(
            self._model,
            self._state.checked_keys,
            key,
            checked,
            strictly=self._options.check_strictly,
        )

    def _limit_selection(self, keys: frozenset[str]) -> frozenset[str]:
        if self._options.multiple or len(keys) <= 1:
            return keys
        first = next(k for k in self._model.all_keys() if k in keys)
        return frozenset({first})

    def _recompute(self) -> None:
        self._visible = flatten(self._search.roots, self._state.expanded_keys)
        focused = self._focus.sync(self._visible)
        self._indeterminate = indeterminate_keys(self._model, self._state.checked_keys)
        if focused != self._state.focused_key:
            self._state = replace(self._state, focused_key=focused)

    def _commit(
        self,
        *,
        search: SearchResult | None = None,
        check_info: CheckInfo | None = None,
        **changes: Any,
    ) -> None:
        previous = self._state
        if search is not None:
            self._search = search
        self._state = replace(
            previous, focused_key=self._focus.focused_key, **changes
        )
        self._recompute()
        self._notify(previous, check_info)

    def _notify(self, previous: TreeViewState, check_info: CheckInfo | None) -> None:
        state = self._state
        callbacks = self._callbacks
        if state.expanded_keys != previous.expanded_keys:
            logger.debug("tree_expanded", expanded_count=len(state.expanded_keys))
            if callbacks.on_expand is not None:
                callbacks.on_expand(self.ordered_keys(state.expanded_keys))
        if state.checked_keys != previous.checked_keys or check_info is not None:
            logger.debug("tree_checked", checked_count=len(state.checked_keys))
            if callbacks.on_check is not None and check_info is not None:
                callbacks.on_check(self.ordered_keys(state.checked_keys), check_info)
        if state.selected_keys != previous.selected_keys:
            logger.debug("tree_selected", selected=sorted(state.selected_keys))
            if callbacks.on_select is not None:
                callbacks.on_select(self.ordered_keys(state.selected_keys))
        if state.query != previous.query:
            if callbacks.on_search is not None:
                callbacks.on_search(state.query)
