"""Roving focus over the visible rows.

Exactly one visible, enabled row holds focus (the tree's single tab stop)
whenever such a row exists. Arrow keys move it, Home/End jump, Left/Right
walk the hierarchy, Enter/Space activate. Moves that change tree state
(expand, collapse, select, check) are returned as intents for the engine
to apply, so focus logic never writes the key sets itself.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import Enum

from canopy.logging import get_logger
from canopy.tree.visibility import VisibleNodeRef, index_of

logger = get_logger(__name__)


class TreeKey(str, Enum):
    """Keys the tree reacts to. Values match Textual key names."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    SPACE = "space"

    @classmethod
    def parse(cls, name: str) -> TreeKey | None:
        """Map a key name (``down``, ``ArrowDown``, a literal space) to a TreeKey."""
        normalized = _ALIASES.get(name, name.lower())
        try:
            return cls(normalized)
        except ValueError:
            return None


_ALIASES = {
    "ArrowUp": "up",
    "ArrowDown": "down",
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "Home": "home",
    "End": "end",
    "Enter": "enter",
    " ": "space",
}


class IntentKind(str, Enum):
    EXPAND = "expand"
    COLLAPSE = "collapse"
    TOGGLE_SELECT = "toggle_select"
    TOGGLE_CHECK = "toggle_check"


@dataclass(frozen=True, slots=True)
class TreeIntent:
    """A state change requested by a key press."""

    kind: IntentKind
    key: str


def first_enabled(visible: Sequence[VisibleNodeRef]) -> str | None:
    for ref in visible:
        if not ref.disabled:
            return ref.key
    return None


def last_enabled(visible: Sequence[VisibleNodeRef]) -> str | None:
    for ref in reversed(visible):
        if not ref.disabled:
            return ref.key
    return None


def next_enabled(
    visible: Sequence[VisibleNodeRef], start: int, direction: int
) -> str | None:
    """First enabled key after ``start`` in ``direction``, without wrapping."""
    step = 1 if direction > 0 else -1
    index = start + step
    while 0 <= index < len(visible):
        if not visible[index].disabled:
            return visible[index].key
        index += step
    return None


class FocusController:
    """Tracks the focused key and applies the keyboard state machine."""

    def __init__(self, focused_key: str | None = None) -> None:
        self._focused_key = focused_key

    @property
    def focused_key(self) -> str | None:
        return self._focused_key

    def sync(self, visible: Sequence[VisibleNodeRef]) -> str | None:
        """Repair focus after the visible list changed.

        Focus is kept when it still names a visible, enabled row; otherwise
        it moves to the first enabled row, or clears when there is none.
        """
        current = self._focused_key
        if current is not None:
            index = index_of(visible, current)
            if index >= 0 and not visible[index].disabled:
                return current

        repaired = first_enabled(visible)
        if repaired != current:
            logger.debug("focus_repaired", previous=current, focused=repaired)
        self._focused_key = repaired
        return repaired

    def focus(self, key: str, visible: Sequence[VisibleNodeRef]) -> bool:
        """Move focus to ``key`` (pointer focus). Rejects hidden or disabled rows."""
        index = index_of(visible, key)
        if index < 0 or visible[index].disabled:
            return False
        self._focused_key = key
        return True

    def handle_key(
        self,
        key: TreeKey,
        visible: Sequence[VisibleNodeRef],
        expanded_keys: Collection[str],
        *,
        selectable: bool,
        checkable: bool,
    ) -> list[TreeIntent]:
        """Apply one key press.

        Returns:
            Intents to apply, in order. Pure focus moves return an empty list.
        """
        if not visible:
            return []

        current_index = index_of(visible, self._focused_key)
        if current_index < 0:
            if key is TreeKey.DOWN:
                self._move_to(first_enabled(visible))
            return []

        current = visible[current_index]
        node = current.node
        is_expanded = node.has_children and node.key in expanded_keys

        if key is TreeKey.DOWN:
            self._move_to(next_enabled(visible, current_index, 1))
        elif key is TreeKey.UP:
            self._move_to(next_enabled(visible, current_index, -1))
        elif key is TreeKey.HOME:
            self._move_to(first_enabled(visible))
        elif key is TreeKey.END:
            self._move_to(last_enabled(visible))
        elif key is TreeKey.RIGHT:
            if node.has_children and not is_expanded:
                return [TreeIntent(IntentKind.EXPAND, node.key)]
            if is_expanded:
                self._move_to(self._first_child(visible, current_index))
        elif key is TreeKey.LEFT:
            if is_expanded:
                return [TreeIntent(IntentKind.COLLAPSE, node.key)]
            if current.parent_key is not None:
                parent_index = index_of(visible, current.parent_key)
                if parent_index >= 0 and not visible[parent_index].disabled:
                    self._move_to(current.parent_key)
        elif key is TreeKey.ENTER:
            if node.disabled:
                return []
            intents: list[TreeIntent] = []
            if selectable:
                intents.append(TreeIntent(IntentKind.TOGGLE_SELECT, node.key))
            if node.has_children:
                kind = IntentKind.COLLAPSE if is_expanded else IntentKind.EXPAND
                intents.append(TreeIntent(kind, node.key))
            return intents
        elif key is TreeKey.SPACE:
            if node.disabled:
                return []
            if checkable:
                return [TreeIntent(IntentKind.TOGGLE_CHECK, node.key)]
            if selectable:
                return [TreeIntent(IntentKind.TOGGLE_SELECT, node.key)]
        return []

    @staticmethod
    def _first_child(
        visible: Sequence[VisibleNodeRef], parent_index: int
    ) -> str | None:
        parent = visible[parent_index]
        for ref in visible[parent_index + 1 :]:
            if ref.depth <= parent.depth:
                break
            if (
                ref.parent_key == parent.key
                and ref.depth == parent.depth + 1
                and not ref.disabled
            ):
                return ref.key
        return None

    def _move_to(self, key: str | None) -> None:
        # No enabled target in that direction: focus stays put.
        if key is None or key == self._focused_key:
            return
        logger.debug("focus_moved", previous=self._focused_key, focused=key)
        self._focused_key = key
