"""Selection and check-state transitions.

All functions are pure: they take the current key set and return a new
frozenset. Gating on disabled nodes and on the checkable/selectable flags
happens in the caller (the engine), so these stay trivially testable.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Sequence
from enum import Enum

from canopy.tree.model import TreeModel
from canopy.tree.visibility import VisibleNodeRef


class CheckState(str, Enum):
    """Rendered state of a check box."""

    CHECKED = "checked"
    UNCHECKED = "unchecked"
    INDETERMINATE = "indeterminate"


def toggle_select(
    selected_keys: Collection[str],
    key: str,
    *,
    multiple: bool,
    selected: bool | None = None,
) -> frozenset[str]:
    """Select or deselect ``key``.

    Single mode: selecting replaces the whole set, deselecting (including
    re-selecting the selected key) clears it. Multi mode: only ``key`` is
    added or removed.

    Args:
        selected_keys: Current selection.
        key: Key being toggled.
        multiple: Multi-select mode.
        selected: Target state; None flips on current membership.
    """
    if selected is None:
        selected = key not in selected_keys

    if multiple:
        if selected:
            return frozenset(selected_keys) | {key}
        return frozenset(selected_keys) - {key}

    return frozenset({key}) if selected else frozenset()


def toggle_check(
    model: TreeModel,
    checked_keys: Collection[str],
    key: str,
    checked: bool,
    *,
    strictly: bool = False,
) -> frozenset[str]:
    """Check or uncheck ``key`` and, unless ``strictly``, its whole subtree.

    Propagation is downward only and ignores the descendants' disabled
    flags. Unknown keys leave the set unchanged.
    """
    if key not in model:
        return frozenset(checked_keys)

    affected = {key} if strictly else model.descendant_keys(key)
    if checked:
        return frozenset(checked_keys) | affected
    return frozenset(checked_keys) - affected


def select_all_visible(
    selected_keys: Collection[str],
    visible: Sequence[VisibleNodeRef],
    *,
    multiple: bool,
) -> frozenset[str]:
    """Add every visible, enabled key to the selection (multi mode only)."""
    if not multiple:
        return frozenset(selected_keys)
    return frozenset(selected_keys) | {ref.key for ref in visible if not ref.disabled}


def prune_keys(
    model: TreeModel,
    keys: Iterable[str],
    *,
    expandable_only: bool = False,
) -> frozenset[str]:
    """Drop keys the model no longer has.

    With ``expandable_only`` leaves are dropped too, which is the rule for
    the expanded set.
    """
    kept: set[str] = set()
    for key in keys:
        node = model.get(key)
        if node is None:
            continue
        if expandable_only and not node.has_children:
            continue
        kept.add(key)
    return frozenset(kept)


def check_state(
    model: TreeModel,
    checked_keys: Collection[str],
    key: str,
) -> CheckState:
    """Derive the check box state of ``key`` for display.

    A checked key is CHECKED. An unchecked key with some checked
    descendant is INDETERMINATE. The checked set itself is never altered.
    """
    if key in checked_keys:
        return CheckState.CHECKED
    below = model.descendant_keys(key) - {key}
    if any(k in checked_keys for k in below):
        return CheckState.INDETERMINATE
    return CheckState.UNCHECKED


def indeterminate_keys(
    model: TreeModel,
    checked_keys: Collection[str],
) -> frozenset[str]:
    """Unchecked ancestors of any checked key."""
    result: set[str] = set()
    for key in checked_keys:
        if key not in model:
            continue
        for ancestor in model.ancestor_keys(key):
            if ancestor not in checked_keys:
                result.add(ancestor)
    return frozenset(result)
