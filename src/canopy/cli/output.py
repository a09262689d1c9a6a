"""Output formatting helpers for CLI commands."""

from __future__ import annotations

import json
from dataclasses import asdict
from enum import Enum
from typing import Any

from canopy.tree.engine import TreeViewEngine

__all__ = [
    "OutputFormat",
    "format_error",
    "format_json",
    "visible_rows_payload",
]


class OutputFormat(str, Enum):
    """Output formats of ``canopy show``."""

    TEXT = "text"
    JSON = "json"


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error("Cannot read tree file", details=["Field: 0.key"]))
        Error: Cannot read tree file
          Field: 0.key
    """
    lines = [f"Error: {message}"]
    for detail in details or []:
        lines.append(f"  {detail}")
    if suggestion:
        lines.append(f"Suggestion: {suggestion}")
    return "\n".join(lines)


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def visible_rows_payload(engine: TreeViewEngine) -> dict[str, Any]:
    """Visible rows with their accessibility attributes, plus the key sets."""
    state = engine.state
    return {
        "rows": [
            {
                "key": ref.key,
                "title": ref.node.title,
                "parent": ref.parent_key,
                **asdict(engine.item_attributes(ref)),
            }
            for ref in engine.visible
        ],
        "expanded": engine.ordered_keys(state.expanded_keys),
        "checked": engine.ordered_keys(state.checked_keys),
        "selected": engine.ordered_keys(state.selected_keys),
        "focused": state.focused_key,
        "query": state.query,
    }
