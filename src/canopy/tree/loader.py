"""Reading tree documents from disk.

A tree document is YAML (JSON is valid YAML) holding either a list of root
nodes or a mapping with a ``nodes`` list. Shape is validated with pydantic
here so the engine only ever receives well-formed nodes.

Example document:
    nodes:
      - key: "1"
        title: Parent 1
        children:
          - {key: "1-1", title: Child 1}
          - {key: "1-2", title: Child 2, disabled: true}
      - key: "2"
        title: Parent 2
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from canopy.exceptions import TreeDataError
from canopy.logging import get_logger
from canopy.tree.model import TreeNode

__all__ = ["TreeNodeData", "load_tree", "parse_tree"]

logger = get_logger(__name__)


class TreeNodeData(BaseModel):
    """Validated shape of one node in a tree document."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    key: str = Field(min_length=1)
    title: str = ""
    children: list[TreeNodeData] | None = None
    disabled: bool = False
    icon: str | None = None

    def to_node(self) -> TreeNode:
        return TreeNode(
            key=self.key,
            title=self.title,
            children=tuple(child.to_node() for child in self.children or ()),
            disabled=self.disabled,
            icon=self.icon,
            data=dict(self.model_extra or {}),
        )


TreeNodeData.model_rebuild()

_NODE_LIST = TypeAdapter(list[TreeNodeData])


def parse_tree(raw: Any, *, path: Path | None = None) -> tuple[TreeNode, ...]:
    """Validate already-decoded data and convert it to a root forest.

    Raises:
        TreeDataError: If the data is not a node list (or ``{nodes: [...]}``).
    """
    if isinstance(raw, dict) and "nodes" in raw:
        raw = raw["nodes"]
    if raw is None:
        raw = []
    try:
        nodes = _NODE_LIST.validate_python(raw)
    except ValidationError as e:
        first_error = e.errors()[0]
        location = ".".join(str(loc) for loc in first_error["loc"])
        raise TreeDataError(
            f"Invalid tree data at {location or 'root'}: {first_error['msg']}",
            path=path,
            location=location or None,
        ) from e
    return tuple(node.to_node() for node in nodes)


def load_tree(path: Path) -> tuple[TreeNode, ...]:
    """Read and validate a tree document.

    Raises:
        TreeDataError: If the file is missing, not YAML/JSON, or malformed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TreeDataError(f"Cannot read tree file {path}: {e}", path=path) from e

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TreeDataError(f"Invalid YAML in {path}: {e}", path=path) from e

    roots = parse_tree(raw, path=path)
    logger.debug("tree_loaded", path=str(path), roots=len(roots))
    return roots
