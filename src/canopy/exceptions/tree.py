from __future__ import annotations

from pathlib import Path

from canopy.exceptions.base import CanopyError


class TreeDataError(CanopyError):
    """A tree document is unreadable or does not have the node shape.

    Raised by the loader before any data reaches the engine, so the engine
    only ever sees well-formed ``TreeNode`` sequences.

    Attributes:
        message: Human-readable error message.
        path: Source file, when the data came from disk.
        location: Position of the bad node inside the document
            (e.g. ``0.children.1.key``), when known.
    """

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        location: str | None = None,
    ) -> None:
        self.path = path
        self.location = location
        super().__init__(message)
