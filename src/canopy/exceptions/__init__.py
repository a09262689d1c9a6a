"""Canopy exception hierarchy.

All exceptions can be imported from this package:
    from canopy.exceptions import CanopyError, ConfigError, TreeDataError
"""

from __future__ import annotations

from canopy.exceptions.base import CanopyError
from canopy.exceptions.config import ConfigError
from canopy.exceptions.tree import TreeDataError

__all__ = [
    "CanopyError",
    "ConfigError",
    "TreeDataError",
]
