"""Canopy terminal UI built with Textual."""

from __future__ import annotations

from canopy.tui.app import CanopyApp

__all__ = ["CanopyApp"]
