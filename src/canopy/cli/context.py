"""CLI context and exit codes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from canopy.config import CanopyConfig

__all__ = ["ExitCode", "CLIContext"]


class ExitCode(IntEnum):
    """Exit codes: 0 success, 1 failure, 2 usage error (Click's own)."""

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global options and configuration shared by subcommands.

    Attributes:
        config: Loaded configuration.
        config_path: Config file given with ``--config``, if any.
        verbosity: 0 default, 1 INFO, 2+ DEBUG.
        quiet: Errors only.
    """

    config: CanopyConfig
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
