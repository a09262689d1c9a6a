from __future__ import annotations

from typing import Any

from canopy.exceptions.base import CanopyError


class ConfigError(CanopyError):
    """Configuration could not be loaded, parsed, or validated.

    Covers YAML syntax errors in ``canopy.yaml``, pydantic validation
    failures, and bad ``CANOPY_*`` environment values.

    Attributes:
        message: Human-readable error message.
        field: Dotted name of the offending setting (e.g. ``tree.multiple``).
        value: The rejected value, for debugging.

    Example:
        ```python
        raise ConfigError(
            "Invalid configuration: Input should be a valid boolean",
            field="tree.checkable",
            value="sometimes",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message)
