from __future__ import annotations


class CanopyError(Exception):
    """Base exception class for all Canopy-specific errors.

    The tree engine itself never raises for structurally valid input; these
    errors come from the layers around it (configuration, tree documents)
    and are caught at the CLI boundary.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            roots = load_tree(path)
        except CanopyError as e:
            click.echo(f"Error: {e.message}", err=True)
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the CanopyError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
