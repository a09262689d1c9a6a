"""Unit tests for the Canopy exception hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from canopy.exceptions import CanopyError, ConfigError, TreeDataError


class TestCanopyError:
    """Tests for the base exception."""

    def test_message_attribute(self) -> None:
        """Test message is stored and used as str()."""
        error = CanopyError("Something failed")

        assert error.message == "Something failed"
        assert str(error) == "Something failed"

    def test_is_exception(self) -> None:
        """Test CanopyError can be raised and caught as Exception."""
        with pytest.raises(Exception, match="boom"):
            raise CanopyError("boom")


class TestConfigError:
    """Tests for ConfigError."""

    def test_defaults(self) -> None:
        """Test field and value default to None."""
        error = ConfigError("Invalid configuration")

        assert error.field is None
        assert error.value is None
        assert isinstance(error, CanopyError)

    def test_field_and_value(self) -> None:
        """Test field and value are kept for reporting."""
        error = ConfigError("Bad flag", field="tree.multiple", value="maybe")

        assert error.message == "Bad flag"
        assert error.field == "tree.multiple"
        assert error.value == "maybe"


class TestTreeDataError:
    """Tests for TreeDataError."""

    def test_defaults(self) -> None:
        """Test path and location default to None."""
        error = TreeDataError("Invalid tree data")

        assert error.path is None
        assert error.location is None

    def test_caught_as_base(self) -> None:
        """Test the CLI boundary can catch it as CanopyError."""
        with pytest.raises(CanopyError) as exc_info:
            raise TreeDataError(
                "Missing key", path=Path("tree.yaml"), location="0.children.1.key"
            )

        assert isinstance(exc_info.value, TreeDataError)
        assert exc_info.value.location == "0.children.1.key"
        assert exc_info.value.path == Path("tree.yaml")
