"""Tests for the canopy.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from canopy.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_custom_level(self) -> None:
        """Test an explicit level wins over the environment."""
        with patch.dict(os.environ, {"CANOPY_LOG_LEVEL": "ERROR"}):
            configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        """Test log level from CANOPY_LOG_LEVEL."""
        with patch.dict(os.environ, {"CANOPY_LOG_LEVEL": "info"}):
            configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_unknown_env_level_falls_back(self) -> None:
        """Test an unknown level name falls back to WARNING."""
        with patch.dict(os.environ, {"CANOPY_LOG_LEVEL": "chatty"}):
            configure_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_single_handler_after_reconfigure(self) -> None:
        """Test repeated configuration replaces the root handler."""
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON lines when CANOPY_LOG_FORMAT=json."""
        with patch.dict(os.environ, {"CANOPY_LOG_FORMAT": "json"}):
            configure_logging(level=logging.INFO)

        get_logger("canopy.test").info("tree_loaded", roots=2)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "tree_loaded"
        assert record["roots"] == 2
        assert record["level"] == "info"
        assert record["logger"] == "canopy.test"

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test events below the level are dropped."""
        configure_logging(force_json=True, level=logging.WARNING)

        get_logger("canopy.test").debug("focus_moved", focused="1")

        assert "focus_moved" not in capsys.readouterr().err


class TestContext:
    """Tests for bind_context/clear_context."""

    def test_bound_context_is_included(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test bound values appear on later events until cleared."""
        configure_logging(force_json=True, level=logging.INFO)
        bind_context(tree_file="inventory.yaml")
        try:
            get_logger("canopy.test").info("tree_mounted")
        finally:
            clear_context()
        get_logger("canopy.test").info("tree_replaced")

        lines = capsys.readouterr().err.strip().splitlines()
        first, second = (json.loads(line) for line in lines[-2:])
        assert first["tree_file"] == "inventory.yaml"
        assert "tree_file" not in second


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_bindable_logger(self) -> None:
        """Test that the logger supports context binding."""
        configure_logging()

        log = get_logger("canopy.test").bind(key="1")

        assert log is not None
        assert structlog.is_configured()
