from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from click.testing import CliRunner

# Register fixture plugins from tests/fixtures/
pytest_plugins = [
    "tests.fixtures.trees",
]


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test run.

    Output goes to stderr at WARNING so engine debug events do not clutter
    test output.
    """
    from canopy.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory, restoring the cwd afterwards."""
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env(temp_dir: Path) -> Generator[None, None, None]:
    """Remove CANOPY_ environment variables and isolate the user config."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("CANOPY_"):
            del os.environ[key]
    # Point HOME somewhere empty so ~/.config/canopy/config.yaml is absent.
    os.environ["HOME"] = str(temp_dir / "home")
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample canopy.yaml content for testing."""
    return """
tree:
  checkable: false
  multiple: true
  searchable: true

verbosity: "info"
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
