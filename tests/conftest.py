"""
Pytest configuration for the gocodemod test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Fresh config and path singletons per test
- Temporary Go projects for runner tests
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from gocodemod.logging_config import setup_logging
from gocodemod.paths import reset_paths
from gocodemod.user_config import reset_user_config


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for quiet, machine-readable runs."""
    os.environ.setdefault("GOCODEMOD_MACHINE_MODE", "1")


# ============================================================================
# LOGGING AND CONFIG FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts from the default config and paths."""
    reset_user_config()
    reset_paths()
    yield
    reset_user_config()
    reset_paths()


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="gocodemod_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_project(temp_dir):
    """
    Create a temporary Go module with a few source files.

    Returns:
        Path to the temp directory containing the project.
    """
    (temp_dir / "go.mod").write_text("module example.com/demo\n\ngo 1.21\n")

    (temp_dir / "main.go").write_text(
        "package main\n"
        "\n"
        "import \"example.com/demo/store\"\n"
        "\n"
        "func main() {\n"
        "\tstore.Open(\"primary\")\n"
        "\tlegacyInit()\n"
        "}\n"
    )

    (temp_dir / "legacy.go").write_text(
        "package main\n"
        "\n"
        "func legacyInit() {\n"
        "\tlegacyInit()\n"
        "}\n"
    )

    store = temp_dir / "store"
    store.mkdir()
    (store / "store.go").write_text(
        "package store\n"
        "\n"
        "func Open(name string) error {\n"
        "\treturn nil\n"
        "}\n"
    )

    (temp_dir / "README.md").write_text("Uses legacyInit for setup.\n")

    vendor = temp_dir / "vendor" / "example.com" / "dep"
    vendor.mkdir(parents=True)
    (vendor / "dep.go").write_text(
        "package dep\n"
        "\n"
        "func Dep() {\n"
        "\tlegacyInit()\n"
        "}\n"
    )

    yield temp_dir
