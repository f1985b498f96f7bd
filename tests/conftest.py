# Test configuration for pytest
#
# Note: Tests require the package to be installed.
# Run `pip install -e .` from the project root before running tests.
# This installs the package in development mode, allowing proper imports.

import sys
from pathlib import Path

import pytest

from goglaunch.errors import ProcessLaunchError


def pytest_configure(config):
    """Register custom markers for platform-specific tests."""
    config.addinivalue_line("markers", "unix: mark test to run only on Unix")
    config.addinivalue_line("markers", "windows: mark test to run only on Windows")


def pytest_collection_modifyitems(config, items):
    """Skip platform-specific tests on incompatible platforms."""
    is_windows = sys.platform.startswith('win')
    skip_unix = pytest.mark.skip(reason="Unix-only test")
    skip_windows = pytest.mark.skip(reason="Windows-only test")

    for item in items:
        if "unix" in item.keywords and is_windows:
            item.add_marker(skip_unix)
        if "windows" in item.keywords and not is_windows:
            item.add_marker(skip_windows)


class FakeRunner:
    """In-memory ProcessRunner that records every call.

    Programs are keyed by the file name of command[0], so "go" matches the
    compiler and "gog" matches the built binary wherever it was written.

    Attributes:
        calls: List of (kind, command) tuples in call order.
        captured: Maps a git subcommand ("describe", "rev-parse") to its output.
            Missing entries behave like a failed query (None).
        exit_codes: Maps a program name to the status run_inherited returns.
        unlaunchable: Program names for which run_inherited raises.
    """

    def __init__(self):
        self.calls = []
        self.captured = {}
        self.exit_codes = {}
        self.unlaunchable = set()

    def run_inherited(self, command):
        command = list(command)
        self.calls.append(("inherited", command))
        name = Path(command[0]).name
        if name in self.unlaunchable:
            raise ProcessLaunchError(command, "No such file or directory")
        return self.exit_codes.get(name, 0)

    def run_captured(self, command):
        command = list(command)
        self.calls.append(("captured", command))
        return self.captured.get(command[1])

    def inherited_calls(self):
        return [cmd for kind, cmd in self.calls if kind == "inherited"]

    def captured_calls(self):
        return [cmd for kind, cmd in self.calls if kind == "captured"]


@pytest.fixture
def fake_runner():
    return FakeRunner()
