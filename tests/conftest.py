"""Pytest configuration and shared fixtures for i3-scratchpad tests."""

import sys
from pathlib import Path

import pytest

# Add the repository root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from i3_scratchpad.config import ScratchpadSettings  # noqa: E402
from i3_scratchpad.services.hook import MovingMarker  # noqa: E402

from tests.fixtures.fake_wm import FakeWindowManager, make_window  # noqa: E402


@pytest.fixture
def finder_windows():
    """Two Finder windows and a Terminal, all on workspace 1."""
    return [
        make_window(5678, "Finder", "1", title="foo - Finder", bundle_id="com.apple.finder"),
        make_window(5679, "Finder", "1", title="bar - Finder", bundle_id="com.other.finder"),
        make_window(1234, "Terminal", "1", title="zsh", bundle_id="com.apple.Terminal"),
    ]


@pytest.fixture
def fake_wm(finder_windows) -> FakeWindowManager:
    """Fake window manager with the Finder/Terminal windows, workspace 1 focused."""
    return FakeWindowManager(windows=finder_windows, focused_workspace="1")


@pytest.fixture
def marker(tmp_path) -> MovingMarker:
    """Moving marker in a temporary directory."""
    return MovingMarker(tmp_path / ".i3-scratchpad-moving")


@pytest.fixture
def settings(tmp_path) -> ScratchpadSettings:
    """Settings with logging disabled and the registry under tmp_path."""
    return ScratchpadSettings(config_dir=tmp_path / "config", logs_path=tmp_path / "i3-scratchpad.log")


@pytest.fixture
def registry_path(settings) -> Path:
    return settings.registry_path
