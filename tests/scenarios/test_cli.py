"""End-to-end command scenarios through the click CLI with a fake window manager."""

import json
import os

import pytest
from click.testing import CliRunner

from i3_scratchpad.cli.main import CliState, cli
from i3_scratchpad.constants import SCRATCHPAD_WORKSPACE
from i3_scratchpad.errors import AdapterError
from i3_scratchpad.logging_config import null_logger
from i3_scratchpad.services.registry import StickyRegistry

from tests.fixtures.fake_wm import MUTATING_CALLS, FakeWindowManager, make_window


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, fake_wm, settings, marker):
    def _invoke(*args, wm=None):
        state = CliState(settings=settings, client=wm or fake_wm, marker_path=marker.path, logger=null_logger())
        return runner.invoke(cli, list(args), obj=state)
    return _invoke


def real_mutations(wm):
    return [name for name in wm.call_names() if name in MUTATING_CALLS and name != "close_connection"]


class TestListCommand:
    """Test `list`."""

    def test_empty_scratchpad(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "result=none" in result.output
        assert 'message="no scratchpad windows found"' in result.output

    def test_json_output(self, invoke, fake_wm):
        fake_wm.windows.append(make_window(10, "Slack", SCRATCHPAD_WORKSPACE, title="general"))
        result = invoke("list", "--output", "json")

        assert result.exit_code == 0
        record = json.loads(result.output.splitlines()[0])
        assert record["window_id"] == 10
        assert record["workspace"] == SCRATCHPAD_WORKSPACE
        assert record["message"] == "general"

    def test_filter_applied(self, invoke, fake_wm):
        fake_wm.windows.append(make_window(10, "Slack", SCRATCHPAD_WORKSPACE))
        fake_wm.windows.append(make_window(11, "Spotify", SCRATCHPAD_WORKSPACE))
        result = invoke("list", "--filter", "app-name=^Spot", "-o", "tsv")

        lines = result.output.splitlines()
        assert lines[0].startswith("command\taction")
        assert len(lines) == 2
        assert lines[1].split("\t")[2] == "11"

    def test_invalid_output_fails_before_queries(self, invoke, fake_wm):
        result = invoke("list", "--output", "yaml")
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert fake_wm.calls == [("close_connection", ())]

    def test_invalid_filter(self, invoke):
        result = invoke("list", "--filter", "window-title")
        assert result.exit_code == 1
        assert "invalid filter format" in result.output


class TestMoveCommand:
    """Test `move`."""

    def test_move_pattern(self, invoke, fake_wm):
        result = invoke("move", "Finder")

        assert result.exit_code == 0
        assert "Window 'Finder | foo - Finder' hidden to scratchpad" in result.output
        assert fake_wm.window(5679).workspace == SCRATCHPAD_WORKSPACE

    def test_dry_run_makes_no_changes(self, invoke, fake_wm):
        """Verify --dry-run prints the trace and issues no mutating calls."""
        result = invoke("move", "Finder", "--dry-run")

        assert result.exit_code == 0
        assert "[dry-run] move window 5678 to workspace '.scratchpad'" in result.output
        assert "[dry-run] set layout of window 5678 to floating" in result.output
        assert real_mutations(fake_wm) == []
        assert "[dry-run] close connection" in result.output
        assert "close_connection" not in fake_wm.call_names()
        assert fake_wm.window(5678).workspace == "1"

    def test_no_focused_window(self, invoke):
        result = invoke("move")
        assert result.exit_code == 1
        assert "Error: no focused window found" in result.output

    def test_partial_failure_exit_code(self, invoke, fake_wm):
        original = fake_wm.move_window_to_workspace

        def flaky(window_id, workspace, focus_follows_window=False):
            if window_id == 5678:
                raise AdapterError(f"move window {window_id} to workspace '{workspace}'", "gone")
            return original(window_id, workspace, focus_follows_window)

        fake_wm.move_window_to_workspace = flaky
        result = invoke("move", "Finder")

        assert result.exit_code == 1
        assert "Error: unable to move window 5678" in result.output
        assert fake_wm.window(5679).workspace == SCRATCHPAD_WORKSPACE


class TestShowSummonNext:
    """Test `show`, `summon` and `next`."""

    def test_show_brings_window(self, invoke, fake_wm):
        fake_wm.window(1234).workspace = "3"
        result = invoke("show", "Terminal")

        assert result.exit_code == 0
        assert "is moved to workspace '1'" in result.output
        assert fake_wm.focused_window_id == 1234

    def test_show_no_match(self, invoke):
        result = invoke("show", "Safari")
        assert result.exit_code == 1
        assert "Error: no windows matched the pattern 'Safari'" in result.output

    def test_show_blank_pattern(self, invoke, fake_wm):
        result = invoke("show", "   ")
        assert result.exit_code == 1
        assert "argument at position 1 is empty or whitespace" in result.output

    def test_summon_dry_run(self, invoke, fake_wm):
        fake_wm.focused_workspace = "2"
        result = invoke("summon", "Terminal", "--dry-run", "--geometry", "60%x90%")

        assert result.exit_code == 0
        assert fake_wm.call_names()[:2] == ["get_focused_workspace", "get_all_windows"]
        assert real_mutations(fake_wm) == []
        assert "[dry-run] resize window 1234 to 60% x 90%" in result.output

    def test_summon_bad_geometry(self, invoke, fake_wm):
        result = invoke("summon", "Terminal", "--geometry", "big")
        assert result.exit_code == 1
        assert "invalid geometry" in result.output
        assert real_mutations(fake_wm) == []

    def test_next(self, invoke, fake_wm):
        fake_wm.windows.append(make_window(10, "Slack", SCRATCHPAD_WORKSPACE))
        result = invoke("next")
        assert result.exit_code == 0
        assert "Next scratchpad window 'Slack' focused in workspace '1'" in result.output

    def test_next_empty(self, invoke):
        result = invoke("next")
        assert result.exit_code == 1
        assert "no scratchpad windows found" in result.output


class TestHookCommand:
    """Test `hook pull-window`."""

    def test_pull_window(self, invoke):
        wm = FakeWindowManager(
            windows=[make_window(77, "kitty", SCRATCHPAD_WORKSPACE)],
            focused_workspace=SCRATCHPAD_WORKSPACE,
            focused_window_id=77,
        )
        result = invoke("hook", "pull-window", "ws1", SCRATCHPAD_WORKSPACE, wm=wm)

        assert result.exit_code == 0
        assert wm.window(77).workspace == "ws1"

    def test_marker_suppresses_pull(self, invoke, marker):
        wm = FakeWindowManager(
            windows=[make_window(77, "kitty", SCRATCHPAD_WORKSPACE)],
            focused_workspace=SCRATCHPAD_WORKSPACE,
            focused_window_id=77,
        )
        marker.set()
        result = invoke("hook", "pull-window", "ws1", SCRATCHPAD_WORKSPACE, wm=wm)

        assert result.exit_code == 0
        assert wm.window(77).workspace == SCRATCHPAD_WORKSPACE
        assert not marker.is_set()

    def test_leaving_scratchpad(self, invoke, fake_wm):
        result = invoke("hook", "pull-window", SCRATCHPAD_WORKSPACE, "ws1")
        assert result.exit_code == 0
        assert real_mutations(fake_wm) == []

    def test_failure_exit_code(self, invoke):
        wm = FakeWindowManager(focused_workspace=SCRATCHPAD_WORKSPACE)
        result = invoke("hook", "pull-window", "ws1", SCRATCHPAD_WORKSPACE, wm=wm)
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unremovable_marker_is_reported(self, invoke, marker, monkeypatch):
        wm = FakeWindowManager(
            windows=[make_window(77, "kitty", SCRATCHPAD_WORKSPACE)],
            focused_workspace=SCRATCHPAD_WORKSPACE,
            focused_window_id=77,
        )
        marker.set()

        def denied(src, dst):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(os, "rename", denied)
        result = invoke("hook", "pull-window", "ws1", SCRATCHPAD_WORKSPACE, wm=wm)

        assert result.exit_code == 1
        assert "Error: unable to remove moving marker" in result.output
        assert wm.window(77).workspace == SCRATCHPAD_WORKSPACE


class TestStickyCommands:
    """Test `sticky` registry commands."""

    def test_add_list_remove(self, invoke, registry_path):
        assert invoke("sticky", "add", "^Spotify$").exit_code == 0
        assert StickyRegistry.open(registry_path).patterns == ["^Spotify$"]

        listed = invoke("sticky", "list")
        assert listed.output.strip() == "^Spotify$"

        removed = invoke("sticky", "remove", "^Spotify$")
        assert removed.exit_code == 0
        assert StickyRegistry.open(registry_path).is_empty()

    def test_add_invalid(self, invoke):
        result = invoke("sticky", "add", "(Spotify")
        assert result.exit_code == 1
        assert "Error: invalid" in result.output

    def test_remove_unknown(self, invoke):
        result = invoke("sticky", "remove", "kitty")
        assert result.exit_code == 1

    def test_follow_with_empty_registry(self, invoke, fake_wm):
        result = invoke("sticky", "follow")
        assert result.exit_code == 0
        assert "No sticky patterns registered" in result.output
        assert "get_focused_workspace" not in fake_wm.call_names()


class TestInfoCommand:
    """Test `info`."""

    def test_info(self, invoke):
        result = invoke("info")
        assert result.exit_code == 0
        assert "/run/user/1000/i3/ipc-socket.1234" in result.output
        assert "4.23" in result.output
        assert SCRATCHPAD_WORKSPACE in result.output
        assert "compatible" in result.output
