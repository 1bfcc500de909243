"""Tests for the i3ipc-backed adapter."""

from dataclasses import dataclass, field
from typing import List, Optional
from unittest.mock import MagicMock, patch

import pytest

from i3_scratchpad.core.i3_client import I3Client, quote
from i3_scratchpad.errors import AdapterError, AlreadyInWorkspaceError, ErrorCode, NoFocusedWindowError
from i3_scratchpad.models.window import WindowLayout


@dataclass
class FakeWorkspaceCon:
    name: str
    type: str = "workspace"


@dataclass
class FakeCon:
    """Minimal stand-in for i3ipc.Con."""
    id: int
    name: str = ""
    type: str = "con"
    window: Optional[int] = 1
    window_class: Optional[str] = None
    window_instance: Optional[str] = None
    app_id: Optional[str] = None
    floating: Optional[str] = "auto_off"
    focused: bool = False
    nodes: List["FakeCon"] = field(default_factory=list)
    parent: Optional[object] = None
    ws: Optional[FakeWorkspaceCon] = None

    def workspace(self):
        return self.ws


class FakeTree:
    def __init__(self, cons):
        self.cons = cons

    def descendants(self):
        return list(self.cons)

    def find_focused(self):
        return next((c for c in self.cons if c.focused), None)

    def find_by_id(self, con_id):
        return next((c for c in self.cons if c.id == con_id), None)


def reply(success=True, error=None):
    r = MagicMock()
    r.success = success
    r.error = error
    return r


@pytest.fixture
def cons():
    ws1 = FakeWorkspaceCon("1")
    scratch = FakeWorkspaceCon(".scratchpad")
    return [
        FakeCon(10, "zsh", window_class="kitty", window_instance="kitty", ws=ws1, focused=True),
        FakeCon(11, "Spotify Premium", app_id="spotify", window=None, type="floating_con", ws=scratch),
        FakeCon(12, "split", window=None, ws=ws1, nodes=[object()]),
    ]


@pytest.fixture
def connection(cons):
    conn = MagicMock()
    conn.get_tree.return_value = FakeTree(cons)
    conn.command.return_value = [reply()]
    conn.socket_path = "/run/user/1000/i3/ipc-socket.42"
    return conn


@pytest.fixture
def client(connection):
    with patch("i3_scratchpad.core.i3_client.i3ipc.Connection", return_value=connection) as factory:
        c = I3Client(socket_path="/tmp/i3.sock", timeout=2.0)
        c.connect()
        factory.assert_called_once_with(socket_path="/tmp/i3.sock")
    return c


class TestQueries:
    """Test tree and workspace queries."""

    def test_get_all_windows_skips_split_containers(self, client):
        windows = client.get_all_windows()

        assert [w.id for w in windows] == [10, 11]
        assert windows[0].app_name == "kitty"
        assert windows[0].layout == WindowLayout.TILING
        assert windows[1].app_name == "spotify"
        assert windows[1].app_bundle_id == "spotify"
        assert windows[1].layout == WindowLayout.FLOATING
        assert windows[1].workspace == ".scratchpad"

    def test_get_windows_by_workspace(self, client):
        assert [w.id for w in client.get_windows_by_workspace(".scratchpad")] == [11]
        assert client.get_windows_by_workspace("nope") == []

    def test_get_focused_window(self, client):
        assert client.get_focused_window().id == 10

    def test_no_focused_window(self, client, cons):
        cons[0].focused = False
        with pytest.raises(NoFocusedWindowError):
            client.get_focused_window()

    def test_get_focused_workspace(self, client, connection):
        ws_a, ws_b = MagicMock(focused=False), MagicMock(focused=True)
        ws_b.name = "2"
        connection.get_workspaces.return_value = [ws_a, ws_b]
        assert client.get_focused_workspace() == "2"

    def test_ipc_failure_wrapped(self, client, connection):
        connection.get_tree.side_effect = OSError("broken pipe")
        with pytest.raises(AdapterError, match="unable to get windows: broken pipe"):
            client.get_all_windows()


class TestCommands:
    """Test i3 command mapping."""

    def test_move(self, client, connection):
        client.move_window_to_workspace(10, "2")
        connection.command.assert_called_once_with('[con_id=10] move container to workspace "2"')

    def test_move_focus_follows(self, client, connection):
        client.move_window_to_workspace(10, "2", focus_follows_window=True)
        connection.command.assert_called_once_with(
            '[con_id=10] move container to workspace "2"; workspace "2"; [con_id=10] focus'
        )

    def test_move_to_current_workspace(self, client, connection):
        with pytest.raises(AlreadyInWorkspaceError):
            client.move_window_to_workspace(11, ".scratchpad")
        connection.command.assert_not_called()

    def test_move_unknown_window(self, client):
        with pytest.raises(AdapterError, match="window not found"):
            client.move_window_to_workspace(99, "2")

    def test_rejected_command(self, client, connection):
        connection.command.return_value = [reply(False, "No window matches given criteria")]
        with pytest.raises(AdapterError) as exc_info:
            client.set_focus_by_window_id(10)
        assert exc_info.value.window_id == 10
        assert "No window matches" in exc_info.value.message

    def test_set_layout(self, client, connection):
        client.set_layout(10, WindowLayout.FLOATING)
        client.set_layout(10, "tiling")
        assert [c.args[0] for c in connection.command.call_args_list] == [
            "[con_id=10] floating enable",
            "[con_id=10] floating disable",
        ]

    def test_focus_next_tiling(self, client, connection):
        client.focus_next_tiling_window("prev")
        connection.command.assert_called_once_with("focus tiling; focus prev")
        with pytest.raises(ValueError):
            client.focus_next_tiling_window("up")

    def test_resize(self, client, connection):
        client.resize_window(10, 60, 90)
        connection.command.assert_called_once_with(
            "[con_id=10] resize set 60 ppt 90 ppt, move position center"
        )

    def test_quote(self):
        assert quote('a "b"') == '"a \\"b\\""'


class TestConnection:
    """Test connection level operations."""

    def test_socket_path(self, client):
        assert client.get_socket_path() == "/run/user/1000/i3/ipc-socket.42"

    def test_timeout_applied(self, connection):
        with patch("i3_scratchpad.core.i3_client.i3ipc.Connection", return_value=connection):
            I3Client(timeout=2.5).connect()
        connection._cmd_socket.settimeout.assert_called_once_with(2.5)

    def test_connect_failure(self):
        with patch("i3_scratchpad.core.i3_client.i3ipc.Connection", side_effect=FileNotFoundError("no socket")):
            with pytest.raises(AdapterError, match="unable to connect to i3"):
                I3Client().get_all_windows()

    @pytest.mark.parametrize("major, minor, ok", [(4, 23, True), (4, 19, False), (1, 9, True)])
    def test_check_server_version(self, client, connection, major, minor, ok):
        connection.get_version.return_value = MagicMock(major=major, minor=minor, human_readable=f"{major}.{minor}")
        if ok:
            client.check_server_version()
        else:
            with pytest.raises(AdapterError) as exc_info:
                client.check_server_version()
            assert exc_info.value.code == ErrorCode.UNSUPPORTED_VERSION

    def test_close(self, client):
        client.close_connection()
        assert client._connection is None
