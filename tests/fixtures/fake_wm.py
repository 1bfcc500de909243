"""Recording fake window manager for testing."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from i3_scratchpad.core.client import WindowManager
from i3_scratchpad.errors import AdapterError, AlreadyInWorkspaceError, NoFocusedWindowError
from i3_scratchpad.models.window import Window, WindowLayout


def make_window(
    id: int,
    app_name: str,
    workspace: str = "1",
    title: str = "",
    bundle_id: str = "",
    floating: bool = False,
) -> Window:
    """Build a Window with test-friendly defaults."""
    return Window(
        id=id,
        app_name=app_name,
        window_title=title,
        app_bundle_id=bundle_id,
        workspace=workspace,
        layout=WindowLayout.FLOATING if floating else WindowLayout.TILING,
    )


@dataclass
class FakeWindowManager(WindowManager):
    """In-memory window manager that records every call.

    Moves update the stored windows, so follow-up queries see the new
    topology. Set failures[name] to an exception to make that operation
    raise it.
    """

    windows: List[Window] = field(default_factory=list)
    focused_workspace: str = "1"
    focused_window_id: Optional[int] = None
    failures: Dict[str, Exception] = field(default_factory=dict)
    calls: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)
    socket_path: str = "/run/user/1000/i3/ipc-socket.1234"
    version: str = "4.23 (2023-10-29)"

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.failures:
            raise self.failures[name]

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def calls_to(self, name: str) -> List[Tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def window(self, window_id: int) -> Window:
        return next(w for w in self.windows if w.id == window_id)

    # Read operations

    def get_all_windows(self) -> List[Window]:
        self._record("get_all_windows")
        return [w.model_copy() for w in self.windows]

    def get_windows_by_workspace(self, workspace: str) -> List[Window]:
        self._record("get_windows_by_workspace", workspace)
        return [w.model_copy() for w in self.windows if w.workspace == workspace]

    def get_focused_workspace(self) -> str:
        self._record("get_focused_workspace")
        return self.focused_workspace

    def get_focused_window(self) -> Window:
        self._record("get_focused_window")
        if self.focused_window_id is None:
            raise NoFocusedWindowError()
        return self.window(self.focused_window_id).model_copy()

    def get_socket_path(self) -> str:
        self._record("get_socket_path")
        return self.socket_path

    def get_server_version(self) -> str:
        self._record("get_server_version")
        return self.version

    def check_server_version(self) -> None:
        self._record("check_server_version")

    # Mutating operations

    def move_window_to_workspace(self, window_id: int, workspace: str, focus_follows_window: bool = False) -> None:
        self._record("move_window_to_workspace", window_id, workspace, focus_follows_window)
        try:
            target = self.window(window_id)
        except StopIteration:
            raise AdapterError(f"move window {window_id} to workspace '{workspace}'", "window not found")
        if target.workspace == workspace:
            raise AlreadyInWorkspaceError(window_id, workspace)
        target.workspace = workspace
        if focus_follows_window:
            self.focused_workspace = workspace
            self.focused_window_id = window_id

    def set_layout(self, window_id: int, layout: WindowLayout) -> None:
        self._record("set_layout", window_id, WindowLayout(layout))
        self.window(window_id).layout = WindowLayout(layout)

    def set_focus_by_window_id(self, window_id: int) -> None:
        self._record("set_focus_by_window_id", window_id)
        self.focused_window_id = window_id
        self.focused_workspace = self.window(window_id).workspace

    def focus_next_tiling_window(self, direction: str = "next") -> None:
        self._record("focus_next_tiling_window", direction)

    def resize_window(self, window_id: int, width_percent: int, height_percent: int) -> None:
        self._record("resize_window", window_id, width_percent, height_percent)

    def send_command(self, command: str) -> None:
        self._record("send_command", command)

    def close_connection(self) -> None:
        self._record("close_connection")


MUTATING_CALLS = {
    "move_window_to_workspace",
    "set_layout",
    "set_focus_by_window_id",
    "focus_next_tiling_window",
    "resize_window",
    "send_command",
    "close_connection",
}
