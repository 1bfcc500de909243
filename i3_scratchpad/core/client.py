"""Window manager capability interface.

Everything above the adapter layer talks to the window manager through
WindowManager. I3Client implements it over i3 IPC; tests use a recording
fake. All calls are synchronous and may raise ScratchpadError.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.window import Window, WindowLayout


class WindowManager(ABC):
    """Window, workspace, focus, layout and connection operations."""

    # Windows

    @abstractmethod
    def get_all_windows(self) -> List[Window]:
        """Enumerate every managed window, in window manager order."""

    @abstractmethod
    def get_windows_by_workspace(self, workspace: str) -> List[Window]:
        """Enumerate the windows of one workspace (empty if it does not exist)."""

    @abstractmethod
    def move_window_to_workspace(
        self,
        window_id: int,
        workspace: str,
        focus_follows_window: bool = False,
    ) -> None:
        """Move a window to a workspace.

        Args:
            window_id: Window to move
            workspace: Target workspace name
            focus_follows_window: Switch to the workspace and focus the window

        Raises:
            AlreadyInWorkspaceError: If the window is already there
            AdapterError: If the move fails
        """

    # Workspaces

    @abstractmethod
    def get_focused_workspace(self) -> str:
        """Name of the focused workspace."""

    # Focus

    @abstractmethod
    def get_focused_window(self) -> Window:
        """The focused window.

        Raises:
            NoFocusedWindowError: If nothing is focused
        """

    @abstractmethod
    def set_focus_by_window_id(self, window_id: int) -> None:
        """Focus a window, switching workspace if needed."""

    @abstractmethod
    def focus_next_tiling_window(self, direction: str = "next") -> None:
        """Move focus depth-first to the next or previous tiling window."""

    # Layout

    @abstractmethod
    def set_layout(self, window_id: int, layout: WindowLayout) -> None:
        """Set a window's layout to tiling or floating."""

    @abstractmethod
    def resize_window(self, window_id: int, width_percent: int, height_percent: int) -> None:
        """Resize a floating window relative to its output and center it."""

    # Connection

    @abstractmethod
    def get_socket_path(self) -> str:
        """Path of the IPC socket in use."""

    @abstractmethod
    def get_server_version(self) -> str:
        """Human-readable window manager version."""

    @abstractmethod
    def check_server_version(self) -> None:
        """Raise AdapterError when the window manager is too old."""

    @abstractmethod
    def send_command(self, command: str) -> None:
        """Send a raw IPC command."""

    @abstractmethod
    def close_connection(self) -> None:
        """Release the IPC connection."""
