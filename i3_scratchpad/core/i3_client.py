"""i3 IPC client implementing the WindowManager interface.

Synchronous wrapper around i3ipc.Connection for:
- Window tree (GET_TREE)
- Workspaces (GET_WORKSPACES)
- Version (GET_VERSION)
- Sending commands (RUN_COMMAND)

Works against both i3 and sway. Every IPC call is logged at DEBUG.
"""

import logging
from typing import Any, List, Optional

import i3ipc

from ..constants import DEFAULT_IPC_TIMEOUT, MIN_I3_VERSION
from ..errors import (
    AdapterError,
    AlreadyInWorkspaceError,
    ErrorCode,
    NoFocusedWindowError,
    ScratchpadError,
)
from ..logging_config import null_logger
from ..models.window import Window, WindowLayout
from .client import WindowManager


WINDOW_TYPES = ("con", "floating_con")


def quote(value: str) -> str:
    """Quote a workspace name for an i3 command."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def is_client_window(con: Any) -> bool:
    """True for containers that hold an application window."""
    if con.type not in WINDOW_TYPES or con.nodes:
        return False
    return bool(getattr(con, "window", None) or getattr(con, "app_id", None))


class I3Client(WindowManager):
    """Blocking i3/sway IPC adapter.

    The connection is opened lazily on the first call.
    """

    def __init__(
        self,
        socket_path: Optional[str] = None,
        timeout: float = DEFAULT_IPC_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize i3 client.

        Args:
            socket_path: IPC socket; None lets i3ipc discover it (I3SOCK/SWAYSOCK)
            timeout: Socket timeout in seconds for every IPC round trip
            logger: Logger for IPC tracing
        """
        self.socket_path = socket_path
        self.timeout = timeout
        self.logger = logger or null_logger()
        self._connection: Optional[i3ipc.Connection] = None

    @property
    def connection(self) -> i3ipc.Connection:
        if self._connection is None:
            self.connect()
        return self._connection

    def connect(self) -> None:
        """Connect to the i3 IPC socket.

        Raises:
            AdapterError: If connection fails
        """
        try:
            self.logger.debug(f"Connecting to i3 IPC socket {self.socket_path or '(auto)'}")
            self._connection = i3ipc.Connection(socket_path=self.socket_path)
        except Exception as e:
            self.logger.error(f"Failed to connect to i3 IPC: {e}")
            raise AdapterError("connect to i3", str(e)) from e

        # i3ipc exposes no timeout option; the command socket is a plain socket
        cmd_socket = getattr(self._connection, "_cmd_socket", None)
        if cmd_socket is not None:
            cmd_socket.settimeout(self.timeout)
        self.logger.info("Connected to i3 IPC")

    def close_connection(self) -> None:
        """Close i3 connection."""
        if self._connection:
            # i3ipc doesn't have explicit close, connection auto-closes
            self.logger.debug("Closing i3 IPC connection")
            self._connection = None

    def _get_tree(self) -> Any:
        try:
            self.logger.debug("IPC query: GET_TREE")
            return self.connection.get_tree()
        except ScratchpadError:
            raise
        except Exception as e:
            self.logger.error(f"GET_TREE failed: {e}")
            raise AdapterError("get windows", str(e)) from e

    def get_all_windows(self) -> List[Window]:
        """Get every client window in tree order.

        Returns:
            List of windows, tiling and floating

        Raises:
            AdapterError: If query fails
        """
        tree = self._get_tree()
        windows = [Window.from_i3_container(con) for con in tree.descendants() if is_client_window(con)]
        self.logger.debug(f"GET_TREE returned {len(windows)} window(s)")
        return windows

    def get_windows_by_workspace(self, workspace: str) -> List[Window]:
        return [w for w in self.get_all_windows() if w.workspace == workspace]

    def get_focused_workspace(self) -> str:
        """Get the focused workspace (GET_WORKSPACES).

        Raises:
            AdapterError: If query fails or no workspace is focused
        """
        try:
            self.logger.debug("IPC query: GET_WORKSPACES")
            workspaces = self.connection.get_workspaces()
        except ScratchpadError:
            raise
        except Exception as e:
            self.logger.error(f"GET_WORKSPACES failed: {e}")
            raise AdapterError("get focused workspace", str(e)) from e

        for ws in workspaces:
            if ws.focused:
                return ws.name
        raise AdapterError("get focused workspace", "no workspace is focused")

    def get_focused_window(self) -> Window:
        """Get the focused window.

        Raises:
            NoFocusedWindowError: If focus is on an empty workspace
            AdapterError: If query fails
        """
        tree = self._get_tree()
        focused = tree.find_focused()
        if focused is None or not is_client_window(focused):
            raise NoFocusedWindowError()
        return Window.from_i3_container(focused)

    def _run(self, command: str, operation: str, window_id: Optional[int] = None,
             workspace: Optional[str] = None) -> None:
        try:
            self.logger.debug(f"IPC command: {command}")
            replies = self.connection.command(command)
        except ScratchpadError:
            raise
        except Exception as e:
            self.logger.error(f"RUN_COMMAND '{command}' failed: {e}")
            raise AdapterError(operation, str(e), window_id=window_id, workspace=workspace) from e

        for reply in replies:
            if not reply.success:
                reason = reply.error or "command rejected"
                self.logger.error(f"RUN_COMMAND '{command}' rejected: {reason}")
                raise AdapterError(operation, reason, window_id=window_id, workspace=workspace)

    def send_command(self, command: str) -> None:
        self._run(command, "send command")

    def move_window_to_workspace(
        self,
        window_id: int,
        workspace: str,
        focus_follows_window: bool = False,
    ) -> None:
        """Move a window to a workspace.

        i3 accepts a move into the current workspace silently, so the
        window's workspace is checked first.

        Raises:
            AlreadyInWorkspaceError: If the window is already there
            AdapterError: If the window is gone or the command fails
        """
        operation = f"move window {window_id} to workspace '{workspace}'"
        con = self._get_tree().find_by_id(window_id)
        if con is None:
            raise AdapterError(operation, "window not found", window_id=window_id, workspace=workspace)

        current = con.workspace()
        if current is not None and current.name == workspace:
            raise AlreadyInWorkspaceError(window_id, workspace)

        commands = [f"[con_id={window_id}] move container to workspace {quote(workspace)}"]
        if focus_follows_window:
            commands.append(f"workspace {quote(workspace)}")
            commands.append(f"[con_id={window_id}] focus")
        self._run("; ".join(commands), operation, window_id=window_id, workspace=workspace)

    def set_layout(self, window_id: int, layout: WindowLayout) -> None:
        state = "enable" if WindowLayout(layout) == WindowLayout.FLOATING else "disable"
        self._run(
            f"[con_id={window_id}] floating {state}",
            f"set layout of window {window_id} to {WindowLayout(layout).value}",
            window_id=window_id,
        )

    def set_focus_by_window_id(self, window_id: int) -> None:
        self._run(f"[con_id={window_id}] focus", f"set focus to window {window_id}", window_id=window_id)

    def focus_next_tiling_window(self, direction: str = "next") -> None:
        if direction not in ("next", "prev"):
            raise ValueError(f"direction must be 'next' or 'prev', got {direction!r}")
        self._run(f"focus tiling; focus {direction}", f"focus {direction} tiling window")

    def resize_window(self, window_id: int, width_percent: int, height_percent: int) -> None:
        self._run(
            f"[con_id={window_id}] resize set {width_percent} ppt {height_percent} ppt, move position center",
            f"resize window {window_id}",
            window_id=window_id,
        )

    def get_socket_path(self) -> str:
        return self.connection.socket_path

    def _version(self) -> Any:
        try:
            self.logger.debug("IPC query: GET_VERSION")
            return self.connection.get_version()
        except ScratchpadError:
            raise
        except Exception as e:
            raise AdapterError("get server version", str(e)) from e

    def get_server_version(self) -> str:
        return self._version().human_readable

    def check_server_version(self) -> None:
        """Validate the server version.

        sway reports its own 1.x version and is always accepted; i3 must be
        at least MIN_I3_VERSION.

        Raises:
            AdapterError: If i3 is too old
        """
        reply = self._version()
        version = (reply.major, reply.minor)
        if reply.major >= 4 and version < MIN_I3_VERSION:
            required = ".".join(str(part) for part in MIN_I3_VERSION)
            raise AdapterError(
                "validate server version",
                f"i3 {reply.human_readable} is older than required {required}",
                code=ErrorCode.UNSUPPORTED_VERSION,
            )
