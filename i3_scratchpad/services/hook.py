"""Workspace-change hook that pulls windows out of the scratchpad.

i3/sway are configured to run `i3-scratchpad hook pull-window PREV FOCUSED`
on workspace changes. When the user lands on the scratchpad workspace, the
focused window is sent back to where they came from, unless a programmatic
move into the scratchpad is in flight (signalled by the moving marker).
"""

import logging
import os
from pathlib import Path
from typing import Optional

from ..constants import MOVING_MARKER_PATH, SCRATCHPAD_WORKSPACE
from ..core.client import WindowManager
from ..core.mover import reason_of
from ..errors import AdapterError, ErrorCode, ScratchpadError
from ..logging_config import null_logger


def marker_error(path: Path, error: OSError) -> ScratchpadError:
    return ScratchpadError(
        message=f"unable to remove moving marker {path}: {error.strerror or error}",
        code=ErrorCode.MARKER_FAILURE,
        suggestion=f"Check permissions on {path.parent}",
        context={"path": str(path)},
    )


class MovingMarker:
    """Marker file whose presence means a move to the scratchpad is in flight.

    Other processes rely on the fixed path, so the flag stays a file.
    """

    def __init__(self, path: Path = MOVING_MARKER_PATH):
        self.path = Path(path)

    def set(self) -> None:
        self.path.touch()

    def is_set(self) -> bool:
        return self.path.exists()

    def take(self) -> bool:
        """Consume the marker atomically.

        The marker is renamed to a name unique to this process before being
        deleted, so of two concurrent hooks exactly one sees it.

        Returns:
            True if the marker was present and is now consumed

        Raises:
            ScratchpadError: If the marker exists but cannot be removed
        """
        claimed = self.path.with_name(f"{self.path.name}.{os.getpid()}")
        try:
            os.rename(self.path, claimed)
        except FileNotFoundError:
            return False
        except OSError as e:
            raise marker_error(self.path, e) from e

        try:
            claimed.unlink(missing_ok=True)
        except OSError as e:
            raise marker_error(claimed, e) from e
        return True


class PullWindowHook:
    """Decides whether to pull the focused window back out of the scratchpad.

    Args:
        client: Window manager adapter
        marker: Moving marker, defaults to the well-known path
        logger: Logger, defaults to a null logger
    """

    def __init__(
        self,
        client: WindowManager,
        marker: Optional[MovingMarker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.marker = marker or MovingMarker()
        self.logger = logger or null_logger()

    def run(self, previous_workspace: str, focused_workspace: str) -> bool:
        """Handle one workspace-change event.

        Args:
            previous_workspace: Workspace focus left
            focused_workspace: Workspace focus landed on

        Returns:
            True if a window was pulled, False for every no-op outcome

        Raises:
            NoFocusedWindowError: If no window is focused
            AdapterError: If a window manager call fails
        """
        self.logger.debug(f"pull-window: '{previous_workspace}' -> '{focused_workspace}'")

        if previous_workspace == SCRATCHPAD_WORKSPACE:
            return False
        if focused_workspace != SCRATCHPAD_WORKSPACE:
            return False

        try:
            window = self.client.get_focused_window()
        except ScratchpadError as e:
            self.logger.error(f"pull-window: unable to get focused window: {e}")
            raise

        if window.workspace != SCRATCHPAD_WORKSPACE:
            self.logger.debug(f"pull-window: window {window.id} is in '{window.workspace}', ignoring stale event")
            return False

        if self.marker.take():
            self.logger.info(f"pull-window: move to scratchpad in flight, leaving window {window.id}")
            return False

        try:
            self.client.move_window_to_workspace(window.id, previous_workspace, focus_follows_window=True)
        except ScratchpadError as e:
            self.logger.error(f"Error: unable to move window {window.id} to workspace {previous_workspace}: {e}")
            raise AdapterError(
                f"move window {window.id} to workspace '{previous_workspace}'",
                reason_of(e),
                window_id=window.id,
                workspace=previous_workspace,
            ) from e

        self.logger.info(f"pull-window: window {window.id} pulled to '{previous_workspace}'")
        return True
