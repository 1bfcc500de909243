"""Single-window move primitives.

Each primitive is a short sequence of adapter calls. Batch behavior
(failure isolation, focus rules) lives in the orchestrator.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..constants import SCRATCHPAD_WORKSPACE
from ..errors import AdapterError, AlreadyInWorkspaceError, ErrorCode, ScratchpadError
from ..logging_config import null_logger
from ..models.window import Window, WindowLayout
from .client import WindowManager


GEOMETRY_RE = re.compile(r"^(\d+)%x(\d+)%$")


def reason_of(error: ScratchpadError) -> str:
    """Underlying reason of an adapter error, without its operation prefix."""
    return str(error.context.get("reason", error.message))


@dataclass(frozen=True)
class Geometry:
    """Window size as percentages of the output, e.g. 60%x90%."""

    width_percent: int
    height_percent: int

    @classmethod
    def parse(cls, value: str) -> "Geometry":
        """Parse WIDTH%xHEIGHT%.

        Raises:
            ScratchpadError: If the value is malformed or out of 1-100
        """
        match = GEOMETRY_RE.match(value.strip())
        if not match:
            raise ScratchpadError(
                f"invalid geometry '{value}': expected WIDTH%xHEIGHT%, e.g. 60%x90%",
                code=ErrorCode.INVALID_ARGUMENT,
            )
        width, height = int(match.group(1)), int(match.group(2))
        for percent in (width, height):
            if not 1 <= percent <= 100:
                raise ScratchpadError(
                    f"invalid geometry '{value}': percentages must be between 1 and 100",
                    code=ErrorCode.INVALID_ARGUMENT,
                )
        return cls(width, height)

    def __str__(self) -> str:
        return f"{self.width_percent}%x{self.height_percent}%"


class WindowMover:
    """Moves and focuses single windows.

    Args:
        client: Window manager adapter (possibly a DryRunClient)
        logger: Logger, defaults to a null logger
    """

    def __init__(self, client: WindowManager, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or null_logger()

    def move_window_to_scratchpad(self, window: Window) -> None:
        """Hide a window in the scratchpad workspace and float it.

        The floating layout is best effort; failing to set it only warns.

        Raises:
            AlreadyInWorkspaceError: If the window is already hidden
            AdapterError: If the move fails
        """
        self.client.move_window_to_workspace(window.id, SCRATCHPAD_WORKSPACE)

        try:
            self.client.set_layout(window.id, WindowLayout.FLOATING)
        except ScratchpadError as e:
            self.logger.warning(f"Unable to set layout of window {window.id} to floating: {e}")

        self.logger.info(f"Window {window.id} ({window.describe()}) hidden to scratchpad")

    def move_window_to_workspace(self, window: Window, workspace: str, should_set_focus: bool) -> None:
        """Move a window to a workspace, optionally focusing it afterward.

        Raises:
            ValueError: If window or workspace is None
            AlreadyInWorkspaceError: If the window is already there
            AdapterError: If the move or focus fails
        """
        if window is None:
            raise ValueError("window is None")
        if workspace is None:
            raise ValueError("workspace is None")

        try:
            self.client.move_window_to_workspace(window.id, workspace)
        except AlreadyInWorkspaceError:
            raise
        except ScratchpadError as e:
            raise AdapterError(
                f"move window {window.id} to workspace '{workspace}'",
                reason_of(e),
                window_id=window.id,
                workspace=workspace,
            ) from e

        if should_set_focus:
            self.focus_window(window)

        self.logger.info(f"Window {window.id} ({window.describe()}) moved to workspace '{workspace}'")

    def focus_window(self, window: Window) -> None:
        try:
            self.client.set_focus_by_window_id(window.id)
        except ScratchpadError as e:
            raise AdapterError(f"set focus to window {window.id}", reason_of(e), window_id=window.id) from e

    def apply_geometry(self, window: Window, geometry: Geometry) -> None:
        """Float, resize and center a window.

        Raises:
            AdapterError: If the resize fails
        """
        try:
            self.client.set_layout(window.id, WindowLayout.FLOATING)
        except ScratchpadError as e:
            self.logger.warning(f"Unable to set layout of window {window.id} to floating: {e}")

        try:
            self.client.resize_window(window.id, geometry.width_percent, geometry.height_percent)
        except ScratchpadError as e:
            raise AdapterError(f"resize window {window.id} to {geometry}", reason_of(e), window_id=window.id) from e
