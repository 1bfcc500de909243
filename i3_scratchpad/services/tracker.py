"""Sticky window tracker.

i3 has no notion of a window that follows the user across workspaces, and
no event dedicated to it, so the tracker polls the focused workspace and
moves every window matching a registered pattern into it whenever it
changes. The loop ends when the registry becomes empty.
"""

import logging
import re
import time
from typing import Callable, List, Optional, Sequence

from ..constants import STICKY_POLL_INTERVAL
from ..core.client import WindowManager
from ..errors import AlreadyInWorkspaceError, RegistryError, ScratchpadError
from ..logging_config import null_logger
from ..models.window import Window
from .registry import StickyRegistry


class StickyTracker:
    """Keeps sticky windows on the focused workspace.

    Args:
        client: Window manager adapter
        logger: Logger, defaults to a null logger
        sleep: Sleep function, replaceable in tests
    """

    def __init__(
        self,
        client: WindowManager,
        logger: Optional[logging.Logger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.logger = logger or null_logger()
        self.sleep = sleep

    def get_matching_windows(self, patterns: Sequence[str]) -> List[Window]:
        """Windows whose app name matches any pattern.

        Invalid patterns are logged and skipped.
        """
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                self.logger.warning(f"Skipping invalid sticky pattern '{pattern}': {e}")

        if not compiled:
            return []

        return [
            w for w in self.client.get_all_windows()
            if any(regex.search(w.app_name) for regex in compiled)
        ]

    def move_windows_to_workspace(self, windows: Sequence[Window], workspace: str) -> int:
        """Move windows not already on workspace into it, without focus.

        Returns:
            Number of windows moved
        """
        moved = 0
        for window in windows:
            if window.workspace == workspace:
                continue
            try:
                self.client.move_window_to_workspace(window.id, workspace)
            except AlreadyInWorkspaceError:
                continue
            except ScratchpadError as e:
                self.logger.error(f"Unable to move sticky window {window.id} to '{workspace}': {e}")
                continue
            moved += 1
            self.logger.info(f"Sticky window {window.id} ({window.app_name}) moved to '{workspace}'")
        return moved

    def follow(
        self,
        registry: StickyRegistry,
        interval: float = STICKY_POLL_INTERVAL,
        max_iterations: Optional[int] = None,
    ) -> None:
        """Poll until the registry is empty.

        The registry is reloaded on every tick so `sticky remove` from
        another process is picked up. The first tick only records the
        focused workspace.

        Args:
            registry: Sticky patterns
            interval: Seconds between ticks
            max_iterations: Stop after this many ticks (None runs forever)
        """
        last_workspace: Optional[str] = None
        iteration = 0

        while max_iterations is None or iteration < max_iterations:
            iteration += 1

            try:
                registry.load()
            except RegistryError as e:
                # Previously loaded patterns stay in effect
                self.logger.error(f"Unable to reload sticky registry: {e}")

            if registry.is_empty():
                self.logger.info("Sticky registry is empty, stopping tracker")
                return

            try:
                workspace = self.client.get_focused_workspace()
            except ScratchpadError as e:
                self.logger.error(f"Unable to get focused workspace: {e}")
                self.sleep(interval)
                continue

            if last_workspace is not None and workspace != last_workspace:
                self.logger.debug(f"Workspace changed '{last_workspace}' -> '{workspace}'")
                try:
                    windows = self.get_matching_windows(registry.patterns)
                except ScratchpadError as e:
                    # Baseline is kept so the change is retried on the next tick
                    self.logger.error(f"Unable to list windows: {e}")
                    self.sleep(interval)
                    continue
                self.move_windows_to_workspace(windows, workspace)

            last_workspace = workspace
            self.sleep(interval)
