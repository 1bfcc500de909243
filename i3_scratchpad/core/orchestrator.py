"""Batch orchestration for the move, show, summon and next commands.

Query and parse failures abort a command by raising. Once the target
windows are known, each window is handled on its own: a failure is logged
and reported as an error event, and the batch carries on. A window that is
already where it should be is skipped without any event.
"""

import logging
from typing import List, Optional, Sequence

from ..constants import SCRATCHPAD_WORKSPACE
from ..errors import AlreadyInWorkspaceError, ScratchpadError
from ..logging_config import null_logger
from ..models.output import OutputEvent
from ..models.window import Window
from .client import WindowManager
from .filters import apply_filters, check_properties, parse_filters
from .mover import Geometry, WindowMover
from .querier import WindowQuerier


class ScratchpadOrchestrator:
    """Runs scratchpad commands against a window manager.

    Args:
        client: Window manager adapter, wrapped in DryRunClient for --dry-run
        logger: Logger, defaults to a null logger
    """

    def __init__(self, client: WindowManager, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or null_logger()
        self.querier = WindowQuerier(client, self.logger)
        self.mover = WindowMover(client, self.logger)

    def _failed(self, command: str, action: str, window: Window, error: ScratchpadError,
                target: str = "") -> OutputEvent:
        self.logger.error(f"{command}: {action} failed for window {window.id}: {error}")
        return OutputEvent.for_window(
            command, action, window,
            target_workspace=target,
            result="error",
            message=str(error),
        )

    def _hide(self, command: str, windows: Sequence[Window]) -> List[OutputEvent]:
        events = []
        for window in windows:
            try:
                self.mover.move_window_to_scratchpad(window)
            except AlreadyInWorkspaceError:
                continue
            except ScratchpadError as e:
                events.append(self._failed(command, "move-to-scratchpad", window, e, SCRATCHPAD_WORKSPACE))
                continue
            events.append(OutputEvent.for_window(
                command, "move-to-scratchpad", window,
                target_workspace=SCRATCHPAD_WORKSPACE,
                message=f"Window '{window.describe()}' hidden to scratchpad",
            ))
        return events

    def move(
        self,
        pattern: Optional[str] = None,
        filter_flags: Sequence[str] = (),
        all_windows: bool = False,
        all_floating: bool = False,
    ) -> List[OutputEvent]:
        """Hide matching windows in the scratchpad.

        Args:
            pattern: App name regex; None means the focused window's app
            filter_flags: property=regex filters
            all_windows: With no pattern, hide every window of the focused
                app instead of only the focused window
            all_floating: Hide every floating window (pattern ignored)

        Returns:
            One event per window moved or failed
        """
        focused_id = None
        if all_floating:
            filters = parse_filters(filter_flags)
            check_properties(filters)
            windows = [w for w in self.querier.get_all_floating_windows() if apply_filters(w, filters)]
        else:
            pattern, focused_id = self.querier.resolve_pattern(pattern)
            windows = self.querier.get_filtered_windows(pattern, filter_flags)
            if focused_id is not None and not all_windows:
                windows = [w for w in windows if w.id == focused_id]

        events = self._hide("move", windows)

        hid_focused = any(e.window_id == focused_id and not e.is_error for e in events)
        if focused_id is not None and hid_focused:
            try:
                self.client.focus_next_tiling_window("next")
            except ScratchpadError as e:
                self.logger.warning(f"Unable to focus next tiling window: {e}")

        return events

    def show(self, pattern: str, filter_flags: Sequence[str] = ()) -> List[OutputEvent]:
        """Toggle matching windows into or out of the focused workspace.

        Matches already in the focused workspace are only focused; the rest
        are moved in, and focus goes to the last window actually moved. When
        every match is already here and one of them has focus, the matches
        are hidden to the scratchpad instead.

        Returns:
            One event per window touched
        """
        windows = self.querier.get_filtered_windows(pattern, filter_flags)
        focused_workspace = self.client.get_focused_workspace()

        inside: List[Window] = []
        outside: List[Window] = []
        focused_ids = set()
        for window in windows:
            if self.querier.is_window_in_workspace(window.id, focused_workspace):
                inside.append(window)
                # Checked for every inside window, not just until the first hit
                if self.querier.is_window_focused(window.id):
                    focused_ids.add(window.id)
            else:
                outside.append(window)

        any_focused = bool(focused_ids)
        self.logger.debug(
            f"show '{pattern}': {len(inside)} in '{focused_workspace}', "
            f"{len(outside)} elsewhere, focused: {sorted(focused_ids)}"
        )

        if not outside:
            if any_focused:
                return self._hide("show", inside)
            return self._focus_each("show", inside)

        events = []
        last_moved = None
        for window in outside:
            try:
                self.mover.move_window_to_workspace(window, focused_workspace, should_set_focus=False)
            except AlreadyInWorkspaceError:
                continue
            except ScratchpadError as e:
                events.append(self._failed("show", "move-to-workspace", window, e, focused_workspace))
                continue
            last_moved = window
            events.append(OutputEvent.for_window(
                "show", "move-to-workspace", window,
                target_workspace=focused_workspace,
                message=f"Window '{window.describe()}' is moved to workspace '{focused_workspace}'",
            ))

        if not any_focused and last_moved is not None:
            events.extend(self._focus_each("show", [last_moved]))

        if any_focused:
            events.extend(self._focus_each("show", [w for w in inside if w.id in focused_ids]))
        else:
            events.extend(self._focus_each("show", inside))
        return events

    def _focus_each(self, command: str, windows: Sequence[Window]) -> List[OutputEvent]:
        events = []
        for window in windows:
            try:
                self.mover.focus_window(window)
            except ScratchpadError as e:
                events.append(self._failed(command, "focus", window, e))
                continue
            events.append(OutputEvent.for_window(
                command, "focus", window,
                target_workspace=window.workspace,
                message=f"Window '{window.describe()}' focused",
            ))
        return events

    def summon(
        self,
        pattern: str,
        filter_flags: Sequence[str] = (),
        geometry: Optional[Geometry] = None,
    ) -> List[OutputEvent]:
        """Bring matching windows into the focused workspace and focus them.

        Args:
            pattern: App name regex
            filter_flags: property=regex filters
            geometry: Optional size to float, resize and center each window at

        Returns:
            One event per window touched
        """
        focused_workspace = self.client.get_focused_workspace()
        windows = self.querier.get_filtered_windows(pattern, filter_flags)

        events = []
        for window in windows:
            try:
                try:
                    self.mover.move_window_to_workspace(window, focused_workspace, should_set_focus=True)
                except AlreadyInWorkspaceError:
                    self.mover.focus_window(window)
                if geometry is not None:
                    self.mover.apply_geometry(window, geometry)
            except ScratchpadError as e:
                events.append(self._failed("summon", "summon", window, e, focused_workspace))
                continue
            events.append(OutputEvent.for_window(
                "summon", "summon", window,
                target_workspace=focused_workspace,
                message=f"Window '{window.describe()}' is summoned",
            ))
        return events

    def next(self) -> OutputEvent:
        """Bring the first scratchpad window into the focused workspace.

        Raises:
            NoScratchpadWindowsError: If the scratchpad is empty
            AdapterError: If the move or focus fails
        """
        focused_workspace = self.client.get_focused_workspace()
        window = self.querier.get_next_scratchpad_window()
        self.mover.move_window_to_workspace(window, focused_workspace, should_set_focus=True)
        return OutputEvent.for_window(
            "next", "move-to-workspace", window,
            target_workspace=focused_workspace,
            message=f"Next scratchpad window '{window.describe()}' focused in workspace '{focused_workspace}'",
        )
