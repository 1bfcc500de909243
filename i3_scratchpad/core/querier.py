"""Window queries: pattern matching, scratchpad lookups, membership checks.

Every method re-queries the window manager; nothing is cached between
calls.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from ..constants import SCRATCHPAD_WORKSPACE
from ..errors import (
    InvalidPatternError,
    NoMatchingWindowsError,
    NoScratchpadWindowsError,
    ScratchpadError,
)
from ..logging_config import null_logger
from ..models.window import Window
from .client import WindowManager
from .filters import apply_filters, check_properties, parse_filters


def compile_pattern(pattern: str, what: str = "app-name-pattern") -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e), what=what) from e


class WindowQuerier:
    """Resolves patterns and filters into windows.

    Args:
        client: Window manager adapter
        logger: Logger, defaults to a null logger
    """

    def __init__(self, client: WindowManager, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or null_logger()

    def get_filtered_windows(self, pattern: str, filter_flags: Sequence[str] = ()) -> List[Window]:
        """Windows whose app name matches pattern and that satisfy every filter.

        Args:
            pattern: Regex searched in each window's app name
            filter_flags: property=regex strings

        Returns:
            Matching windows in window manager order

        Raises:
            InvalidPatternError: If the pattern or a filter regex is invalid
            MalformedFilterError: If a filter flag is malformed
            UnknownFilterPropertyError: If a filter names an unknown property
            NoMatchingWindowsError: If nothing matches
            AdapterError: If the window list cannot be fetched
        """
        regex = compile_pattern(pattern)
        filters = parse_filters(filter_flags)
        check_properties(filters)

        windows = self.client.get_all_windows()
        self.logger.debug(f"Matching {len(windows)} window(s) against '{pattern}' with {len(filters)} filter(s)")

        matched = [
            w for w in windows
            if regex.search(w.app_name) and apply_filters(w, filters)
        ]

        if not matched:
            raise NoMatchingWindowsError(pattern, with_filters=bool(filters))

        self.logger.info(f"Pattern '{pattern}' matched {len(matched)} window(s)")
        return matched

    def get_all_floating_windows(self) -> List[Window]:
        return [w for w in self.client.get_all_windows() if w.is_floating]

    def get_scratchpad_windows(self) -> List[Window]:
        """Windows in the scratchpad workspace plus every floating window.

        Deduplicated by id, scratchpad workspace first. A failure listing
        the scratchpad workspace is logged and tolerated.
        """
        try:
            windows = list(self.client.get_windows_by_workspace(SCRATCHPAD_WORKSPACE))
        except ScratchpadError as e:
            self.logger.warning(f"Unable to list workspace '{SCRATCHPAD_WORKSPACE}': {e}")
            windows = []

        seen = {w.id for w in windows}
        for w in self.get_all_floating_windows():
            if w.id not in seen:
                seen.add(w.id)
                windows.append(w)
        return windows

    def get_next_scratchpad_window(self) -> Window:
        """First window of the scratchpad workspace.

        The order is the window manager's, not recency.

        Raises:
            NoScratchpadWindowsError: If the scratchpad is empty
        """
        windows = self.client.get_windows_by_workspace(SCRATCHPAD_WORKSPACE)
        if not windows:
            raise NoScratchpadWindowsError()
        return windows[0]

    def is_window_in_workspace(self, window_id: int, workspace: str) -> bool:
        return any(w.id == window_id for w in self.client.get_windows_by_workspace(workspace))

    def is_window_in_focused_workspace(self, window_id: int) -> bool:
        workspace = self.client.get_focused_workspace()
        return self.is_window_in_workspace(window_id, workspace)

    def is_window_focused(self, window_id: int) -> bool:
        """Compare window_id with the focused window.

        Raises:
            NoFocusedWindowError: If no window is focused
        """
        return self.client.get_focused_window().id == window_id

    def resolve_pattern(self, pattern: Optional[str]) -> Tuple[str, Optional[int]]:
        """Apply the focused-window default to a pattern argument.

        Args:
            pattern: Pattern given on the command line, or None

        Returns:
            (pattern, focused window id); the id is None when a pattern was given

        Raises:
            NoFocusedWindowError: If no pattern was given and nothing is focused
        """
        if pattern is not None and pattern.strip():
            return pattern, None

        focused = self.client.get_focused_window()
        resolved = f"^{re.escape(focused.app_name)}$"
        self.logger.debug(f"No pattern given, using focused window {focused.id}: {resolved}")
        return resolved, focused.id
