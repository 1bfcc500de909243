"""
Error handling for the i3 scratchpad tool.

Every failure the tool reports is a ScratchpadError carrying a structured
code, so the CLI can print a one-line message and tests can assert on the
kind of failure instead of its wording.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for the scratchpad tool.

    Ranges:
    - 1000-1099: Pattern and filter errors
    - 1100-1199: Topology precondition errors
    - 1200-1299: Window manager IPC errors
    - 1300-1399: Configuration and registry errors
    """

    # Pattern and filter errors (1000-1099)
    INVALID_PATTERN = 1000
    MALFORMED_FILTER = 1001
    UNKNOWN_FILTER_PROPERTY = 1002
    INVALID_ARGUMENT = 1003

    # Topology errors (1100-1199)
    NO_FOCUSED_WINDOW = 1100
    NO_SCRATCHPAD_WINDOWS = 1101
    NO_MATCHING_WINDOWS = 1102
    ALREADY_IN_WORKSPACE = 1103

    # IPC errors (1200-1299)
    ADAPTER_FAILURE = 1200
    UNSUPPORTED_VERSION = 1201

    # Configuration errors (1300-1399)
    INVALID_CONFIG = 1300
    REGISTRY_FAILURE = 1301
    MARKER_FAILURE = 1302


class ScratchpadError(Exception):
    """Base exception for scratchpad errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ADAPTER_FAILURE,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize scratchpad error.

        Args:
            message: Human-readable error message
            code: Error code from ErrorCode enum
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class InvalidPatternError(ScratchpadError):
    """A pattern failed to compile as a regular expression."""

    def __init__(self, pattern: str, reason: str, what: str = "pattern"):
        super().__init__(
            message=f"invalid {what} '{pattern}': {reason}",
            code=ErrorCode.INVALID_PATTERN,
            suggestion="Check the regular expression syntax",
            context={"pattern": pattern, "reason": reason}
        )


class MalformedFilterError(ScratchpadError):
    """A filter flag is not of the form property=regex."""

    def __init__(self, flag: str, empty_side: bool = False):
        message = f"invalid filter format: {flag}. Expected format: property=regex"
        if empty_side:
            message += ". Property and pattern cannot be empty"
        super().__init__(
            message=message,
            code=ErrorCode.MALFORMED_FILTER,
            context={"filter": flag}
        )


class UnknownFilterPropertyError(ScratchpadError):
    """A filter names a property that windows do not have."""

    def __init__(self, prop: str):
        super().__init__(
            message=f"unknown filter property: {prop}",
            code=ErrorCode.UNKNOWN_FILTER_PROPERTY,
            context={"property": prop}
        )


class NoFocusedWindowError(ScratchpadError):
    """The window manager reports no focused window."""

    def __init__(self, reason: Optional[str] = None):
        message = "no focused window found"
        if reason:
            message += f": {reason}"
        super().__init__(message=message, code=ErrorCode.NO_FOCUSED_WINDOW)


class NoScratchpadWindowsError(ScratchpadError):
    """The scratchpad workspace holds no windows."""

    def __init__(self):
        super().__init__(
            message="no scratchpad windows found",
            code=ErrorCode.NO_SCRATCHPAD_WINDOWS
        )


class NoMatchingWindowsError(ScratchpadError):
    """No window matched the pattern (and filters)."""

    def __init__(self, pattern: str, with_filters: bool = False):
        message = f"no windows matched the pattern '{pattern}'"
        if with_filters:
            message += " with the given filters"
        super().__init__(
            message=message,
            code=ErrorCode.NO_MATCHING_WINDOWS,
            context={"pattern": pattern, "with_filters": with_filters}
        )


class AdapterError(ScratchpadError):
    """A window manager call failed."""

    def __init__(
        self,
        operation: str,
        reason: str,
        window_id: Optional[int] = None,
        workspace: Optional[str] = None,
        code: ErrorCode = ErrorCode.ADAPTER_FAILURE
    ):
        """
        Initialize adapter error.

        Args:
            operation: Operation that failed (e.g., "move window")
            reason: Reason for failure
            window_id: Target window, if any
            workspace: Target workspace, if any
            code: Error code, ADAPTER_FAILURE unless more specific
        """
        context: Dict[str, Any] = {"operation": operation, "reason": reason}
        if window_id is not None:
            context["window_id"] = window_id
        if workspace is not None:
            context["workspace"] = workspace

        super().__init__(
            message=f"unable to {operation}: {reason}",
            code=code,
            suggestion="Check that i3 or sway is running and reachable",
            context=context
        )
        self.operation = operation
        self.window_id = window_id
        self.workspace = workspace


class AlreadyInWorkspaceError(ScratchpadError):
    """The window already belongs to the target workspace.

    Callers treat this as a benign no-op.
    """

    def __init__(self, window_id: int, workspace: str):
        super().__init__(
            message=f"window {window_id} already belongs to workspace '{workspace}'",
            code=ErrorCode.ALREADY_IN_WORKSPACE,
            context={"window_id": window_id, "workspace": workspace}
        )
        self.window_id = window_id
        self.workspace = workspace


class ConfigurationError(ScratchpadError):
    """An environment setting has an invalid value."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            message=f"invalid setting {setting}: {reason}",
            code=ErrorCode.INVALID_CONFIG,
            context={"setting": setting, "reason": reason}
        )


class RegistryError(ScratchpadError):
    """The sticky registry could not be read, written or updated."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(
            message=message,
            code=ErrorCode.REGISTRY_FAILURE,
            context={"path": path} if path else None
        )
