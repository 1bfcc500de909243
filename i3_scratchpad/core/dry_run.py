"""Dry-run mode support.

DryRunClient wraps a WindowManager and lets only read-only queries reach
it. Every other operation is recorded and printed as a "[dry-run] ..." line
instead of being executed, so a mutating method added to the interface is
intercepted without touching this module.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple

import click

from .client import WindowManager


READ_ONLY_OPERATIONS = frozenset({
    "get_all_windows",
    "get_windows_by_workspace",
    "get_focused_window",
    "get_focused_workspace",
    "get_socket_path",
    "get_server_version",
    "check_server_version",
})


@dataclass
class DryRunChange:
    """A window manager call that was not executed.

    Attributes:
        operation: Interface method name
        args: Positional arguments
        kwargs: Keyword arguments
    """

    operation: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Format change as human-readable string."""
        a = self.args
        kw = self.kwargs
        if self.operation == "move_window_to_workspace" and len(a) >= 2:
            text = f"move window {a[0]} to workspace '{a[1]}'"
            if kw.get("focus_follows_window") or (len(a) > 2 and a[2]):
                text += " (focus follows window)"
            return text
        if self.operation == "set_layout" and len(a) >= 2:
            return f"set layout of window {a[0]} to {getattr(a[1], 'value', a[1])}"
        if self.operation == "set_focus_by_window_id" and a:
            return f"set focus to window {a[0]}"
        if self.operation == "focus_next_tiling_window":
            direction = a[0] if a else kw.get("direction", "next")
            return f"focus {direction} tiling window"
        if self.operation == "resize_window" and len(a) >= 3:
            return f"resize window {a[0]} to {a[1]}% x {a[2]}%"
        if self.operation == "send_command" and a:
            return f"send command '{a[0]}'"
        if self.operation == "close_connection":
            return "close connection"

        params = [repr(arg) for arg in a] + [f"{k}={v!r}" for k, v in kw.items()]
        return f"{self.operation}({', '.join(params)})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "operation": self.operation,
            "description": str(self),
        }


class DryRunClient:
    """WindowManager proxy that executes only read-only queries.

    Attributes:
        client: Wrapped window manager
        changes: Intercepted calls, in order
    """

    def __init__(self, client: WindowManager, echo: Callable[[str], None] = click.echo):
        self.client = client
        self.echo = echo
        self.changes: List[DryRunChange] = []

    def __getattr__(self, name: str) -> Any:
        target = getattr(self.client, name)
        if name in READ_ONLY_OPERATIONS or not callable(target):
            return target

        def intercepted(*args: Any, **kwargs: Any) -> None:
            change = DryRunChange(operation=name, args=args, kwargs=kwargs)
            self.changes.append(change)
            self.echo(f"[dry-run] {change}")

        return intercepted


WindowManager.register(DryRunClient)
