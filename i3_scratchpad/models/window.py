"""
Window and workspace models.

Models are snapshots of i3 IPC state taken by a single query; nothing keeps
them up to date, so every operation re-queries before acting.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class WindowLayout(str, Enum):
    """Layout of a window."""
    TILING = "tiling"
    FLOATING = "floating"


FLOATING_FLAGS = ("user_on", "auto_on")


def _is_floating(container: Any) -> bool:
    if getattr(container, "type", None) == "floating_con":
        return True
    if getattr(container, "floating", None) in FLOATING_FLAGS:
        return True
    parent = getattr(container, "parent", None)
    return getattr(parent, "type", None) == "floating_con"


class Window(BaseModel):
    """Represents a managed window from i3 IPC."""

    id: int = Field(..., description="i3 container ID")
    app_name: str = Field("", description="WM_CLASS class (X11) or app_id (Wayland)")
    window_title: str = Field("", description="Window title")
    app_bundle_id: str = Field("", description="app_id (Wayland) or WM_CLASS instance (X11)")
    workspace: str = Field("", description="Name of the workspace holding the window")
    layout: WindowLayout = Field(WindowLayout.TILING, description="tiling or floating")

    @property
    def is_floating(self) -> bool:
        return self.layout == WindowLayout.FLOATING

    def describe(self) -> str:
        """Short human-readable label used in confirmations."""
        if self.window_title:
            return f"{self.app_name} | {self.window_title}"
        return self.app_name or str(self.id)

    @classmethod
    def from_i3_container(cls, container: Any, workspace: Optional[str] = None) -> "Window":
        """Create Window from an i3ipc Con object.

        Args:
            container: i3ipc Con for a client window
            workspace: Workspace name, looked up from the tree when omitted

        Returns:
            Window snapshot
        """
        window_class = getattr(container, "window_class", None) or ""
        window_instance = getattr(container, "window_instance", None) or ""
        app_id = getattr(container, "app_id", None) or ""

        if workspace is None:
            ws = container.workspace()
            workspace = ws.name if ws else ""

        return cls(
            id=container.id,
            app_name=window_class or app_id,
            window_title=container.name or "",
            app_bundle_id=app_id or window_instance,
            workspace=workspace,
            layout=WindowLayout.FLOATING if _is_floating(container) else WindowLayout.TILING,
        )


class Workspace(BaseModel):
    """Represents an i3 workspace."""

    name: str = Field(..., description="Workspace name")
    focused: bool = Field(False, description="Whether the workspace has focus")
