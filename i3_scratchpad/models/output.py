"""Normalized result record emitted by commands."""

from typing import Optional

from pydantic import BaseModel, Field

from .window import Window


FIELDS = (
    "command",
    "action",
    "window_id",
    "app_name",
    "workspace",
    "target_workspace",
    "result",
    "message",
)


class OutputEvent(BaseModel):
    """One per-window outcome, rendered by the output formatter."""

    command: str = Field(..., description="CLI command that produced the event")
    action: str = Field("", description="What was done, e.g. move-to-scratchpad")
    window_id: Optional[int] = Field(None, description="Affected window")
    app_name: str = Field("")
    workspace: str = Field("", description="Workspace the window was in")
    target_workspace: str = Field("", description="Workspace the window was sent to")
    result: str = Field("ok", description="ok, error or none")
    message: str = Field("")

    @property
    def is_error(self) -> bool:
        return self.result == "error"

    @classmethod
    def for_window(cls, command: str, action: str, window: Window, **kwargs) -> "OutputEvent":
        return cls(
            command=command,
            action=action,
            window_id=window.id,
            app_name=window.app_name,
            workspace=window.workspace,
            **kwargs,
        )

    def as_row(self) -> dict:
        """Field values as strings, in column order."""
        data = self.model_dump()
        return {
            name: "" if data[name] is None else str(data[name])
            for name in FIELDS
        }
