"""Data models for i3-scratchpad."""

from .output import OutputEvent
from .window import Window, WindowLayout, Workspace

__all__ = ["OutputEvent", "Window", "WindowLayout", "Workspace"]
